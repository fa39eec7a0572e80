from dataclasses import dataclass
from enum import Enum
from typing import Dict

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from .errors import InvalidArgumentError


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


_TO_LANGCHAIN = {
    Role.SYSTEM: SystemMessage,
    Role.USER: HumanMessage,
    Role.ASSISTANT: AIMessage,
}


@dataclass(frozen=True)
class Message:
    """A single conversational turn."""

    role: Role
    text: str

    def __post_init__(self):
        try:
            object.__setattr__(self, "role", Role(self.role))
        except ValueError:
            raise InvalidArgumentError(f"Unknown role: {self.role!r}") from None

    @classmethod
    def system(cls, text: str) -> "Message":
        return cls(Role.SYSTEM, text)

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(Role.USER, text)

    @classmethod
    def assistant(cls, text: str) -> "Message":
        return cls(Role.ASSISTANT, text)

    def to_langchain(self) -> BaseMessage:
        """Convert to the LangChain message class for this role."""
        return _TO_LANGCHAIN[self.role](content=self.text)

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.text}

    def __str__(self) -> str:
        return f"{self.role.value}: {self.text}"
