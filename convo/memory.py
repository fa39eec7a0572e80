from collections import deque
from typing import Deque, Iterator, Tuple

from .errors import InvalidArgumentError
from .messages import Message

DEFAULT_MAX_MESSAGES = 10


class BoundedConversationMemory:
    """Fixed-capacity chat history that evicts the oldest messages first."""

    def __init__(self, max_messages: int = DEFAULT_MAX_MESSAGES):
        if isinstance(max_messages, bool) or not isinstance(max_messages, int) or max_messages <= 0:
            raise InvalidArgumentError(f"max_messages must be a positive integer, got {max_messages!r}")
        self._max_messages = max_messages
        self._messages: Deque[Message] = deque()

    @property
    def max_messages(self) -> int:
        return self._max_messages

    def append(self, message: Message) -> None:
        """Add a message to the end, dropping from the front while over capacity."""
        self._messages.append(message)
        while len(self._messages) > self._max_messages:
            self._messages.popleft()

    def snapshot(self) -> Tuple[Message, ...]:
        """Return the messages in chronological order, detached from the memory."""
        return tuple(self._messages)

    def clear(self) -> None:
        """Remove all messages. Capacity is kept."""
        self._messages.clear()

    def render(self) -> str:
        if not self._messages:
            return "(no messages)"
        return "\n".join(f"{i}. {msg}" for i, msg in enumerate(self._messages, 1))

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.snapshot())

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"BoundedConversationMemory(max_messages={self._max_messages}, size={len(self)})"
