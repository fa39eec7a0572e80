"""
Model-invocation clients.

The conversation core talks to the model through ``ModelClient``, a single
method taking an ordered sequence of messages and returning the reply text.
``ChatModelClient`` implements it on top of LangChain's ``ChatOpenAI`` and
works with OpenAI or any OpenAI-compatible endpoint (e.g. OpenRouter).
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from langchain_openai import ChatOpenAI

from .errors import ConfigurationError, ModelInvocationError
from .messages import Message


class ModelClient(ABC):
    """Minimal model interface: ordered messages in, reply text out."""

    @abstractmethod
    def generate(self, messages: Sequence[Message]) -> str:
        """
        Send messages to the model and return its reply.

        Raises:
            ModelInvocationError: If the call fails
        """


class ChatModelClient(ModelClient):
    """Client for chat-completion APIs using LangChain's ChatOpenAI."""

    def __init__(self, api_key: str, model: str, base_url: Optional[str] = None, **kwargs: Any):
        """
        Args:
            api_key: API credential for the endpoint
            model: Model identifier (e.g., gpt-4o-mini, anthropic/claude-3.5-sonnet)
            base_url: Optional OpenAI-compatible endpoint
            **kwargs: Additional API parameters (temperature, max_tokens, etc.)

        Raises:
            ConfigurationError: If api_key or model is empty
        """
        if not api_key or not str(api_key).strip():
            raise ConfigurationError("API key is required")
        if not model or not str(model).strip():
            raise ConfigurationError("Model identifier is required")

        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.kwargs = kwargs
        self._chat_model: Optional[ChatOpenAI] = None  # built on first call

    def _get_chat_model(self) -> ChatOpenAI:
        if self._chat_model is None:
            params = dict(api_key=self.api_key, model=self.model, **self.kwargs)
            if self.base_url:
                params["base_url"] = self.base_url
            self._chat_model = ChatOpenAI(**params)
        return self._chat_model

    def generate(self, messages: Sequence[Message]) -> str:
        lc_messages = [message.to_langchain() for message in messages]
        try:
            response = self._get_chat_model().invoke(lc_messages)
        except Exception as e:
            raise ModelInvocationError(f"Model call failed: {e}") from e

        content = getattr(response, "content", None)
        if not isinstance(content, str):
            raise ModelInvocationError(
                f"Invalid response shape from {self.model}: {type(content).__name__} content"
            )
        return content

    def __repr__(self) -> str:
        return f"ChatModelClient(model={self.model!r}, base_url={self.base_url!r})"
