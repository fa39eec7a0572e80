"""Bounded-memory conversation wrapper around chat-completion models."""

from .errors import (
    ConversationError,
    ConfigurationError,
    ModelInvocationError,
    InvalidArgumentError,
)
from .messages import Message, Role
from .memory import BoundedConversationMemory, DEFAULT_MAX_MESSAGES
from .llm_client import ModelClient, ChatModelClient
from .prompt_builder import PromptBuilder
from .config_loader import ConfigLoader
from .session import ConversationSession, split_questions, QUESTION_DELIMITER

__all__ = [
    "ConversationError",
    "ConfigurationError",
    "ModelInvocationError",
    "InvalidArgumentError",
    "Message",
    "Role",
    "BoundedConversationMemory",
    "DEFAULT_MAX_MESSAGES",
    "ModelClient",
    "ChatModelClient",
    "PromptBuilder",
    "ConfigLoader",
    "ConversationSession",
    "split_questions",
    "QUESTION_DELIMITER",
]
