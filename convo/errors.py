"""Exceptions raised by the conversation core."""


class ConversationError(Exception):
    """Base class for all conversation errors."""


class ConfigurationError(ConversationError):
    """Missing or invalid credential, model identifier or config content."""


class ModelInvocationError(ConversationError):
    """The model call failed (network, auth, quota or malformed response)."""


class InvalidArgumentError(ConversationError, ValueError):
    """An operation was called with an argument outside its domain."""
