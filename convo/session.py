"""
Conversation session.

This module contains the business logic for:
- Building the outbound request from the rolling message window
- Calling the model client
- Generating one-shot sample questions
- Resetting and rendering the conversation
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from .config_loader import model_kwargs_from
from .errors import InvalidArgumentError, ModelInvocationError
from .llm_client import ChatModelClient, ModelClient
from .memory import DEFAULT_MAX_MESSAGES, BoundedConversationMemory
from .messages import Message, Role
from .prompt_builder import PromptBuilder

QUESTION_DELIMITER = "%%"

_ROLE_ICONS = {
    Role.SYSTEM: "🔧 System",
    Role.USER: "👤 User",
    Role.ASSISTANT: "🤖 AI",
}


def split_questions(text: str, delimiter: str = QUESTION_DELIMITER) -> List[str]:
    """
    Split a model reply into questions.

    Segments are stripped of surrounding whitespace and empty segments
    (e.g. after a trailing delimiter) are dropped.
    """
    return [segment.strip() for segment in text.split(delimiter) if segment.strip()]


def _require_positive(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError(f"{name} must be a positive integer, got {value!r}")


class ConversationSession:
    """
    A conversation with a chat model over a bounded rolling window.

    Callers ask questions with a context (instructions for how the model
    should respond); the whole retained window is sent on every question,
    so follow-ups can refer to earlier turns.
    """

    def __init__(
        self,
        credential: str,
        model_identifier: str,
        *,
        max_messages: int = DEFAULT_MAX_MESSAGES,
        client: Optional[ModelClient] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        logger: Optional[logging.Logger] = None,
        **model_kwargs: Any,
    ):
        """
        Initialize a session.

        Args:
            credential: API key handed to the model client
            model_identifier: Model name handed to the model client
            max_messages: Capacity of the rolling window
            client: Pre-built model client; when given, credential and
                model_identifier are not used
            prompt_builder: Builder for the sample-question instruction
            logger: Optional logger instance
            **model_kwargs: Extra parameters for ChatModelClient (temperature,
                max_tokens, base_url, ...)

        Raises:
            ConfigurationError: From the model client, on empty credential or model
        """
        self.memory = BoundedConversationMemory(max_messages)
        self.client = client or ChatModelClient(credential, model_identifier, **model_kwargs)
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.model_identifier = model_identifier
        # Use app.prompt logger category for prompt logging
        self.logger = logger or logging.getLogger("app.prompt")
        self.console = Console()
        self.log_full_history = False

    @classmethod
    def from_config(cls, config: Mapping[str, Any], credential: str, **kwargs: Any) -> "ConversationSession":
        """Build a session from a loaded configuration mapping."""
        model_kwargs = model_kwargs_from(config)
        model_kwargs.update(kwargs)
        return cls(
            credential,
            config["model"],
            max_messages=config.get("max_messages", DEFAULT_MAX_MESSAGES),
            **model_kwargs,
        )

    @property
    def max_messages(self) -> int:
        return self.memory.max_messages

    @property
    def messages(self) -> Tuple[Message, ...]:
        return self.memory.snapshot()

    def ask_question(self, context: str, question: str) -> str:
        """
        Ask a question with a context and return the model's reply.

        The context and question are added to memory before the call and
        stay there if the call fails; the reply is added only on success.

        Args:
            context: System instruction for this question
            question: The user's question

        Returns:
            Reply text

        Raises:
            ModelInvocationError: If the model call fails
        """
        size_before = len(self.memory)
        self.memory.append(Message.system(context))
        self.memory.append(Message.user(question))
        request = self.memory.snapshot()
        evicted = size_before + 2 - len(request)

        self._log_request(request, current_turn=request[-2:], evicted=evicted)

        reply = self._invoke(request)

        self.memory.append(Message.assistant(reply))
        self.logger.debug(f"Reply ({len(reply)} chars), window now {len(self.memory)}/{self.max_messages}")
        return reply

    def generate_sample_questions(self, context: str, count: int, max_words: int) -> List[str]:
        """
        Ask the model for sample questions about a context.

        Sent as a one-shot prompt; the rolling memory is not used or changed.

        Args:
            context: Topic the questions should be about
            count: Number of questions requested
            max_words: Maximum words per question

        Returns:
            Questions parsed from the reply, in order. The number returned
            is whatever the model produced, not necessarily `count`.

        Raises:
            InvalidArgumentError: If count or max_words is not a positive integer
            ModelInvocationError: If the model call fails
        """
        _require_positive("count", count)
        _require_positive("max_words", max_words)

        if self.prompt_builder.check_and_reload()[0]:
            self.logger.debug(f"Sample-question template loaded from {self.prompt_builder.template_path}")
        instruction = self.prompt_builder.render_sample_instruction(
            count=count, max_words=max_words, delimiter=QUESTION_DELIMITER
        )
        prompt = (Message.system(instruction), Message.user(context))
        self._log_request(prompt, current_turn=prompt)

        reply = self._invoke(prompt)

        questions = split_questions(reply)
        if len(questions) != count:
            self.logger.debug(f"Requested {count} sample questions, model returned {len(questions)}")
        return questions

    def reset_conversation(self) -> None:
        """Clear the conversation so the next question starts fresh."""
        self.memory.clear()

    def render(self) -> str:
        """Human-readable listing of the messages thus far."""
        return self.memory.render()

    def history(self) -> List[Dict[str, str]]:
        """
        Get conversation history.

        Returns:
            List of message dictionaries with 'role' and 'content'
        """
        return [message.to_dict() for message in self.memory]

    def _invoke(self, request: Sequence[Message]) -> str:
        try:
            return self.client.generate(request)
        except ModelInvocationError as e:
            self.logger.error(f"Error calling model: {e}")
            raise
        except Exception as e:
            self.logger.error(f"Error calling model: {e}")
            raise ModelInvocationError(f"Model call failed: {e}") from e

    def _log_request(
        self,
        request: Sequence[Message],
        current_turn: Sequence[Message],
        evicted: int = 0,
    ) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.console.print(self._build_tree(request, evicted))

        logged = request if self.log_full_history else current_turn
        api_call = {
            "model": self.model_identifier,
            "messages": [message.to_dict() for message in logged],
        }
        label = "full with history" if self.log_full_history else "current turn"
        self.logger.info(f"API call ({label}):\n{json.dumps(api_call, indent=2, ensure_ascii=False)}")

    def _build_tree(self, request: Sequence[Message], evicted: int) -> Tree:
        tree = Tree("🏗️ [bold blue]MESSAGE BUILDING[/bold blue]")
        window = tree.add(f"📚 [cyan]Window[/cyan] ({len(request)}/{self.max_messages} messages)")
        for message in request[-3:]:  # Show last 3 messages
            preview = message.text[:50] + "..." if len(message.text) > 50 else message.text
            window.add(f"[dim]{_ROLE_ICONS[message.role]}:[/dim] {escape(preview)}")
        if len(request) > 3:
            window.add(f"[dim]... and {len(request) - 3} earlier messages[/dim]")
        if evicted:
            tree.add(f"🗑️ [yellow]Evicted[/yellow] {evicted} oldest message(s)")
        tree.add(f"📊 [bold]Total messages:[/bold] {len(request)}")
        return tree

    def __str__(self) -> str:
        return self.render()
