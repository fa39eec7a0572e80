#!/usr/bin/env python3
"""
CLI REPL interface for a bounded-memory conversation.

This module provides a terminal-based interface using prompt_toolkit.
"""

import sys
import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

# Rich imports for CLI formatting
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.markdown import Markdown
from rich.markup import escape
from rich import box

from convo import ConversationError, ConversationSession, ChatModelClient
from convo.config_loader import ConfigLoader
from convo.logger import LogManager, parse_level

ROLE_STYLES = {
    "system": "[bold yellow]🔧 System[/bold yellow]",
    "user": "[bold blue]👤 User[/bold blue]",
    "assistant": "[bold green]🤖 AI[/bold green]",
}

COMMANDS = "/history, /clear, /context, /samples, /fullhistorylog, /loglevel, /help"


class REPLCLI:
    """Main REPL CLI application."""

    def __init__(self, config_loader: ConfigLoader, api_key: str, log_manager: LogManager):
        """
        Initialize CLI REPL.

        Args:
            config_loader: ConfigLoader instance (for hot-reload)
            api_key: API key for the chat model
            log_manager: LogManager instance
        """
        self.console = Console()
        self.log_manager = log_manager
        self.logger = logging.getLogger("app.prompt")
        self.config_loader = config_loader
        self.api_key = api_key

        config = self.config_loader.get_config()
        self.session = ConversationSession.from_config(config, api_key)
        self.context = config.get("context", "")

        self.prompt_session = PromptSession(history=InMemoryHistory())

    def reload_config(self) -> bool:
        """Rebuild the model client if the config file changed. Memory is kept."""
        reloaded, config = self.config_loader.check_and_reload()
        if not reloaded:
            return False

        self.session.client = ChatModelClient(
            self.api_key, config["model"], **self.config_loader.model_kwargs()
        )
        self.session.model_identifier = config["model"]
        if config["max_messages"] != self.session.max_messages:
            self.console.print("[dim]max_messages changed; restart to resize the window[/dim]")
        self.logger.info(f"Config reloaded, model={config['model']}")
        return True

    def show_history(self) -> None:
        history = self.session.history()
        if not history:
            self.console.print(Panel("No conversation history yet", title="📜 History", border_style="yellow"))
            return

        table = Table(title="📜 Conversation History", box=box.ROUNDED)
        table.add_column("#", style="dim", width=4)
        table.add_column("Role", style="bold", width=12)
        table.add_column("Content", style="white")

        for i, msg in enumerate(history, 1):
            content = msg["content"]
            if len(content) > 100:
                content = content[:97] + "..."
            table.add_row(str(i), ROLE_STYLES.get(msg["role"], msg["role"]), escape(content))

        self.console.print(table)
        self.console.print(f"[dim]Window: {len(history)}/{self.session.max_messages} messages[/dim]")

    def show_samples(self, args) -> None:
        try:
            count = int(args[0]) if len(args) > 0 else 3
            max_words = int(args[1]) if len(args) > 1 else 10
        except ValueError:
            self.console.print(Panel("Usage: /samples [count] [max_words]", border_style="yellow"))
            return

        with self.console.status("[bold green]🤔 Thinking...", spinner="dots"):
            questions = self.session.generate_sample_questions(self.context, count, max_words)

        body = "\n".join(f"{i}. {escape(q)}" for i, q in enumerate(questions, 1)) or "[dim]No questions returned[/dim]"
        self.console.print(Panel(body, title="💡 Sample Questions", border_style="cyan"))

    def handle_loglevel(self, parts) -> None:
        if len(parts) == 1 or (len(parts) == 2 and parts[1].lower() == "status"):
            status = self.log_manager.get_status()

            table = Table(title="📊 Current Log Levels", box=box.ROUNDED)
            table.add_column("Category", style="bold cyan", width=12)
            table.add_column("Level", style="bold", width=10)
            table.add_column("Description", style="dim")
            table.add_row("ROOT", status["root"], "auto-adjusts to lowest component")
            for component, info in self.log_manager.get_ui_components().items():
                table.add_row(component, status["components"].get(component, "N/A"), info["description"])

            self.console.print(table)
            return

        if len(parts) == 2 and parts[1] == "--all":
            all_loggers = self.log_manager.get_all_loggers()
            self.console.print(Panel(
                "\n".join(f"  • {name}" for name in all_loggers[:50]) +
                (f"\n  ... and {len(all_loggers) - 50} more" if len(all_loggers) > 50 else ""),
                title=f"🔍 All Active Loggers ({len(all_loggers)})",
                border_style="cyan"
            ))
            return

        if len(parts) > 3:
            component_list = ", ".join(self.log_manager.get_ui_components()) + ", all"
            self.console.print(Panel(
                "[bold]Usage:[/bold] /loglevel [category] [level]\n"
                f"[bold]Categories:[/bold] {component_list}\n"
                "[bold]Levels:[/bold] DEBUG, INFO, WARNING, ERROR",
                title="📋 Log Level Command",
                border_style="yellow"
            ))
            return

        category, level_name = ("all", parts[1]) if len(parts) == 2 else (parts[1].lower(), parts[2])
        level = parse_level(level_name)
        if level is None:
            self.console.print(Panel(f"❌ Invalid level: {level_name}", title="Error", border_style="red"))
            return

        success, message = self.log_manager.set_level(category, level)
        style = "green" if success else "red"
        self.console.print(Panel(f"{'✅' if success else '❌'} {message}", border_style=style))

    def handle_command(self, command: str) -> None:
        """Handle slash commands."""
        parts = command.split()
        cmd = parts[0].lower()

        if cmd == "/history":
            self.show_history()

        elif cmd == "/clear":
            self.session.reset_conversation()
            self.console.print(Panel("🗑️  Conversation history cleared", border_style="green"))

        elif cmd == "/context":
            new_context = command.strip()[len("/context"):].strip()
            if new_context:
                self.context = new_context
            self.console.print(Panel(escape(self.context) or "[dim](empty)[/dim]", title="🔧 Context", border_style="yellow"))

        elif cmd == "/samples":
            self.show_samples(parts[1:])

        elif cmd == "/fullhistorylog":
            self.session.log_full_history = not self.session.log_full_history
            status = "enabled" if self.session.log_full_history else "disabled"
            style = "green" if self.session.log_full_history else "red"
            self.console.print(Panel(f"Full history logging {status}", border_style=style))

        elif cmd == "/loglevel":
            self.handle_loglevel(parts)

        elif cmd == "/help":
            self.console.print(Panel(f"[bold]Available commands:[/bold]\n{COMMANDS}", title="Command Help", border_style="blue"))

        else:
            self.console.print(Panel(f"❓ Unknown command: {escape(command)}\n\n[bold]Available commands:[/bold]\n{COMMANDS}",
                                     title="Command Help", border_style="yellow"))

    def run(self) -> None:
        """Run the REPL loop."""
        self.console.print(Panel(
            "[bold blue]🤖 Conversation REPL[/bold blue]\n\n"
            f"[dim]Model: {self.session.model_identifier} · window of {self.session.max_messages} messages\n"
            "Use slash commands for special functions (/help)\n"
            "Press Ctrl-C to exit[/dim]",
            title="Welcome",
            border_style="blue",
            padding=(1, 2)
        ))

        while True:
            try:
                if self.reload_config():
                    self.console.print(Panel("🔄 Reloaded: config", border_style="green"))

                user_input = self.prompt_session.prompt("> ")
                if not user_input.strip():
                    continue

                if user_input.startswith("/"):
                    self.handle_command(user_input)
                    continue

                with self.console.status("[bold green]🤔 Thinking...", spinner="dots"):
                    response = self.session.ask_question(self.context, user_input)

                self.console.print(Panel(
                    Markdown(response),
                    title="🤖 AI Response",
                    border_style="green",
                    padding=(1, 2)
                ))

            except ConversationError as e:
                self.logger.error(f"Error calling API: {e}")
                self.console.print(Panel(f"❌ {escape(str(e))}", title="Error", border_style="red"))

            except (KeyboardInterrupt, EOFError):
                self.console.print(Panel("👋 Goodbye!", title="Farewell", border_style="blue"))
                sys.exit(0)


def run_repl(config_loader, api_key, log_manager):
    """
    Run the CLI REPL interface.

    Args:
        config_loader: ConfigLoader instance (for hot-reload)
        api_key: API key for the chat model
        log_manager: LogManager instance
    """
    cli = REPLCLI(config_loader, api_key, log_manager)
    cli.run()
