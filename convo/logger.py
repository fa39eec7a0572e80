import logging
import sys
import os
from logging.handlers import RotatingFileHandler
from typing import Dict, List, Optional, Tuple, Union

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class OneLineExceptionFormatter(logging.Formatter):
    """Format exceptions on a single line for cleaner logs."""

    def formatException(self, exc_info):
        result = super().formatException(exc_info)
        return repr(result)

    def format(self, record):
        result = super().format(record)
        if record.exc_text:
            result = result.replace("\n", " | ")
        return result


def parse_level(name: str) -> Optional[int]:
    """Map a level name (case-insensitive) to its logging constant, or None."""
    return LEVELS.get(name.strip().upper())


def init_logger(
    log_level=logging.INFO,
    log_file="logs/convo.log",
    file_size=2 * 1024 * 1024,
    file_count=2,
    shell_output=True,
    log_file_mode="a",
    log_format="%(asctime)s %(levelname)s %(name)s %(funcName)s(%(lineno)d) %(message)s",
    print_log_init=False,
):
    """
    Initialize the root logger with a rotating file handler and optional stdout output.

    Args:
        log_level: Logging level (default: INFO)
        log_file: Path to log file, or None for no file output
        file_size: Max size per log file in bytes
        file_count: Number of backup files to keep
        shell_output: Whether to also output to stdout
        log_file_mode: File mode ('a' for append, 'w' for overwrite)
        log_format: Log message format string
        print_log_init: Whether to print initialization message

    Returns:
        Configured root logger
    """
    main_logger = logging.getLogger()
    main_logger.setLevel(log_level)
    log_formatter = OneLineExceptionFormatter(log_format)

    # Clear existing handlers to prevent duplicates
    main_logger.handlers = []

    if log_file:
        log_dir = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(log_dir, exist_ok=True)
        if print_log_init:
            print(f"Log directory: {log_dir}")

        log_rotate_handler = RotatingFileHandler(
            log_file,
            mode=log_file_mode,
            maxBytes=file_size,
            backupCount=file_count,
            encoding="utf-8",
            delay=False,
        )
        log_rotate_handler.setFormatter(log_formatter)
        log_rotate_handler.setLevel(log_level)
        main_logger.addHandler(log_rotate_handler)

    if shell_output:
        stream_log_handler = logging.StreamHandler(stream=sys.stdout)
        stream_log_handler.setFormatter(log_formatter)
        stream_log_handler.setLevel(log_level)
        main_logger.addHandler(stream_log_handler)

    if print_log_init:
        target = os.path.abspath(log_file) if log_file else "stdout"
        print(f"Logging initialized: level={logging.getLevelName(log_level)}, file={target}")

    return main_logger


class LogManager:
    """
    Manages component logger levels with smart hierarchy handling.

    Provides:
    - Curated registry of components for the REPL /loglevel command
    - Auto-adjustment of the root logger when a component goes below it
    - Discovery of all active loggers for advanced debugging
    """

    PRIMARY_COMPONENTS = {
        "prompt": {
            "default": logging.INFO,
            "description": "Outbound requests and message window",
            "loggers": ["app.prompt"]
        },
        "session": {
            "default": logging.INFO,
            "description": "Client, config and template handling",
            "loggers": ["convo"]
        },
        "http": {
            "default": logging.WARNING,
            "description": "HTTP request/response logs",
            "loggers": ["openai", "httpx", "httpcore"]
        },
        "langchain": {
            "default": logging.WARNING,
            "description": "LangChain internal processing",
            "loggers": ["langchain", "langchain_core", "langchain_openai"]
        },
    }

    # Third-party libraries to silence by default
    NOISY_DEFAULTS = {
        "asyncio": logging.WARNING,
        "urllib3": logging.WARNING,
        "httpcore.connection": logging.WARNING,
        "httpcore.http11": logging.WARNING,
        "markdown_it": logging.WARNING,
    }

    def __init__(self, root_logger=None):
        """
        Initialize LogManager.

        Args:
            root_logger: Root logger instance (defaults to logging.getLogger())
        """
        self.root_logger = root_logger or logging.getLogger()
        self._component_loggers: Dict[str, List[logging.Logger]] = {}

        for component, config in self.PRIMARY_COMPONENTS.items():
            loggers = [logging.getLogger(name) for name in config["loggers"]]
            for logger in loggers:
                logger.setLevel(config["default"])
            self._component_loggers[component] = loggers

        for logger_name, level in self.NOISY_DEFAULTS.items():
            logging.getLogger(logger_name).setLevel(level)

    def set_level(self, component: str, level: Union[int, str]) -> Tuple[bool, str]:
        """
        Set log level for a component, lowering the root level if needed.

        Args:
            component: Component name (e.g., "prompt", "http", "all")
            level: Logging level constant or name (DEBUG, INFO, WARNING, ERROR)

        Returns:
            tuple: (success: bool, message: str) for display
        """
        if isinstance(level, str):
            parsed = parse_level(level)
            if parsed is None:
                return False, f"Invalid level: {level}"
            level = parsed
        level_name = logging.getLevelName(level)

        if component == "all":
            components_to_set = list(self.PRIMARY_COMPONENTS.keys())
        elif component in self.PRIMARY_COMPONENTS:
            components_to_set = [component]
        else:
            return False, f"Unknown component: {component}"

        root_adjusted = False
        if self.root_logger.level > level:
            self.root_logger.setLevel(level)
            for handler in self.root_logger.handlers:
                if handler.level > level:
                    handler.setLevel(level)
            root_adjusted = True

        for comp in components_to_set:
            for logger in self._component_loggers[comp]:
                logger.setLevel(level)

        if component == "all":
            msg = f"All components set to {level_name}"
        else:
            msg = f"{component.capitalize()} logs set to {level_name}"

        if root_adjusted:
            msg += f"\n(Root level auto-adjusted to {level_name})"

        return True, msg

    def get_ui_components(self):
        """
        Get primary components for display.

        Returns:
            dict: Component name -> {default, description}
        """
        return {
            name: {
                "default": config["default"],
                "description": config["description"]
            }
            for name, config in self.PRIMARY_COMPONENTS.items()
        }

    def get_all_loggers(self):
        """Logger names currently registered in the process."""
        return sorted(logging.root.manager.loggerDict.keys())

    def get_status(self):
        """
        Get current log levels for all components.

        Returns:
            dict: {
                "root": level_name,
                "components": {component: level_name}
            }
        """
        return {
            "root": logging.getLevelName(self.root_logger.level),
            "components": {
                component: logging.getLevelName(loggers[0].level)
                for component, loggers in self._component_loggers.items()
                if loggers
            },
        }
