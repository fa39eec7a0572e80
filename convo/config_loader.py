import yaml
import logging
from typing import Dict, Any, Optional, Union
from pathlib import Path

from .errors import ConfigurationError
from .memory import DEFAULT_MAX_MESSAGES

logger = logging.getLogger(__name__)

# Keys consumed by the session/adapters rather than passed to the chat model
NON_MODEL_KEYS = {"model", "max_messages", "context"}


def model_kwargs_from(config: Dict[str, Any]) -> Dict[str, Any]:
    """Config entries to pass through to the chat model (temperature, max_tokens, ...)."""
    return {key: value for key, value in config.items() if key not in NON_MODEL_KEYS}


class ConfigLoader:
    """Loads and tracks configuration file with hot reload support."""

    def __init__(self, config_path: Union[str, Path]):
        self.config_path = Path(config_path)
        self.config: Optional[Dict[str, Any]] = None
        self.last_mtime: Optional[float] = None

    def load(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e

        self.config = self.validate(config)
        self.last_mtime = self.config_path.stat().st_mtime
        return self.config

    @staticmethod
    def validate(config: Any) -> Dict[str, Any]:
        """Check required fields and fill defaults."""
        if not isinstance(config, dict):
            raise ConfigurationError("Config must be a mapping")

        model = config.get("model")
        if not isinstance(model, str) or not model.strip():
            raise ConfigurationError("Missing required config field: model")

        max_messages = config.setdefault("max_messages", DEFAULT_MAX_MESSAGES)
        if isinstance(max_messages, bool) or not isinstance(max_messages, int) or max_messages <= 0:
            raise ConfigurationError(f"max_messages must be a positive integer, got {max_messages!r}")

        return config

    def check_and_reload(self) -> tuple[bool, Optional[Dict[str, Any]]]:
        """
        Check if config file has been modified and reload if necessary.

        Returns:
            Tuple of (was_reloaded: bool, config: Optional[Dict])
        """
        if not self.config_path.exists():
            return False, self.config

        current_mtime = self.config_path.stat().st_mtime

        # First load or file has been modified
        if self.last_mtime is None or current_mtime > self.last_mtime:
            try:
                config = self.load()
                return True, config
            except Exception as e:
                logger.error(f"Error reloading config: {e}")
                return False, self.config

        return False, self.config

    def get_config(self) -> Dict[str, Any]:
        """Get current configuration."""
        if self.config is None:
            self.load()
        return self.config

    def model_kwargs(self) -> Dict[str, Any]:
        return model_kwargs_from(self.get_config())
