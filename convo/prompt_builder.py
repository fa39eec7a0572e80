import logging
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
DEFAULT_SAMPLE_TEMPLATE = TEMPLATES_DIR / "sample_questions.jinja"


class PromptBuilder:
    """Builds the sample-question instruction from a Jinja2 template with hot reload support."""

    def __init__(self, template_path: Union[str, Path] = DEFAULT_SAMPLE_TEMPLATE):
        self.template_path = Path(template_path)
        self.template: Optional[Template] = None
        self.last_mtime: Optional[float] = None
        self.env = Environment(
            loader=FileSystemLoader(self.template_path.parent),
            undefined=StrictUndefined,
        )

    def load(self) -> Template:
        """Load template from file."""
        if not self.template_path.exists():
            raise FileNotFoundError(f"Template file not found: {self.template_path}")

        self.template = self.env.get_template(self.template_path.name)
        self.last_mtime = self.template_path.stat().st_mtime
        return self.template

    def check_and_reload(self) -> tuple[bool, Optional[Template]]:
        """
        Check if template file has been modified and reload if necessary.

        Returns:
            Tuple of (was_reloaded: bool, template: Optional[Template])
        """
        if not self.template_path.exists():
            return False, self.template

        current_mtime = self.template_path.stat().st_mtime

        # First load or file has been modified
        if self.last_mtime is None or current_mtime > self.last_mtime:
            try:
                template = self.load()
                return True, template
            except Exception as e:
                logger.error(f"Error reloading template: {e}")
                return False, self.template

        return False, self.template

    def render(self, **variables: Any) -> str:
        """
        Render template with provided variables.

        Args:
            **variables: Variables to pass to the template

        Returns:
            Rendered template string
        """
        if self.template is None:
            self.load()

        return self.template.render(**variables)

    def render_sample_instruction(self, count: int, max_words: int, delimiter: str) -> str:
        """Render the system instruction asking for `count` delimited questions."""
        return self.render(count=count, max_words=max_words, delimiter=delimiter).strip()
