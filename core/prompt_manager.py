from pathlib import Path
from typing import Any, Dict, Union

import jinja2
import yaml

DEFAULT_PROMPTS_FILE = Path(__file__).parent / "prompts.yaml"


class PromptManager:
    def __init__(self, file_path: Union[str, Path] = DEFAULT_PROMPTS_FILE) -> None:
        """Load tool descriptions and report templates from a YAML file.

        Args:
            file_path: Path to the YAML file

        Raises:
            FileNotFoundError: If the file doesn't exist
            yaml.YAMLError: If the file is malformed
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Prompt file not found: {file_path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                self._data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Failed to parse YAML file {file_path}: {e}")

        # Undefined variables fail loudly instead of rendering as ""
        self._env = jinja2.Environment(undefined=jinja2.StrictUndefined, autoescape=False)
        self._compiled: Dict[str, jinja2.Template] = {}

    @staticmethod
    def _lookup(data: Any, path: str) -> Any:
        """Follow a dot separated key path."""
        current = data
        for key in path.split("."):
            if not isinstance(current, dict) or key not in current:
                raise ValueError(f"Path '{path}' not found in prompts data")
            current = current[key]
        return current

    def get_text(self, name: str) -> str:
        """Return a raw string entry, e.g. a tool description."""
        value = self._lookup(self._data, name)
        if not isinstance(value, str):
            raise ValueError(f"Prompt '{name}' is not a string")
        return value.strip()

    def render(self, name: str, **values: Any) -> str:
        """Render a template entry with the given values.

        Raises:
            ValueError: If the entry is missing or not a string
            jinja2.TemplateError: If rendering fails
        """
        template = self._compiled.get(name)
        if template is None:
            template = self._env.from_string(self.get_text(name))
            self._compiled[name] = template
        return template.render(**values)
