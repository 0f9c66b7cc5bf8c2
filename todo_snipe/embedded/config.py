"""
config.py - Defaults for the embedded scan + JSON settings loader.

Settings files use the same shape as the editor settings this tool mirrors:

    {
      "indentation": "  ",
      "symbols": {"box": "☐"},
      "embedded": {
        "regex": "...",
        "include": ["**/*"],
        "exclude": ["**/node_modules/**"],
        "limit": 256,
        "groupByFile": false
      }
    }

Missing keys keep their defaults; unknown keys are ignored.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import EmbeddedError
from .models import RenderConfig

# Comment opener, then the marker type in group 1, then the body in group 2
DEFAULT_REGEX = (
    r"(?:<!-- *)?(?:#|// @|//|/\*+|<!--|--|\* @|\{!|\{\{!--|\{\{!) *"
    r"(TODO|FIXME|FIX|BUG|UGLY|HACK|NOTE|IDEA|REVIEW|DEBUG|OPTIMIZE)"
    r"(?:\s*\([^)]+\))?:?(?!\w)(.*)"
)

DEFAULT_INCLUDE = ["**/*"]

DEFAULT_EXCLUDE = [
    "**/.git/**",
    "**/node_modules/**",
    "**/bower_components/**",
    "**/dist/**",
    "**/build/**",
    "**/out/**",
    "**/.venv/**",
    "**/__pycache__/**",
    "**/*.min.js",
    "**/*.map",
    "**/*.lock",
]

DEFAULT_LIMIT = 256


class ConfigError(EmbeddedError, ValueError):
    """Settings file missing, unparsable or of the wrong shape."""


@dataclass
class EmbeddedConfig:
    """Everything a scan + render needs."""

    regex: str = DEFAULT_REGEX
    include: list[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    limit: int = DEFAULT_LIMIT
    indentation: str = "  "
    group_by_file: bool = False
    bullet_symbol: str = "☐"
    use_ripgrep: bool = True

    @property
    def render_config(self) -> RenderConfig:
        return RenderConfig(
            indentation=self.indentation,
            group_by_file=self.group_by_file,
            bullet_symbol=self.bullet_symbol,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EmbeddedConfig":
        if not isinstance(data, dict):
            raise ConfigError("settings must be a JSON object")

        config = cls()
        embedded = data.get("embedded") or {}
        symbols = data.get("symbols") or {}

        if "indentation" in data:
            config.indentation = str(data["indentation"])
        if "box" in symbols:
            config.bullet_symbol = str(symbols["box"])
        if "regex" in embedded:
            config.regex = str(embedded["regex"])
        if "include" in embedded:
            config.include = _glob_list(embedded["include"], "include")
        if "exclude" in embedded:
            config.exclude = _glob_list(embedded["exclude"], "exclude")
        if "limit" in embedded:
            try:
                config.limit = int(embedded["limit"])
            except (TypeError, ValueError) as e:
                raise ConfigError(f"embedded.limit must be an integer: {e}") from e
        if "groupByFile" in embedded:
            config.group_by_file = bool(embedded["groupByFile"])

        return config


def _glob_list(value: Any, name: str) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ConfigError(f"embedded.{name} must be a glob or a list of globs")


def load_config(path: str | Path | None = None) -> EmbeddedConfig:
    """Load settings from a JSON file, or defaults when path is None."""
    if path is None:
        return EmbeddedConfig()

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Can't read settings {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Settings {path} is not valid JSON: {e}") from e

    return EmbeddedConfig.from_dict(data)
