"""Embedded data models. Every struct that flows through the scan -> render pipeline."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Occurrence:
    """One matched line. line_number is zero-based."""

    line_text: str
    line_number: int


@dataclass(frozen=True)
class MatchRange:
    """Half-open character span anchored on a match's last capture group."""

    start: int
    end: int


# marker type -> file path -> occurrences in ascending line order
MarkerIndex = dict[str, dict[str, list[Occurrence]]]


@dataclass
class RenderConfig:
    """How the canonical block is laid out."""

    indentation: str = "  "
    group_by_file: bool = False
    bullet_symbol: str = "☐"


@dataclass
class ScanResult:
    """Complete scan result."""

    index: MarkerIndex = field(default_factory=dict)
    files_searched: int = 0
    files_matched: int = 0
    files_skipped: int = 0
    total_occurrences: int = 0
    cancelled: bool = False
    scan_time_ms: float = 0.0

    def render(self, config: RenderConfig | None = None) -> str:
        """Canonical, sorted text block."""
        from .formatters import render_todos
        return render_todos(self.index, config or RenderConfig())

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable dict."""
        from .formatters import to_json
        return to_json(self)
