"""
formatters.py - Canonical text block + JSON output for embedded scans.
"""

from typing import Any

from .models import MarkerIndex, RenderConfig


def normalize_path(file_path: str) -> str:
    """Exactly one leading slash; everything after it untouched."""
    return f"/{file_path.lstrip('/')}"


def file_link(file_path: str, line_nr: int | None = None) -> str:
    """Link token '@file://<path>[#<line>]'. line_nr is zero-based."""
    link = f"@file://{normalize_path(file_path)}"
    if line_nr is not None:
        link += f"#{line_nr + 1}"
    return link


def render_todos(index: MarkerIndex, config: RenderConfig) -> str:
    """
    Render the index as one deterministic block.

    Types sorted, then files sorted, occurrences in line order. Empty index
    renders as "".
    """
    indentation = config.indentation
    occurrence_indent = indentation * 2 if config.group_by_file else indentation
    lines = []

    for marker_type in sorted(index):
        files = index[marker_type]
        lines.append(f"{marker_type}:")

        for file_path in sorted(files):
            if config.group_by_file:
                lines.append(f"{indentation}{file_link(file_path)}")

            for occurrence in files[file_path]:
                lines.append(
                    f"{occurrence_indent}{config.bullet_symbol} "
                    f"{occurrence.line_text.lstrip()} "
                    f"{file_link(file_path, occurrence.line_number)}"
                )

    return "\n".join(lines) + "\n" if lines else ""


def to_json(result) -> dict[str, Any]:
    """JSON-serializable dict. Same ordering as the text block."""
    return {
        "files_searched": result.files_searched,
        "files_matched": result.files_matched,
        "files_skipped": result.files_skipped,
        "total_occurrences": result.total_occurrences,
        "cancelled": result.cancelled,
        "scan_time_ms": result.scan_time_ms,
        "markers": [
            {
                "type": marker_type,
                "files": [
                    {
                        "path": normalize_path(file_path),
                        "occurrences": [
                            {
                                "line": o.line_number + 1,
                                "text": o.line_text,
                                "link": file_link(file_path, o.line_number),
                            }
                            for o in result.index[marker_type][file_path]
                        ],
                    }
                    for file_path in sorted(result.index[marker_type])
                ],
            }
            for marker_type in sorted(result.index)
        ],
    }
