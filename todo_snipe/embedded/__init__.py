"""
Embedded - TODO/FIXME marker aggregation

Scans files for marker comments, groups them by marker type then by file,
and renders one sorted block with @file:// links back to each line.

Usage:
    from todo_snipe.embedded import MarkerSweep, RenderConfig, render_marker_block

    print(MarkerSweep(["src/"]).render())

    block = render_marker_block(
        ["a.txt", "b.txt"],
        r"(TODO|FIXME):\\s*(.*)",
        RenderConfig(indentation="\\t"),
    )

CLI:
    todo-embed src/                 # Print the block
    todo-embed . -g -o TODO         # Group by file, write into TODO
    todo-embed . --json             # JSON output
"""

from .aggregator import aggregate, scan_lines
from .config import ConfigError, EmbeddedConfig, load_config
from .errors import EmbeddedError, InvalidPatternError, NoCaptureGroupError
from .file_source import (
    cast_globs,
    find_files,
    get_root_path,
    read_lines,
    relative_key,
    write_block,
)
from .formatters import file_link, normalize_path, render_todos, to_json
from .models import (
    MarkerIndex,
    MatchRange,
    Occurrence,
    RenderConfig,
    ScanResult,
)
from .pattern_scan import (
    compile_marker_pattern,
    get_all_matches,
    match_to_range,
    matches_to_ranges,
)
from .sweep import MarkerSweep, render_marker_block

__all__ = [
    "MarkerSweep",
    "render_marker_block",
    "aggregate",
    "scan_lines",
    "render_todos",
    "to_json",
    "file_link",
    "normalize_path",
    "get_all_matches",
    "match_to_range",
    "matches_to_ranges",
    "compile_marker_pattern",
    "find_files",
    "read_lines",
    "cast_globs",
    "get_root_path",
    "relative_key",
    "write_block",
    "EmbeddedConfig",
    "load_config",
    "Occurrence",
    "MatchRange",
    "MarkerIndex",
    "RenderConfig",
    "ScanResult",
    "EmbeddedError",
    "InvalidPatternError",
    "NoCaptureGroupError",
    "ConfigError",
]
