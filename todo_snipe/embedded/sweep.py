"""
sweep.py - The core. Discover, scan, render.

render_marker_block() is the one-call entry point for callers that already
have their files. MarkerSweep adds discovery over root folders and the
optional ripgrep pre-filter on top.
"""

import logging
import threading
import time
from pathlib import Path

from .aggregator import LineSource, aggregate
from .config import EmbeddedConfig
from .file_source import find_files, read_lines, relative_key
from .formatters import render_todos
from .models import RenderConfig, ScanResult
from .pattern_scan import compile_marker_pattern
from .ripgrep import RG_PATH, rg_matching_files

logger = logging.getLogger(__name__)


def render_marker_block(
    files,
    pattern,
    render_config: RenderConfig,
    *,
    line_source: LineSource = read_lines,
    max_workers: int | None = None,
    cancel: threading.Event | None = None,
) -> str:
    """
    Scan files for markers and return the canonical block.

    Args:
        files: File identifiers, or a mapping of display path -> identifier
        pattern: Marker regex; group 1 is the marker type
        render_config: Indentation, grouping and bullet
        line_source: Returns a file's lines, or None to skip it
        max_workers: Thread pool size
        cancel: Stops reading further files once set; the partial index is rendered

    Raises:
        InvalidPatternError, NoCaptureGroupError: misconfigured pattern
    """
    result = aggregate(
        files,
        pattern,
        line_source=line_source,
        max_workers=max_workers,
        cancel=cancel,
    )
    return render_todos(result.index, render_config)


class MarkerSweep:
    """
    Marker scan over one or more root folders.

        sweep = MarkerSweep(["."])
        print(sweep.render())

    Index keys are paths relative to the closest root, so links read
    @file:///src/app.py#12.
    """

    def __init__(self, roots: list[str | Path], config: EmbeddedConfig | None = None):
        self.roots = [Path(r).resolve() for r in roots] or [Path.cwd()]
        self.config = config or EmbeddedConfig()
        self._files_cache: list[Path] | None = None

    @property
    def files(self) -> list[Path]:
        """Discovered files (cached after first call)."""
        if self._files_cache is None:
            self._files_cache = find_files(
                self.roots,
                include=self.config.include,
                exclude=self.config.exclude,
                limit=self.config.limit,
            )
        return self._files_cache

    def scan(
        self,
        *,
        max_workers: int | None = None,
        cancel: threading.Event | None = None,
    ) -> ScanResult:
        """Build the marker index for all discovered files."""
        start = time.perf_counter()
        pattern = compile_marker_pattern(self.config.regex)

        candidates = self.files
        if self.config.use_ripgrep and RG_PATH:
            matching = rg_matching_files(pattern, self.roots)
            if matching is not None:
                candidates = [f for f in candidates if f in matching]
                pass1_ms = (time.perf_counter() - start) * 1000
                logger.info(
                    f"Pass 1: {len(candidates)} of {len(self.files)} files in {pass1_ms:.0f}ms"
                )

        files: dict[str, Path] = {}
        for f in candidates:
            key = relative_key(f, self.roots)
            # Same relative path under two roots: fall back to the absolute one
            files[f.as_posix() if key in files else key] = f

        result = aggregate(files, pattern, max_workers=max_workers, cancel=cancel)

        # Report against everything discovered, not just rg's candidates
        result.files_searched = len(self.files)
        result.scan_time_ms = (time.perf_counter() - start) * 1000
        return result

    def render(self, **scan_kwargs) -> str:
        """Scan and render with the configured layout."""
        return render_todos(self.scan(**scan_kwargs).index, self.config.render_config)
