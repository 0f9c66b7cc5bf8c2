"""
aggregator.py - Builds the marker index: type -> file -> occurrences.

Each file is scanned on its own (in a thread pool), then merged into the
index on the calling thread. Insertion order across files follows completion
order and means nothing; the renderer sorts.
"""

import logging
import re
import threading
import time
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from .models import MarkerIndex, Occurrence, ScanResult
from .pattern_scan import compile_marker_pattern, get_all_matches
from .file_source import read_lines

logger = logging.getLogger(__name__)

MAX_WORKERS = 16

LineSource = Callable[[str | Path], list[str] | None]

# Per-file outcome: None when the line source had nothing to give
_FileTodos = dict[str, list[Occurrence]] | None


def scan_lines(lines: Iterable[str], pattern: re.Pattern) -> dict[str, list[Occurrence]]:
    """
    Scan one file's lines, top to bottom.

    Group 1 of every match is the marker type, kept exactly as captured.
    A line matching twice is recorded twice.
    """
    todos: dict[str, list[Occurrence]] = {}

    for line_nr, line in enumerate(lines):
        for match in get_all_matches(line, pattern, multi=False):
            marker_type = match.group(1)
            if marker_type is None:
                continue
            todos.setdefault(marker_type, []).append(Occurrence(line, line_nr))

    return todos


def _scan_file(
    file_key: str,
    file_id: str | Path,
    pattern: re.Pattern,
    line_source: LineSource,
    cancel: threading.Event | None,
) -> tuple[str, _FileTodos, bool]:
    """Read + scan a single file. Returns (key, todos, cancelled)."""
    if cancel is not None and cancel.is_set():
        return file_key, None, True

    lines = line_source(file_id)
    if lines is None:
        return file_key, None, False

    return file_key, scan_lines(lines, pattern), False


def _file_entries(files) -> list[tuple[str, str | Path]]:
    """Normalise files to (key, id) pairs. A mapping is taken as key -> id."""
    if isinstance(files, dict):
        return list(files.items())
    # One scan per key, otherwise a file's sequence would repeat
    entries: dict[str, str | Path] = {}
    for f in files:
        entries.setdefault(f.as_posix() if isinstance(f, Path) else str(f), f)
    return list(entries.items())


def aggregate(
    files,
    pattern: re.Pattern | str,
    *,
    line_source: LineSource = read_lines,
    max_workers: int | None = None,
    cancel: threading.Event | None = None,
) -> ScanResult:
    """
    Scan files for markers and build the index.

    Args:
        files: Iterable of file identifiers, or a mapping of index key -> identifier
        pattern: Marker pattern; group 1 names the marker type
        line_source: Returns a file's lines, or None to skip it
        max_workers: Thread pool size (default: min(16, file count)); 1 scans serially
        cancel: Checked before each file read; once set, remaining files are left out

    Raises:
        InvalidPatternError, NoCaptureGroupError: before any file is read
    """
    start = time.perf_counter()
    regex = compile_marker_pattern(pattern)
    entries = _file_entries(files)

    result = ScanResult(files_searched=len(entries))
    index: MarkerIndex = result.index

    def merge(file_key: str, todos: _FileTodos, cancelled: bool) -> None:
        if cancelled:
            result.cancelled = True
            return
        if todos is None:
            result.files_skipped += 1
            return
        if not todos:
            return
        result.files_matched += 1
        for marker_type, occurrences in todos.items():
            index.setdefault(marker_type, {}).setdefault(file_key, []).extend(occurrences)
            result.total_occurrences += len(occurrences)

    workers = max_workers or min(MAX_WORKERS, len(entries) or 1)

    if workers == 1:
        for key, file_id in entries:
            merge(*_scan_file(key, file_id, regex, line_source, cancel))
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(_scan_file, key, file_id, regex, line_source, cancel)
                for key, file_id in entries
            ]
            for future in as_completed(futures):
                merge(*future.result())

    result.scan_time_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Scanned {result.files_searched} files: {result.files_matched} matched, "
        f"{result.files_skipped} skipped, {result.total_occurrences} markers "
        f"in {result.scan_time_ms:.0f}ms"
    )
    if result.cancelled:
        logger.info("Scan cancelled, index is partial")

    return result
