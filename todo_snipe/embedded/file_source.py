"""
file_source.py - File discovery and line reading for the embedded scan.

find_files() walks one or more roots and returns text files matching the
include/exclude globs, capped at a limit. read_lines() is the line source:
it returns a file's lines, or None when the file is unreadable or binary so
the aggregator can skip it.

No external dependencies. Pure stdlib.
"""

from __future__ import annotations

import logging
import os
import re
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Directory names never worth descending into
SKIP_DIRS: frozenset[str] = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        "__pycache__",
        ".venv",
        "venv",
        ".tox",
        ".mypy_cache",
        ".ruff_cache",
        ".pytest_cache",
    }
)

# Extensions treated as binary without opening the file
BINARY_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".webp", ".tiff",
        ".psd", ".mp3", ".mp4", ".mov", ".avi", ".wav", ".flac", ".ogg",
        ".zip", ".gz", ".tgz", ".bz2", ".xz", ".7z", ".rar", ".tar", ".jar",
        ".exe", ".dll", ".so", ".dylib", ".o", ".a", ".lib", ".class",
        ".pyc", ".pyo", ".wasm", ".bin", ".dat", ".db", ".sqlite",
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
        ".woff", ".woff2", ".ttf", ".otf", ".eot",
    }
)

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_BRACES = re.compile(r"\{([^{}]*)\}")


# ---------------------------------------------------------------------------
# Globs
# ---------------------------------------------------------------------------


def cast_globs(globs: str | list[str] | None) -> list[str]:
    """Accept a single glob or a list of them."""
    if globs is None:
        return []
    if isinstance(globs, str):
        return [globs]
    return list(globs)


def _expand_braces(glob: str) -> list[str]:
    """'*.{py,ts}' -> ['*.py', '*.ts']. Nested groups expand innermost first."""
    match = _BRACES.search(glob)
    if not match:
        return [glob]
    expanded = []
    for alt in match.group(1).split(","):
        expanded.extend(_expand_braces(glob[: match.start()] + alt + glob[match.end():]))
    return expanded


@lru_cache(maxsize=256)
def _glob_to_regex(glob: str) -> re.Pattern:
    """
    Translate one brace-free glob into an anchored regex.

    '*' and '?' stay inside one path segment, '**' crosses segments and
    '**/' may also match nothing, so '**/x' matches 'x' at the top level.
    """
    parts = []
    i, n = 0, len(glob)
    while i < n:
        c = glob[i]
        if glob.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif glob.startswith("**", i):
            parts.append(".*")
            i += 2
        elif c == "*":
            parts.append("[^/]*")
            i += 1
        elif c == "?":
            parts.append("[^/]")
            i += 1
        elif c == "[" and "]" in glob[i + 2:]:
            # Char class; ']' right after '[' or '[!' is literal
            j = glob.index("]", i + 2)
            body = glob[i + 1:j]
            if body.startswith("!"):
                body = "^" + body[1:]
            parts.append("[" + body.replace("\\", "\\\\") + "]")
            i = j + 1
        else:
            parts.append(re.escape(c))
            i += 1
    return re.compile("".join(parts) + r"\Z", re.DOTALL)


def glob_match(rel_path: str, globs: list[str]) -> bool:
    """True if the root-relative POSIX path matches any glob."""
    for glob in globs:
        for pattern in _expand_braces(glob):
            if _glob_to_regex(pattern).match(rel_path):
                return True
    return False


# ---------------------------------------------------------------------------
# Roots
# ---------------------------------------------------------------------------


def get_root_path(roots: list[Path], base_path: str | Path | None = None) -> Path | None:
    """
    Pick the root a path belongs to.

    Returns the first root when base_path is missing or relative, otherwise
    the closest (longest) root containing base_path, or None.
    """
    if not roots:
        return None

    if base_path is None or not os.path.isabs(base_path):
        return roots[0]

    base = str(base_path)
    # Longest first, so nested roots win over their parents
    for root in sorted(roots, key=lambda r: len(str(r)), reverse=True):
        if base.startswith(str(root)):
            return root
    return None


def relative_key(path: Path, roots: list[Path]) -> str:
    """Index key for a file: POSIX path relative to its closest root."""
    root = get_root_path(roots, path)
    if root is None:
        return path.as_posix()
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        # Prefix match without a path boundary (/repo vs /repo-old)
        return path.as_posix()


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def _is_binary_path(path: Path) -> bool:
    return path.suffix.lower() in BINARY_EXTENSIONS


def find_files(
    roots: list[Path],
    include: str | list[str] | None = "**/*",
    exclude: str | list[str] | None = None,
    limit: int | None = None,
) -> list[Path]:
    """
    Walk *roots* and collect text files matching the globs.

    Args:
        roots: Directories to search
        include: Glob(s) a root-relative path must match
        exclude: Glob(s) that reject a path
        limit: Max files returned (None, 0 or negative for no cap)

    Returns:
        Sorted absolute paths, at most *limit* of them.
    """
    include_globs = cast_globs(include) or ["**/*"]
    exclude_globs = cast_globs(exclude)

    found: list[Path] = []
    seen: set[Path] = set()

    for root in roots:
        root = Path(root).resolve()
        for dirpath, dirnames, filenames in os.walk(root):
            # Prune in-place so os.walk won't descend
            dirnames[:] = [d for d in dirnames if d not in SKIP_DIRS]

            for filename in filenames:
                file_path = Path(dirpath) / filename
                if file_path in seen:
                    continue

                rel = file_path.relative_to(root).as_posix()
                if not glob_match(rel, include_globs):
                    continue
                if exclude_globs and glob_match(rel, exclude_globs):
                    continue
                if _is_binary_path(file_path):
                    continue
                # Regular files only; reading a FIFO would block
                if not os.path.isfile(file_path):
                    continue

                seen.add(file_path)
                found.append(file_path)

    found.sort()
    if limit is not None and 0 < limit < len(found):
        logger.info(f"Discovery capped at {limit} of {len(found)} files")
        found = found[:limit]
    return found


# ---------------------------------------------------------------------------
# Line source
# ---------------------------------------------------------------------------


def read_lines(path: str | Path) -> list[str] | None:
    """
    Lines of a text file, without terminators.

    Returns None when the file can't be read, isn't UTF-8 or holds NUL bytes.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Skipping {path}: {e}")
        return None

    if "\x00" in content:
        logger.debug(f"Skipping {path}: binary content")
        return None

    return _LINE_BREAK.split(content)


def write_block(path: str | Path, content: str) -> Path:
    """Write *content* to *path*, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" keeps '\n' as written on every platform
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(content)
    return path
