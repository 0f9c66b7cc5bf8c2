"""
ripgrep.py - rg subprocess wrapper that narrows discovered files to candidates.

Only a pre-filter: files rg reports are still scanned line by line with
Python's re. Returns None whenever rg can't answer so callers scan everything.

rg only splits lines on '\\n', while the line source also splits on '\\r\\n'
and '\\r'. Files containing a carriage return are therefore always kept as
candidates; for every other file rg sees exactly the lines Python scans.
"""

import logging
import re
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

RG_TIMEOUT_S = 10

# Check if rg is available (cached at import time)
RG_PATH = shutil.which("rg")

BASE_ARGS = [
    "--files-with-matches",
    "--no-ignore",  # discovery decides what's excluded, not .gitignore
    "--hidden",
    "--follow",  # os.walk lists symlinked files too
    "--no-messages",
]


def _rg_files(args: list[str], roots: list[Path]) -> set[Path] | None:
    """Run rg with args over roots; paths it lists, or None on failure."""
    cmd = [RG_PATH, *BASE_ARGS, *args, "--"]
    cmd.extend(str(root) for root in roots)

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=RG_TIMEOUT_S,
        )
    except subprocess.TimeoutExpired:
        logger.warning(f"ripgrep timed out after {RG_TIMEOUT_S}s")
        return None
    except OSError as e:
        logger.warning(f"ripgrep failed: {e}")
        return None

    # 0 = matches, 1 = no matches, 2 = error (bad pattern, no pcre2, ...)
    if result.returncode == 1:
        return set()
    if result.returncode != 0:
        logger.warning(f"ripgrep exited {result.returncode}, scanning all files")
        return None

    # Not resolved: symlinked files must keep the path os.walk gave them
    return {Path(line) for line in result.stdout.splitlines() if line}


def rg_matching_files(
    pattern: re.Pattern | str,
    roots: list[Path],
) -> set[Path] | None:
    """
    Use ripgrep to find files that may contain pattern.

    Args:
        pattern: Compiled regex or string pattern
        roots: Directories to search (resolved, as discovery walks them)

    Returns:
        Paths of files with a match or a carriage return, or None if rg is
        missing, timed out, or rejected the pattern.
    """
    if not RG_PATH or not roots:
        return None

    if isinstance(pattern, re.Pattern):
        pat_str = pattern.pattern
    else:
        pat_str = pattern

    matching = _rg_files(["--pcre2", "-e", pat_str], roots)
    if matching is None:
        return None

    with_cr = _rg_files(["-e", r"\r"], roots)
    if with_cr is None:
        return None

    return matching | with_cr
