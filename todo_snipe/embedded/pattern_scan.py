"""
pattern_scan.py - Repeated regex scanning and match -> range anchoring.

get_all_matches() walks a string the way a global regex scan does, but never
stalls on a zero-width match. match_to_range() narrows a match down to its
last capture group, which is the span a user actually edits.
"""

import re

from .errors import InvalidPatternError, NoCaptureGroupError
from .models import MatchRange


def _compile(pattern: re.Pattern | str, flags: int = 0) -> re.Pattern:
    if isinstance(pattern, re.Pattern):
        source = pattern.pattern
        flags |= pattern.flags
    else:
        source = pattern
    try:
        return re.compile(source, flags)
    except re.error as e:
        raise InvalidPatternError(str(source), str(e)) from e


def compile_marker_pattern(pattern: re.Pattern | str) -> re.Pattern:
    """
    Compile a marker pattern and check it can discriminate marker types.

    Group 1 is the marker type, so at least one capture group is required.

    Raises:
        InvalidPatternError: pattern does not compile
        NoCaptureGroupError: pattern has no capture groups
    """
    compiled = _compile(pattern)
    if compiled.groups < 1:
        raise NoCaptureGroupError(compiled.pattern)
    return compiled


def get_all_matches(
    text: str,
    pattern: re.Pattern | str,
    multi: bool = True,
) -> list[re.Match]:
    """
    Every non-overlapping match of pattern in text, left to right.

    multi=True adds re.MULTILINE so ^/$ anchor on each line.
    """
    regex = _compile(pattern, re.MULTILINE if multi else 0)

    matches = []
    pos = 0
    end = len(text)

    while pos <= end:
        match = regex.search(text, pos)
        if match is None:
            break
        matches.append(match)
        # Zero-width match: step past it or the next search lands on it again
        pos = match.end() if match.end() > match.start() else match.end() + 1

    return matches


def match_to_range(match: re.Match) -> MatchRange:
    """Range of the match's last capture group, as offsets into the scanned string."""
    if not match.re.groups:
        raise NoCaptureGroupError(match.re.pattern)

    first = match.group(0)
    last = match.group(match.re.groups)

    if last is None:
        return MatchRange(match.start(), match.start())

    offset = first.find(last)
    if offset < 0:
        # Captured inside a lookaround, outside the matched text
        start = match.start(match.re.groups)
    else:
        start = match.start() + offset
    return MatchRange(start, start + len(last))


def matches_to_ranges(matches: list[re.Match]) -> list[MatchRange]:
    """Map match_to_range over a list of matches."""
    return [match_to_range(m) for m in matches]
