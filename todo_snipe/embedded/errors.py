"""Errors raised by the embedded marker pipeline. Unreadable files are not errors."""


class EmbeddedError(Exception):
    """Base class for configuration-level failures that stop a scan."""


class InvalidPatternError(EmbeddedError, ValueError):
    """The configured marker pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid marker pattern {pattern!r}: {reason}")


class NoCaptureGroupError(EmbeddedError, ValueError):
    """A pattern without capture groups was used where one is required."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"Marker pattern {pattern!r} has no capture group")
