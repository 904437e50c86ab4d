"""Error taxonomy for i18n-finder.

Per-file problems (ParseFailure) are recovered by the scanner and reported as
diagnostics. Everything else is surfaced to the caller and ends the current
operation.
"""

from pathlib import Path


class I18nFinderError(Exception):
    """Base class for all i18n-finder errors."""

    pass


class ParseFailure(I18nFinderError):
    """Raised when a source file cannot be turned into a syntax tree."""

    def __init__(self, path: str | Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = str(path)
        self.reason = reason


class ConfigurationError(I18nFinderError):
    """Raised when a rule-set override is malformed."""

    def __init__(self, path: str | Path | None, reason: str):
        where = f"{path}: " if path else ""
        super().__init__(f"Invalid configuration {where}{reason}")
        self.path = str(path) if path else None
        self.reason = reason


class BaselineReadError(I18nFinderError):
    """Raised when a persisted translation document is missing or malformed."""

    def __init__(self, path: str | Path, reason: str):
        super().__init__(f"Cannot read translation file {path}: {reason}")
        self.path = str(path)
        self.reason = reason


class NoInputError(I18nFinderError):
    """Raised when an operation has nothing to work on.

    This is informational: callers report "nothing to do" rather than failing.
    """

    def __init__(self, operation: str, message: str):
        super().__init__(message)
        self.operation = operation


class OutputWriteError(I18nFinderError):
    """Raised when an output document cannot be written."""

    def __init__(self, path: str | Path, reason: str):
        super().__init__(f"Cannot write {path}: {reason}")
        self.path = str(path)
        self.reason = reason
