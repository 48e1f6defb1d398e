"""
Exception types for heyi.

Every fatal condition raised by the pipeline derives from HeyiError so the
command line boundary can report it and exit non-zero.
"""
from typing import Optional


class HeyiError(Exception):
    """Base class for all errors raised by heyi."""


class ConfigError(HeyiError):
    """Raised when the environment configuration is unusable."""


class InputError(HeyiError):
    """Raised when user-supplied input is invalid."""


class SourceError(HeyiError):
    """Raised when a context source (file or URL) cannot be retrieved.

    Attributes:
        source: The path or URL that failed.
        kind: Either "file" or "url".
        reason: Short description of the underlying failure.
    """

    def __init__(self, source: str, kind: str, reason: str):
        self.source = source
        self.kind = kind
        self.reason = reason
        verb = "read file" if kind == "file" else "fetch URL"
        super().__init__(f"Failed to {verb} '{source}': {reason}")


class PresetNotFoundError(HeyiError):
    """Raised when a preset file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Preset file '{path}' not found")


class PresetError(HeyiError):
    """Raised when a preset file is malformed.

    Attributes:
        path: The preset file path.
        errors: Individual validation problems.
        line: Line of a JSON syntax error, if any.
        column: Column of a JSON syntax error, if any.
    """

    def __init__(
        self,
        path: str,
        errors: list[str],
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.path = path
        self.errors = errors
        self.line = line
        self.column = column

        message = f"Error while parsing preset file '{path}': {'; '.join(errors)}"
        if line is not None and column is not None:
            message += f" (line {line}, column {column})"
        super().__init__(message)


class SchemaError(HeyiError):
    """Raised when a schema description cannot be parsed or is missing."""


class ResponseError(HeyiError):
    """Raised when the model reply does not satisfy the output contract."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        self.errors = errors or []
        if self.errors:
            message = f"{message}: {'; '.join(self.errors)}"
        super().__init__(message)
