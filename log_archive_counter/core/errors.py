"""
Errors raised by the core and its adapters.
"""

INVALID_ARCHIVE_MESSAGE = "There is no file to open or it is not a zip file."


class LogCounterError(Exception):
    """Base class for log counting failures."""


class InvalidInputError(LogCounterError, ValueError):
    """The request is missing its archive or the archive is not a zip file."""


class EncodingMismatchError(LogCounterError):
    """Archive entry names could not be decoded with the chosen encoding."""

    def __init__(self, encoding: str, cause: UnicodeDecodeError):
        super().__init__(f"Cannot decode zip entry names as {encoding}: {cause}")
        self.encoding = encoding
        self.cause = cause


class FileReadError(LogCounterError):
    """A selected log file could not be read or decoded."""

    def __init__(self, file_name: str):
        super().__init__(f"Cannot read log file '{file_name}' during analysing.")
        self.file_name = file_name


class InvalidStateError(LogCounterError, RuntimeError):
    """A contract was broken by the caller (e.g. cleanup without paths)."""


class IOFailure(LogCounterError, OSError):
    """Archive or filesystem operation failed after recovery was exhausted."""
