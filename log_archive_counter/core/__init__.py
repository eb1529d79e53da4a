"""
Core - Domain logic and ports

This package contains:
- domain.py: Pure domain models
- errors.py: Error kinds raised across the application
- ports.py: Port interfaces (abstractions for extraction and counting)
- services.py: Application services (use cases)
"""
from .domain import ArchiveSource, CountRequest, ExtractedFileSet, LogFileDescriptor, ResultMap
from .errors import (
    LogCounterError,
    InvalidInputError,
    EncodingMismatchError,
    FileReadError,
    InvalidStateError,
    IOFailure
)
from .ports import ArchiveExtractor, LineCounter
from .services import (
    CountEntriesService,
    CountOccurrencesService,
    extracted_files,
    select_strategy
)

__all__ = [
    # Domain models
    "ArchiveSource",
    "CountRequest",
    "ExtractedFileSet",
    "LogFileDescriptor",
    "ResultMap",
    # Errors
    "LogCounterError",
    "InvalidInputError",
    "EncodingMismatchError",
    "FileReadError",
    "InvalidStateError",
    "IOFailure",
    # Ports
    "ArchiveExtractor",
    "LineCounter",
    # Services
    "CountEntriesService",
    "CountOccurrencesService",
    "extracted_files",
    "select_strategy",
]
