"""
Ports - Interfaces for external dependencies

These define HOW the core interacts with the outside world,
but NOT the implementation details.
"""
from abc import ABC, abstractmethod
from typing import Optional, Sequence
from pathlib import Path

from .domain import CountRequest, ExtractedFileSet, ResultMap


class ArchiveExtractor(ABC):
    """Port for unpacking the log files a request asks for"""

    @abstractmethod
    def extract(self, request: CountRequest) -> ExtractedFileSet:
        """Unpack matching log files into a fresh temporary directory"""
        pass

    @abstractmethod
    def cleanup(self, file_set: Optional[Sequence[Path] | ExtractedFileSet]) -> None:
        """Delete extracted files, then their directory"""
        pass


class LineCounter(ABC):
    """Port for counting matching lines in extracted files"""

    @abstractmethod
    def count(self, file_set: ExtractedFileSet, search_text: Optional[str]) -> ResultMap:
        """Count lines containing search_text (all lines if None) per file"""
        pass
