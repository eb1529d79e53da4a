"""
Domain Models - Pure business entities

No external dependencies. These represent the core business concepts.
"""
import io
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union
from zipfile import ZipInfo

ARCHIVE_SUFFIX = ".zip"

# File name -> number of matching lines
ResultMap = dict[str, int]


@dataclass(frozen=True)
class ArchiveSource:
    """An uploaded (or local) archive: original file name plus its bytes"""
    filename: Optional[str]
    content: Union[bytes, Path, BinaryIO]

    @classmethod
    def from_path(cls, path: str | Path) -> "ArchiveSource":
        path = Path(path)
        return cls(filename=path.name, content=path)

    @classmethod
    def from_bytes(cls, filename: Optional[str], data: bytes) -> "ArchiveSource":
        return cls(filename=filename, content=data)

    @property
    def is_archive(self) -> bool:
        """Name ends with the literal (case-sensitive) archive suffix"""
        return bool(self.filename) and self.filename.endswith(ARCHIVE_SUFFIX)

    def open_stream(self) -> BinaryIO:
        """Return a readable binary stream positioned at the start"""
        if isinstance(self.content, bytes):
            return io.BytesIO(self.content)
        if isinstance(self.content, Path):
            return open(self.content, "rb")
        self.content.seek(0)
        return self.content


@dataclass(frozen=True)
class CountRequest:
    """One counting request"""
    archive: Optional[ArchiveSource]
    search_text: Optional[str] = None
    start_date: Optional[date] = None
    days: Optional[int] = None  # window length, non-negative


@dataclass
class LogFileDescriptor:
    """An archive entry that follows the daily log naming convention"""
    name: str
    log_date: date
    entry: ZipInfo


@dataclass
class ExtractedFileSet:
    """
    Paths created by one extraction.

    paths[0] is the owning temporary directory, every later element is a
    regular file inside it.
    """
    paths: list[Path] = field(default_factory=list)

    @property
    def directory(self) -> Optional[Path]:
        return self.paths[0] if self.paths else None

    @property
    def files(self) -> list[Path]:
        return self.paths[1:]

    def add(self, path: Path) -> None:
        if path not in self.paths:
            self.paths.append(path)

    def __iter__(self) -> Iterator[Path]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)
