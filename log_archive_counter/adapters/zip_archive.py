"""
Zip Archive Adapter

Implements ArchiveExtractor port: unpacks daily access logs that fall inside
the requested date window into a per-request temporary directory.
"""
import logging
import re
import shutil
import tempfile
import time
import zipfile
import zlib
from contextlib import contextmanager
from datetime import date, timedelta
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, Optional, Sequence

from ..core.domain import ArchiveSource, CountRequest, ExtractedFileSet, LogFileDescriptor
from ..core.errors import (
    INVALID_ARCHIVE_MESSAGE,
    EncodingMismatchError,
    InvalidInputError,
    InvalidStateError,
    IOFailure
)
from ..core.ports import ArchiveExtractor

logger = logging.getLogger(__name__)

LOG_FILE_NAME_PATTERN = re.compile(r"logs_(\d{4}-\d{2}-\d{2})-access\.log")
DEFAULT_ENCODING = "utf-8"
# Code page used by older Windows archivers for non-ASCII names
FALLBACK_ENCODING = "cp437"


def parse_log_entry(entry: zipfile.ZipInfo) -> Optional[LogFileDescriptor]:
    """Return a descriptor if the entry's bare name is logs_<YYYY-MM-DD>-access.log"""
    name = entry.filename.rsplit("/", 1)[-1]
    match = LOG_FILE_NAME_PATTERN.fullmatch(name)
    if not match:
        return None
    try:
        log_date = date.fromisoformat(match.group(1))
    except ValueError:
        return None  # e.g. 2018-02-30
    return LogFileDescriptor(name=name, log_date=log_date, entry=entry)


def _shift(day: date, days: int) -> Optional[date]:
    """day + days, or None when the result falls outside the supported calendar"""
    try:
        return day + timedelta(days=days)
    except OverflowError:
        return None


def is_in_window(log_date: date, start_date: Optional[date], days: Optional[int], today: date) -> bool:
    """
    Date-window policy:

    - no start, no days: only today
    - days only: today - days and later (no upper bound)
    - start only: exactly start
    - both: start <= log_date < start + days

    A bound beyond the calendar's range drops out, so huge windows keep everything on that side.
    """
    if start_date is None and days is None:
        return log_date == today
    if start_date is None:
        earliest = _shift(today, -days)
        return earliest is None or log_date >= earliest
    if days is None:
        return log_date == start_date
    end = _shift(start_date, days)
    return start_date <= log_date and (end is None or log_date < end)


class ZipArchiveExtractor(ArchiveExtractor):
    """Extracts matching log files from zip archives into temp directories"""

    def __init__(self, temp_dir: str | Path, today: Callable[[], date] = date.today):
        self.temp_dir = Path(temp_dir)
        self.today = today
        self._ensure_temp_dir()

    def _ensure_temp_dir(self) -> None:
        if self.temp_dir.exists():
            logger.info(f"Temp directory for log files already exists: {self.temp_dir}")
            return
        logger.info(f"There is no temp directory for log files. Creating {self.temp_dir}")
        self.temp_dir.mkdir(parents=True, exist_ok=True)

    def _create_unzip_dir(self) -> Path:
        """One directory per extraction; mkdtemp guarantees the name is unique"""
        millis_suffix = str(time.time_ns() // 1_000_000)[5:]
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix=f"{millis_suffix}-", dir=self.temp_dir))

    @staticmethod
    def _validate(request: CountRequest) -> None:
        if request.archive is None or not request.archive.is_archive:
            raise InvalidInputError(INVALID_ARCHIVE_MESSAGE)
        if request.days is not None and request.days < 0:
            raise InvalidInputError(f"Number of days must not be negative: {request.days}")

    @staticmethod
    @contextmanager
    def _open(source: ArchiveSource) -> Iterator[BinaryIO]:
        stream = source.open_stream()
        try:
            yield stream
        finally:
            # Caller-owned streams stay open so a retry can rewind them
            if stream is not source.content:
                stream.close()

    def extract(self, request: CountRequest) -> ExtractedFileSet:
        """
        Unpack the log files of request.archive that fall inside the date window.

        Entry names are decoded as UTF-8 first; if that fails the whole
        extraction is redone once with the legacy cp437 code page.

        Returns:
            ExtractedFileSet whose first path is the temp directory
            (and nothing else when no entry qualifies)
        """
        self._validate(request)
        try:
            return self._extract_with_encoding(request, DEFAULT_ENCODING)
        except EncodingMismatchError as e:
            logger.warning(
                f"There is problem with zip file - {type(e.cause).__name__} ({e.cause}). "
                f"Trying {FALLBACK_ENCODING} instead of {DEFAULT_ENCODING}."
            )

        try:
            return self._extract_with_encoding(request, FALLBACK_ENCODING)
        except EncodingMismatchError as e:
            raise IOFailure(str(e)) from e.cause

    def _extract_with_encoding(self, request: CountRequest, encoding: str) -> ExtractedFileSet:
        logger.debug(f"Getting paths of log files from '{request.archive.filename}' with encoding {encoding}")
        file_set = ExtractedFileSet([self._create_unzip_dir()])
        today = self.today()

        try:
            with self._open(request.archive) as stream, \
                    zipfile.ZipFile(stream, metadata_encoding=encoding) as archive:
                for entry in archive.infolist():
                    if entry.is_dir():
                        continue
                    descriptor = parse_log_entry(entry)
                    if descriptor is None:
                        continue
                    if not is_in_window(descriptor.log_date, request.start_date, request.days, today):
                        continue
                    target = file_set.directory / descriptor.name
                    # Recorded first so cleanup also removes a partially written copy
                    file_set.add(target)
                    self._copy_entry(archive, descriptor, target)
        except UnicodeDecodeError as e:
            self.cleanup(file_set)
            raise EncodingMismatchError(encoding, e) from e
        except (zipfile.BadZipFile, zlib.error, OSError, EOFError, NotImplementedError, RuntimeError) as e:
            # Truncated data, unsupported compression methods and encrypted entries included
            self.cleanup(file_set)
            raise IOFailure(f"Cannot unzip '{request.archive.filename}': {e}") from e
        except BaseException:
            self.cleanup(file_set)
            raise

        logger.debug(f"Found {len(file_set.files)} log files in '{request.archive.filename}'")
        return file_set

    @staticmethod
    def _copy_entry(archive: zipfile.ZipFile, descriptor: LogFileDescriptor, target: Path) -> None:
        """Copy decompressed entry bytes, replacing any same-named earlier entry"""
        with archive.open(descriptor.entry) as src, open(target, "wb") as dst:
            shutil.copyfileobj(src, dst)

    def cleanup(self, file_set: Optional[Sequence[Path] | ExtractedFileSet]) -> None:
        """
        Delete the extracted files, then their parent directory.

        Already-missing paths are ignored, so calling this twice is harmless.
        """
        if not file_set:
            raise InvalidStateError(
                "The log file paths list for deleting is empty. "
                "There must be at least one path (created temp directory) to delete."
            )
        paths = list(file_set)
        directory, files = paths[0], paths[1:]
        try:
            for path in files:
                path.unlink(missing_ok=True)
            directory.rmdir()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise IOFailure(f"Cannot delete temporary log files in {directory}: {e}") from e
        logger.debug(f"Deleted {len(files)} temporary log files and {directory}")
