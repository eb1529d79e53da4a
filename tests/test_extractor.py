"""
Unit tests for the zip extractor

Date-window policy, entry filtering, encoding fallback and cleanup.
"""
import io
import zipfile
from datetime import date

import pytest

from log_archive_counter.adapters.zip_archive import (
    FALLBACK_ENCODING,
    ZipArchiveExtractor,
    is_in_window,
)
from log_archive_counter.core.domain import ArchiveSource, CountRequest, ExtractedFileSet
from log_archive_counter.core.errors import (
    INVALID_ARCHIVE_MESSAGE,
    InvalidInputError,
    InvalidStateError,
    IOFailure,
)

from archive_helpers import (
    PLACEHOLDER,
    log_content,
    log_name,
    make_cp437_zip,
    make_zip,
    set_compression_method,
    set_encrypted_flag,
)


def names(file_set: ExtractedFileSet) -> list[str]:
    return [path.name for path in file_set.files]


class TestWindowPolicy:
    """Test the four date-window cases."""

    today = date(2018, 3, 1)

    def test_no_start_no_days_keeps_only_today(self):
        assert is_in_window(date(2018, 3, 1), None, None, self.today)
        assert not is_in_window(date(2018, 2, 28), None, None, self.today)
        assert not is_in_window(date(2018, 3, 2), None, None, self.today)

    def test_days_only_has_no_upper_bound(self):
        assert is_in_window(date(2018, 2, 27), None, 2, self.today)
        assert not is_in_window(date(2018, 2, 26), None, 2, self.today)
        assert is_in_window(date(2019, 1, 1), None, 2, self.today)

    def test_start_only_keeps_exact_day(self):
        start = date(2018, 2, 27)
        assert is_in_window(start, start, None, self.today)
        assert not is_in_window(date(2018, 2, 28), start, None, self.today)

    def test_start_and_days_is_half_open(self):
        start = date(2018, 2, 27)
        included = [date(2018, 2, 27), date(2018, 2, 28), date(2018, 3, 1)]
        for day in included:
            assert is_in_window(day, start, 3, self.today)
        assert not is_in_window(date(2018, 3, 2), start, 3, self.today)
        assert not is_in_window(date(2018, 2, 26), start, 3, self.today)

    def test_zero_days_window_is_empty(self):
        start = date(2018, 2, 27)
        assert not is_in_window(start, start, 0, self.today)

    def test_huge_days_without_start_has_no_lower_bound(self):
        assert is_in_window(date(1, 1, 1), None, 800_000, self.today)
        assert is_in_window(date(2018, 3, 1), None, 10**12, self.today)

    def test_huge_days_with_start_has_no_upper_bound(self):
        start = date(2018, 2, 27)
        assert is_in_window(date(9999, 12, 31), start, 3_000_000, self.today)
        assert is_in_window(start, start, 10**12, self.today)
        assert not is_in_window(date(2018, 2, 26), start, 3_000_000, self.today)


class TestExtract:
    """Test extracting matching entries."""

    def test_start_and_days(self, extractor, sample_zip):
        request = CountRequest(
            archive=ArchiveSource.from_path(sample_zip),
            start_date=date(2018, 2, 27),
            days=3
        )
        file_set = extractor.extract(request)

        assert file_set.directory.is_dir()
        assert file_set.directory.parent == extractor.temp_dir
        assert names(file_set) == [
            "logs_2018-02-27-access.log",
            "logs_2018-02-28-access.log",
            "logs_2018-03-01-access.log",
        ]
        assert all(path.parent == file_set.directory for path in file_set.files)
        extractor.cleanup(file_set)

    def test_defaults_to_today(self, extractor, sample_zip):
        file_set = extractor.extract(CountRequest(archive=ArchiveSource.from_path(sample_zip)))
        assert names(file_set) == ["logs_2018-03-01-access.log"]
        extractor.cleanup(file_set)

    def test_days_without_start_counts_back_from_today(self, temp_base, sample_zip):
        extractor = ZipArchiveExtractor(temp_base, today=lambda: date(2018, 3, 3))
        file_set = extractor.extract(CountRequest(archive=ArchiveSource.from_path(sample_zip), days=2))
        assert names(file_set) == [
            "logs_2018-03-01-access.log",
            "logs_2018-03-02-access.log",
            "logs_2018-03-03-access.log",
        ]
        extractor.cleanup(file_set)

    def test_copies_decompressed_content(self, extractor, sample_zip, sample_entries):
        request = CountRequest(archive=ArchiveSource.from_path(sample_zip), start_date=date(2018, 2, 28))
        file_set = extractor.extract(request)
        assert file_set.files[0].read_text() == sample_entries["logs_2018-02-28-access.log"]
        extractor.cleanup(file_set)

    def test_non_matching_names_are_skipped(self, extractor, tmp_path):
        archive = make_zip(tmp_path / "noise.zip", {
            "logs_2018-02-27-access.txt": "x\n",
            "LOGS_2018-02-27-access.log": "x\n",
            "logs_2018-2-27-access.log": "x\n",
            "old_logs_2018-02-27-access.log": "x\n",
            "logs_2018-02-30-access.log": "x\n",
            "logs_2018-02-27-access.log/": "",
        })
        request = CountRequest(archive=ArchiveSource.from_path(archive), start_date=date(2018, 2, 27), days=5)
        file_set = extractor.extract(request)
        assert list(file_set) == [file_set.directory]
        extractor.cleanup(file_set)

    def test_entries_in_directories_use_bare_name(self, extractor, tmp_path):
        name = log_name(date(2018, 2, 27))
        archive = make_zip(tmp_path / "nested.zip", {
            "january/": "",
            f"january/{name}": log_content(3, 1),
            f"backup/old/{name}": log_content(4, 4),
        })
        request = CountRequest(archive=ArchiveSource.from_path(archive), start_date=date(2018, 2, 27))
        file_set = extractor.extract(request)

        # Later entry overwrites the earlier one, the path is recorded once
        assert names(file_set) == [name]
        assert file_set.files[0].read_text() == log_content(4, 4)
        extractor.cleanup(file_set)

    def test_empty_archive_returns_only_directory(self, extractor, tmp_path):
        archive = make_zip(tmp_path / "empty.zip", {})
        file_set = extractor.extract(CountRequest(archive=ArchiveSource.from_path(archive), days=3))
        assert len(file_set) == 1
        assert file_set.directory.is_dir()
        extractor.cleanup(file_set)

    def test_accepts_bytes_and_streams(self, extractor, sample_zip):
        data = sample_zip.read_bytes()
        for source in (
            ArchiveSource.from_bytes("upload.zip", data),
            ArchiveSource(filename="upload.zip", content=io.BytesIO(data)),
        ):
            file_set = extractor.extract(CountRequest(archive=source, start_date=date(2018, 2, 27)))
            assert names(file_set) == ["logs_2018-02-27-access.log"]
            extractor.cleanup(file_set)

    def test_each_extraction_gets_its_own_directory(self, extractor, sample_zip):
        request = CountRequest(archive=ArchiveSource.from_path(sample_zip))
        first = extractor.extract(request)
        second = extractor.extract(request)
        assert first.directory != second.directory
        extractor.cleanup(first)
        extractor.cleanup(second)

    @pytest.mark.parametrize("start_date,days", [
        (date(2018, 2, 27), 3_000_000),
        (None, 800_000),
    ])
    def test_huge_window_keeps_every_log(self, extractor, sample_zip, start_date, days):
        request = CountRequest(archive=ArchiveSource.from_path(sample_zip), start_date=start_date, days=days)
        file_set = extractor.extract(request)
        assert len(file_set.files) == 5
        extractor.cleanup(file_set)
        assert list(extractor.temp_dir.iterdir()) == []

    def test_creates_missing_temp_base(self, tmp_path):
        base = tmp_path / "a" / "b"
        ZipArchiveExtractor(base)
        assert base.is_dir()


class TestInvalidInput:
    """Test request validation happens before any extraction."""

    @pytest.mark.parametrize("source", [
        None,
        ArchiveSource(filename=None, content=b""),
        ArchiveSource(filename="SuYo.jpg", content=b""),
        ArchiveSource(filename="logs.ZIP", content=b""),
    ])
    def test_rejects_missing_or_non_zip(self, extractor, source):
        with pytest.raises(InvalidInputError) as exc_info:
            extractor.extract(CountRequest(archive=source, search_text="Mozilla"))
        assert str(exc_info.value) == INVALID_ARCHIVE_MESSAGE
        assert list(extractor.temp_dir.iterdir()) == []

    def test_rejects_negative_days(self, extractor, sample_zip):
        with pytest.raises(InvalidInputError):
            extractor.extract(CountRequest(archive=ArchiveSource.from_path(sample_zip), days=-1))

    def test_corrupted_archive_is_io_failure(self, extractor):
        source = ArchiveSource.from_bytes("broken.zip", b"definitely not a zip")
        with pytest.raises(IOFailure):
            extractor.extract(CountRequest(archive=source))
        assert list(extractor.temp_dir.iterdir()) == []

    def test_missing_file_is_io_failure(self, extractor, tmp_path):
        with pytest.raises(IOFailure):
            extractor.extract(CountRequest(archive=ArchiveSource.from_path(tmp_path / "missing.zip")))
        assert list(extractor.temp_dir.iterdir()) == []

    @pytest.mark.parametrize("damage", [set_encrypted_flag, lambda path: set_compression_method(path, 9)])
    def test_unreadable_entry_is_io_failure(self, extractor, tmp_path, damage):
        archive = make_zip(tmp_path / "damaged.zip", {
            log_name(date(2018, 2, 27)): log_content(3, 1),
            log_name(date(2018, 2, 28)): log_content(3, 1),
        }, compression=zipfile.ZIP_STORED)
        damage(archive)
        request = CountRequest(archive=ArchiveSource.from_path(archive), start_date=date(2018, 2, 27), days=2)

        with pytest.raises(IOFailure) as exc_info:
            extractor.extract(request)

        assert isinstance(exc_info.value.__cause__, (NotImplementedError, RuntimeError))
        # The entry copied before the failure is gone too
        assert list(extractor.temp_dir.iterdir()) == []

    def test_unexpected_error_still_cleans_up(self, extractor, sample_zip, monkeypatch):
        def broken_copy(archive, descriptor, target):
            target.write_text("partial")
            raise ValueError("unexpected")

        monkeypatch.setattr(ZipArchiveExtractor, "_copy_entry", staticmethod(broken_copy))
        with pytest.raises(ValueError, match="unexpected"):
            extractor.extract(CountRequest(archive=ArchiveSource.from_path(sample_zip), days=30))
        assert list(extractor.temp_dir.iterdir()) == []


class TestEncodingFallback:
    """Test the legacy code page retry for non-UTF-8 entry names."""

    def test_retries_with_cp437(self, extractor, tmp_path, caplog):
        name = log_name(date(2018, 2, 27))
        archive = make_cp437_zip(tmp_path / "windows.zip", {
            f"{PLACEHOLDER.decode()}/{name}": log_content(10, 4),
            f"{PLACEHOLDER.decode()}/{log_name(date(2018, 2, 28))}": log_content(2, 2),
        })
        request = CountRequest(archive=ArchiveSource.from_path(archive), start_date=date(2018, 2, 27), days=1)

        with caplog.at_level("WARNING"):
            file_set = extractor.extract(request)

        assert names(file_set) == [name]
        assert file_set.files[0].read_text() == log_content(10, 4)
        assert FALLBACK_ENCODING in caplog.text
        # The failed first attempt left nothing behind
        assert list(extractor.temp_dir.iterdir()) == [file_set.directory]
        extractor.cleanup(file_set)

    def test_retry_failure_surfaces_as_io_failure(self, extractor, sample_zip, monkeypatch):
        def always_mismatch(self, request, encoding):
            from log_archive_counter.core.errors import EncodingMismatchError
            raise EncodingMismatchError(encoding, UnicodeDecodeError("utf-8", b"\x8e", 0, 1, "invalid start byte"))

        monkeypatch.setattr(ZipArchiveExtractor, "_extract_with_encoding", always_mismatch)
        with pytest.raises(IOFailure) as exc_info:
            extractor.extract(CountRequest(archive=ArchiveSource.from_path(sample_zip)))
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)


class TestCleanup:
    """Test deleting extracted files."""

    def test_removes_files_and_directory(self, extractor, sample_zip):
        request = CountRequest(archive=ArchiveSource.from_path(sample_zip), start_date=date(2018, 2, 27), days=5)
        file_set = extractor.extract(request)
        assert len(file_set.files) == 5

        extractor.cleanup(file_set)

        assert not any(path.exists() for path in file_set)
        assert list(extractor.temp_dir.iterdir()) == []

    def test_second_cleanup_is_noop(self, extractor, sample_zip):
        file_set = extractor.extract(CountRequest(archive=ArchiveSource.from_path(sample_zip)))
        extractor.cleanup(file_set)
        extractor.cleanup(file_set)

    def test_accepts_plain_path_list(self, extractor, sample_zip):
        file_set = extractor.extract(CountRequest(archive=ArchiveSource.from_path(sample_zip), days=10))
        extractor.cleanup(list(file_set))
        assert not file_set.directory.exists()

    @pytest.mark.parametrize("empty", [None, [], ExtractedFileSet()])
    def test_empty_set_is_invalid_state(self, extractor, empty):
        with pytest.raises(InvalidStateError):
            extractor.cleanup(empty)
