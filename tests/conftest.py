"""
Shared fixtures
"""
from datetime import date
from pathlib import Path

import pytest

from log_archive_counter.adapters import ZipArchiveExtractor

from archive_helpers import log_content, log_name, make_zip


@pytest.fixture
def sample_entries() -> dict[str, str]:
    """Five days of logs, 2018-02-27 .. 2018-03-03, plus noise"""
    return {
        log_name(date(2018, 2, 27)): log_content(50, 40),
        log_name(date(2018, 2, 28)): log_content(19, 18),
        log_name(date(2018, 3, 1)): log_content(23, 23),
        log_name(date(2018, 3, 2)): log_content(23, 10),
        log_name(date(2018, 3, 3)): log_content(30, 0),
        "readme.txt": log_content(5, 5),
        "logs_2018-02-27-error.log": log_content(7, 7),
    }


@pytest.fixture
def sample_zip(tmp_path, sample_entries) -> Path:
    return make_zip(tmp_path / "logs-27_02_2018-03_03_2018.zip", sample_entries)


@pytest.fixture
def temp_base(tmp_path) -> Path:
    return tmp_path / "tmp"


@pytest.fixture
def extractor(temp_base) -> ZipArchiveExtractor:
    return ZipArchiveExtractor(temp_base, today=lambda: date(2018, 3, 1))
