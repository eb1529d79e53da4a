"""
Adapters - External implementations of ports

This package contains implementations of the core ports:
- zip_archive.py: Zip-based log file extractor
- counting.py: Sequential and worker-pool line counters
"""
from .zip_archive import ZipArchiveExtractor
from .counting import SequentialLineCounter, ParallelLineCounter

__all__ = [
    "ZipArchiveExtractor",
    "SequentialLineCounter",
    "ParallelLineCounter",
]
