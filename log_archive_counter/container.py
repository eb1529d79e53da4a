"""
Dependency Injection Container

Wires together the hexagonal architecture by creating and injecting dependencies.
"""
import os
from pathlib import Path
from typing import Optional

from .adapters import ZipArchiveExtractor, SequentialLineCounter, ParallelLineCounter
from .adapters.counting import DEFAULT_GRACE_SECONDS
from .core import CountEntriesService, CountOccurrencesService


class Container:
    """Dependency injection container for the application"""

    def __init__(
        self,
        temp_dir: str | Path,
        min_files_for_parallel: int = 5,
        available_workers: Optional[int] = None,
        grace_seconds: float = DEFAULT_GRACE_SECONDS
    ):
        if available_workers is None:
            available_workers = os.cpu_count() or 1
        self.available_workers = available_workers

        # Adapters (infrastructure)
        self.extractor = ZipArchiveExtractor(temp_dir)
        self.sequential_counter = SequentialLineCounter()
        self.parallel_counter = ParallelLineCounter(
            max_workers=self.available_workers,
            grace_seconds=grace_seconds
        )

        # Services (use cases)
        self.count_occurrences = CountOccurrencesService(
            sequential=self.sequential_counter,
            parallel=self.parallel_counter,
            available_workers=self.available_workers,
            min_files_for_parallel=min_files_for_parallel
        )

        self.count_entries = CountEntriesService(
            extractor=self.extractor,
            counter=self.count_occurrences
        )
