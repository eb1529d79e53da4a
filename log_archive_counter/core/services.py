"""
Application Services - Use cases that orchestrate domain logic

These are the entry points to the core. They coordinate between
domain models and ports, but contain no infrastructure concerns.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Literal, Optional

from .domain import CountRequest, ExtractedFileSet, ResultMap
from .ports import ArchiveExtractor, LineCounter

logger = logging.getLogger(__name__)

Strategy = Literal["sequential", "parallel"]

# At or below this many execution units threads don't pay off
MIN_WORKERS_FOR_PARALLEL = 2


def select_strategy(file_count: int, available_workers: int, min_files_for_parallel: int) -> Strategy:
    """Pick the counting strategy for one call"""
    if available_workers <= MIN_WORKERS_FOR_PARALLEL or file_count < min_files_for_parallel:
        return "sequential"
    return "parallel"


class CountOccurrencesService:
    """Use case: count matching lines, choosing sequential or parallel per call"""

    def __init__(
        self,
        sequential: LineCounter,
        parallel: LineCounter,
        available_workers: int,
        min_files_for_parallel: int
    ):
        self.sequential = sequential
        self.parallel = parallel
        self.available_workers = available_workers
        self.min_files_for_parallel = min_files_for_parallel

    def execute(self, file_set: ExtractedFileSet, search_text: Optional[str] = None) -> ResultMap:
        strategy = select_strategy(
            len(file_set),
            self.available_workers,
            self.min_files_for_parallel
        )
        logger.debug(f"Counting {len(file_set.files)} files ({len(file_set)} paths) with {strategy} strategy")
        counter = self.parallel if strategy == "parallel" else self.sequential
        return counter.count(file_set, search_text)


@contextmanager
def extracted_files(extractor: ArchiveExtractor, request: CountRequest) -> Iterator[ExtractedFileSet]:
    """Extract for the duration of a block; cleanup runs on every exit path"""
    file_set = extractor.extract(request)
    try:
        yield file_set
    finally:
        extractor.cleanup(file_set)


class CountEntriesService:
    """Use case: extract log files from an archive and count their lines"""

    def __init__(self, extractor: ArchiveExtractor, counter: CountOccurrencesService):
        self.extractor = extractor
        self.counter = counter

    def execute(self, request: CountRequest) -> ResultMap:
        """
        Count lines containing request.search_text in every log file of the
        archive that falls inside the requested date window.

        Returns an empty map when no file qualifies.
        """
        with extracted_files(self.extractor, request) as file_set:
            return self.counter.execute(file_set, request.search_text)
