"""
Line Counting Adapters

Implement LineCounter port: a synchronous strategy and a worker-pool
strategy that must produce identical counts for the same file set.
"""
import logging
import queue
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Optional

from ..core.domain import ExtractedFileSet, ResultMap
from ..core.errors import FileReadError, IOFailure
from ..core.ports import LineCounter

logger = logging.getLogger(__name__)

DEFAULT_GRACE_SECONDS = 3.0


def count_occurrences(path: Path, search_text: Optional[str]) -> int:
    """Count lines containing search_text (plain substring), or all lines if None"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return sum(1 for line in f if search_text is None or search_text in line.rstrip("\n"))
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(path.name) from e


class SequentialLineCounter(LineCounter):
    """Counts files one by one, keeping file-set order"""

    def count(self, file_set: ExtractedFileSet, search_text: Optional[str]) -> ResultMap:
        result: ResultMap = {}
        for path in file_set:
            if path.is_dir():
                continue
            result[path.name] = count_occurrences(path, search_text)
        return result


class ParallelLineCounter(LineCounter):
    """
    Counts files with a fixed pool of symmetric workers pulling from one queue.

    Each worker returns its own (name, count) pairs and the caller merges them,
    so no map is shared between threads. The first unreadable file stops every
    worker from taking new files and the error is raised to the caller.
    """

    def __init__(self, max_workers: int, grace_seconds: float = DEFAULT_GRACE_SECONDS):
        self.max_workers = max_workers
        self.grace_seconds = grace_seconds

    def count(self, file_set: ExtractedFileSet, search_text: Optional[str]) -> ResultMap:
        file_count = len(file_set.files)
        if file_count == 0:
            return {}

        paths: "queue.Queue[Path]" = queue.Queue()
        for path in file_set:
            paths.put(path)

        stop = threading.Event()
        num_workers = max(1, min(file_count, self.max_workers))
        executor = ThreadPoolExecutor(max_workers=num_workers, thread_name_prefix="log-counter")
        deadline = time.monotonic() + self.grace_seconds
        futures = [executor.submit(self._drain, paths, search_text, stop) for _ in range(num_workers)]

        try:
            done, not_done = wait(futures, timeout=self.grace_seconds, return_when=FIRST_EXCEPTION)
            if not_done:
                # Failure or timeout: no new files, let workers finish the file in hand
                stop.set()
                done, not_done = wait(not_done, timeout=max(0.0, deadline - time.monotonic()))
        except BaseException:
            logger.warning("Interrupted while waiting for counting workers, cancelling")
            self._force_shutdown(executor, stop)
            raise

        if not_done:
            self._force_shutdown(executor, stop)
        else:
            executor.shutdown(wait=True)

        self._raise_first_failure(futures)
        if not_done:
            raise IOFailure(f"Counting did not finish within {self.grace_seconds} seconds")

        pairs = [pair for future in futures for pair in future.result()]
        return dict(sorted(pairs))

    @staticmethod
    def _drain(paths: "queue.Queue[Path]", search_text: Optional[str], stop: threading.Event) -> list[tuple[str, int]]:
        counted = []
        while not stop.is_set():
            try:
                path = paths.get_nowait()
            except queue.Empty:
                break
            if path.is_dir():
                continue
            try:
                counted.append((path.name, count_occurrences(path, search_text)))
            except FileReadError as e:
                logger.warning(
                    f"Exception during multithreaded file processing: {e} "
                    f"Worker {threading.current_thread().name} is stopping the batch."
                )
                stop.set()
                raise
        return counted

    @staticmethod
    def _force_shutdown(executor: ThreadPoolExecutor, stop: threading.Event) -> None:
        stop.set()
        executor.shutdown(wait=False, cancel_futures=True)

    @staticmethod
    def _raise_first_failure(futures: list[Future]) -> None:
        for future in futures:
            if future.done() and not future.cancelled() and future.exception() is not None:
                raise future.exception()
