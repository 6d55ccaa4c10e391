import asyncio
import logging
import multiprocessing
from multiprocessing.pool import Pool
import pathlib
from typing import Awaitable

from ..archive.reader import compare_entries, find_class_entries

logger = logging.getLogger(__name__)


def list_class_entries_for_path(path: pathlib.Path):
    return find_class_entries(path)


def compare_entry_content(a: pathlib.Path, b: pathlib.Path, name: str):
    return compare_entries(a, b, name)


class Processor:
    """Worker pool running archive I/O off the event loop.

    Every operation returns an awaitable resolved from the pool's result callback. Exceptions
    raised in a worker, such as :class:`~classdup.errors.ArchiveIoError`, are re-raised by the
    awaitable.
    """

    def __init__(self, concurrency: int | None = None):
        if concurrency is None:
            concurrency = multiprocessing.cpu_count()

        if concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {concurrency}")

        self._concurrency = concurrency
        self._pool: Pool = Pool(self._concurrency)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self._pool.close()
        self._pool.join()

    @property
    def concurrency(self):
        return self._concurrency

    def list_classes(self, path: pathlib.Path) -> Awaitable[frozenset[str]]:
        logger.debug(f"Starting class listing for: {path}")

        async def log_and_list():
            result = await self._evaluate(list_class_entries_for_path, path)
            logger.debug(f"Completed class listing for: {path} ({len(result)} classes)")
            return result

        return log_and_list()

    def compare_content(self, a: pathlib.Path, b: pathlib.Path, name: str) -> Awaitable[bool]:
        """Compare the content of an entry in two archives.

        :return: True if both entries are equal, False otherwise."""
        logger.debug(f"Starting content comparison of {name}: {a} vs {b}")

        async def log_and_compare():
            result = await self._evaluate(compare_entry_content, a, b, name)
            logger.debug(f"Completed content comparison of {name}: {a} vs {b} (equal={result})")
            return result

        return log_and_compare()

    def _evaluate(self, func, *args):
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def resolve(value):
            if not future.done():
                future.set_result(value)

        def reject(error):
            if not future.done():
                future.set_exception(error)

        def deliver(settle, value):
            # A run aborted by a fatal error may close the loop while workers are still busy
            try:
                loop.call_soon_threadsafe(settle, value)
            except RuntimeError:
                logger.debug(f"Dropped result of {func.__name__}: event loop is closed")

        self._pool.apply_async(func, args=args,
                               callback=lambda v: deliver(resolve, v),
                               error_callback=lambda e: deliver(reject, e))

        return future
