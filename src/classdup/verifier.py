"""Byte-level verification of contended class paths.

For each class path found in several archives, one archive is taken as the representative and
every other archive's copy is compared with it. Comparing against a single reference keeps the
work linear in the number of archives, at the price of reporting at most one offender per class
path.
"""

from asyncio import TaskGroup
from typing import Mapping

from .artifact import ArtifactRef, Conflict
from .errors import EntryNotFound, MissingEntryError, first_fatal_error
from .utils.processor import Processor
from .utils.throttler import Throttler


def order_archives(archives: frozenset[ArtifactRef],
                   ranking: Mapping[ArtifactRef, int] | None = None) -> list[ArtifactRef]:
    """Order the archives of a class path; the first one becomes the representative.

    Archives are ordered by their rank (their position in the input), archives without a rank
    come last in coordinate order.
    """
    if ranking is None:
        ranking = {}
    unranked = len(ranking)
    return sorted(archives, key=lambda artifact: (ranking.get(artifact, unranked), artifact.sort_key))


class ConflictVerifier:
    """Compares the copies of contended class paths and collects conflicts."""

    def __init__(self, processor: Processor, ranking: Mapping[ArtifactRef, int] | None = None):
        self._processor = processor
        self._ranking = ranking

    async def run(self, contentions: Mapping[str, frozenset[ArtifactRef]]) -> list[Conflict]:
        """Verify every contended class path.

        Class paths are verified concurrently; the first fatal error aborts the whole run.

        Returns:
            Conflicts sorted by rendered class name

        Raises:
            MissingEntryError: A class path vanished from one of its archives
            ArchiveIoError: An archive could not be read
        """
        try:
            async with TaskGroup() as tg:
                throttler = Throttler(tg, self._processor.concurrency * 2)
                tasks = []
                for class_path in sorted(contentions):
                    archives = order_archives(contentions[class_path], self._ranking)
                    tasks.append(await throttler.schedule(self.verify(class_path, archives)))
        except ExceptionGroup as group:
            error = first_fatal_error(group)
            if error is None:
                raise
            raise error

        conflicts = [conflict for task in tasks if (conflict := task.result()) is not None]
        conflicts.sort(key=lambda conflict: (conflict.class_name, conflict.class_path))
        return conflicts

    async def verify(self, class_path: str, archives: list[ArtifactRef]) -> Conflict | None:
        """Compare every archive's copy of a class path with the representative's.

        Args:
            class_path: The contended archive entry name
            archives: At least two archives containing the entry, representative first

        Returns:
            A conflict naming the first archive whose copy differs, or None if all copies match
        """
        representative, *others = archives
        for other in others:
            if not await self._compare(class_path, representative, other):
                return Conflict(class_path, representative, other)
        return None

    async def _compare(self, class_path: str, a: ArtifactRef, b: ArtifactRef) -> bool:
        assert a.path is not None and b.path is not None
        try:
            return await self._processor.compare_content(a.path, b.path, class_path)
        except EntryNotFound as e:
            missing = a if str(e.path) == str(a.path) else b
            raise MissingEntryError(class_path, missing.gav) from e


async def verify_contentions(
        contentions: Mapping[str, frozenset[ArtifactRef]],
        processor: Processor,
        ranking: Mapping[ArtifactRef, int] | None = None) -> list[Conflict]:
    return await ConflictVerifier(processor, ranking).run(contentions)
