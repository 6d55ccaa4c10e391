"""Class index construction.

Builds the mapping from each admitted archive to the class entries it contains. Admission is
decided per artifact before any archive is opened; artifacts that fail admission are skipped
with an informational record, never with an error.
"""

from asyncio import TaskGroup
from collections.abc import Set
from typing import Iterable

from ..artifact import ALLOWED_ARTIFACT_TYPES, ArtifactRef
from ..errors import ArchiveIoError, IndexBuildError, first_fatal_error
from ..log import LogSink
from ..utils.processor import Processor
from ..utils.throttler import Throttler


ArchiveIndex = dict[ArtifactRef, frozenset[str]]


def admit(artifact: ArtifactRef, ignored: frozenset[str], log: LogSink) -> bool:
    """Decide whether an artifact takes part in duplicate detection.

    The rules are evaluated in order and the first one that fails skips the artifact:
    ignored coordinate, unresolved path, missing file, directory, type other than
    ``jar`` or ``test-jar``.

    Returns:
        True if the archive should be indexed
    """
    if artifact.coordinate in ignored:
        log.info(f"Ignoring {artifact.coordinate}")
        return False

    path = artifact.path
    if path is None:
        log.info(f"No file resolved for {artifact}. Ignoring...")
        return False
    if not path.exists():
        log.info(f"File does not exist: {path.absolute()}. Ignoring...")
        return False
    if path.is_dir():
        log.info(f"File is a directory: {path.absolute()}. Ignoring...")
        return False
    if artifact.type not in ALLOWED_ARTIFACT_TYPES:
        log.info(f"File is a {artifact.type}: {path.absolute()}. Ignoring...")
        return False

    return True


def ordered_artifacts(artifacts: Iterable[ArtifactRef]) -> Iterable[ArtifactRef]:
    """Give unordered collections of artifacts a stable order.

    Sets iterate in an order that depends on the hash seed, so they are sorted by coordinates.
    Any other iterable keeps the order it was supplied in.
    """
    if isinstance(artifacts, Set):
        return sorted(artifacts, key=lambda artifact: artifact.sort_key)
    return artifacts


async def build_archive_index(
        artifacts: Iterable[ArtifactRef],
        ignored: frozenset[str],
        processor: Processor,
        log: LogSink) -> ArchiveIndex:
    """List the class entries of every admitted artifact.

    Artifacts are admitted in input order (coordinate order for sets) and the returned index
    keeps that order. An artifact supplied more than once is indexed once. Artifacts without any
    class entry still get an (empty) index entry.

    Raises:
        IndexBuildError: An admitted archive could not be read
    """
    candidates = list(dict.fromkeys(ordered_artifacts(artifacts)))
    admitted = [artifact for artifact in candidates if admit(artifact, ignored, log)]

    index: ArchiveIndex = {}
    try:
        async with TaskGroup() as tg:
            throttler = Throttler(tg, processor.concurrency * 2)
            tasks = []
            for number, artifact in enumerate(admitted, start=1):
                assert artifact.path is not None
                log.debug(f"{number} / {len(admitted)}\tSearching for duplicate classes in: "
                          f"{artifact.path.absolute()}")
                tasks.append(await throttler.schedule(processor.list_classes(artifact.path)))
    except ExceptionGroup as group:
        error = first_fatal_error(group)
        if isinstance(error, ArchiveIoError):
            raise IndexBuildError(str(error)) from error
        raise

    for artifact, task in zip(admitted, tasks):
        index[artifact] = task.result()

    return index
