from typing import Iterable, NamedTuple

from ..artifact import ArtifactRef
from ..index.builder import build_archive_index
from ..index.inverter import build_contention_map
from ..log import LogSink, default_sink
from ..report.reporter import report_conflicts
from ..result import RunResult
from ..utils.processor import Processor
from ..verifier import verify_contentions


class CheckArgs(NamedTuple):
    """Input of a duplicate class check."""
    artifacts: Iterable[ArtifactRef]  # Archives supplied by the host; sets are checked in coordinate order
    ignored: frozenset[str] = frozenset()  # "group:name" coordinates excluded from indexing
    logger: LogSink | None = None  # Destination of records, the classdup logger if None


async def do_check(args: CheckArgs, processor: Processor) -> RunResult:
    """Run the check pipeline: index, invert, verify, report.

    Each stage completes before the next one starts.

    Raises:
        IndexBuildError: An admitted archive could not be listed
        MissingEntryError: A class vanished from an archive between indexing and verification
        ArchiveIoError: An archive could not be read during verification
    """
    log = args.logger if args.logger is not None else default_sink()
    ignored = frozenset(args.ignored)

    index = await build_archive_index(args.artifacts, ignored, processor, log)
    contentions = build_contention_map(index)
    ranking = {artifact: rank for rank, artifact in enumerate(index)}
    conflicts = await verify_contentions(contentions, processor, ranking)

    return report_conflicts(conflicts, log)
