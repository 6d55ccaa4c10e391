import asyncio
import logging
from typing import Iterable

from .artifact import ArtifactRef
from .commands.check import CheckArgs, do_check
from .errors import ClassDupError
from .log import LogSink
from .result import FatalFailure, RunResult
from .utils.processor import Processor

logger = logging.getLogger(__name__)


class DuplicateClassRule:
    """Rule failing when a class is present in several archives with differing bytes.

    The rule holds the ignore list and log destination shared by its checks, and a worker pool.
    When no processor is given, the rule creates one and closes it together with the rule.

    Example:
        with DuplicateClassRule(ignored={'org.example:legacy'}) as rule:
            result = rule.check(artifacts)
            if not result.ok:
                print(result.message)
    """

    def __init__(
            self,
            processor: Processor | None = None,
            ignored: Iterable[str] = (),
            logger: LogSink | None = None):
        """Initialize the rule.

        Args:
            processor: Worker pool for archive I/O, a private pool is created if None
            ignored: "group:name" coordinates excluded from indexing
            logger: Destination of the check's records, the classdup logger if None
        """
        self._owns_processor = processor is None
        self._processor = processor if processor is not None else Processor()
        self._ignored = frozenset(ignored)
        self._logger = logger

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the worker pool if this rule created it."""
        if self._owns_processor and self._processor is not None:
            self._processor.close()
            self._processor = None

    @property
    def ignored(self) -> frozenset[str]:
        return self._ignored

    def check(self, artifacts: Iterable[ArtifactRef]) -> RunResult:
        """Check a set of artifacts for differing duplicate classes.

        Args:
            artifacts: Archives to check; the first archive holding a contended class is the
                       reference its other copies are compared with. Sets are taken in
                       coordinate order, other iterables in the order given

        Returns:
            Ok, DuplicateClassesFailure, or FatalFailure when an archive could not be read
        """
        if self._processor is None:
            raise RuntimeError("Rule is closed")

        return run(CheckArgs(artifacts, self._ignored, self._logger), self._processor)


def run(args: CheckArgs, processor: Processor | None = None) -> RunResult:
    """Run a duplicate class check to completion.

    Fatal errors do not propagate; they are returned as FatalFailure carrying the error.
    """
    if processor is None:
        with Processor() as owned:
            return run(args, owned)

    try:
        return asyncio.run(do_check(args, processor))
    except ClassDupError as e:
        logger.debug(f"Check aborted: {e}")
        return FatalFailure(str(e), e)
