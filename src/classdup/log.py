"""The logging interface the duplicate class check writes its findings to."""

import logging
from typing import Protocol


class LogSink(Protocol):
    """Destination of the records emitted during a check.

    ``debug`` carries per-archive progress, ``info`` skip decisions and the "no duplicates"
    record, ``error`` one record per conflict. A :class:`logging.Logger` satisfies this protocol.
    """

    def debug(self, msg: str) -> None:
        ...

    def info(self, msg: str) -> None:
        ...

    def warning(self, msg: str) -> None:
        ...

    def error(self, msg: str) -> None:
        ...


def default_sink() -> LogSink:
    return logging.getLogger('classdup')
