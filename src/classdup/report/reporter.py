from typing import Iterable

from ..artifact import Conflict
from ..log import LogSink
from ..result import DuplicateClassesFailure, Ok, RunResult


def report_conflicts(conflicts: Iterable[Conflict], log: LogSink) -> RunResult:
    """Emit one error record per conflict, ordered by class name, and decide the outcome.

    A failed check ends with an error record carrying the total count.

    Returns:
        Ok if there were no conflicts, DuplicateClassesFailure carrying the count otherwise
    """
    ordered = sorted(conflicts, key=lambda conflict: (conflict.class_name, conflict.class_path))

    for conflict in ordered:
        log.error(conflict.describe())

    if not ordered:
        result = Ok()
        log.info(result.message)
        return result

    result = DuplicateClassesFailure(len(ordered), tuple(ordered))
    log.error(result.message)
    return result
