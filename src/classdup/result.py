"""Outcomes of a duplicate class check.

A check either passes (:class:`Ok`), completes and finds differing duplicates
(:class:`DuplicateClassesFailure`), or is aborted by an I/O problem (:class:`FatalFailure`).
"""

from dataclasses import dataclass

from .artifact import Conflict


class RunResult:
    """Base class of the three outcomes of a check."""

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        raise NotImplementedError()


@dataclass(frozen=True)
class Ok(RunResult):
    @property
    def ok(self) -> bool:
        return True

    @property
    def message(self) -> str:
        return "No duplicates found"


@dataclass(frozen=True)
class DuplicateClassesFailure(RunResult):
    """The check completed but classes with differing bytes were found.

    Attributes:
        conflict_count: Number of class paths with differing copies
        conflicts: The conflicts, sorted by rendered class name
    """
    conflict_count: int
    conflicts: tuple[Conflict, ...] = ()

    @property
    def message(self) -> str:
        return f"Duplicate classes found on classpath. {self.conflict_count} instances detected."


@dataclass(frozen=True)
class FatalFailure(RunResult):
    """The check could not complete.

    Attributes:
        error_message: Description of the failure
        cause: The exception that aborted the check
    """
    error_message: str
    cause: BaseException

    @property
    def message(self) -> str:
        return self.error_message
