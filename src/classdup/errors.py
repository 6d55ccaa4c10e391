"""Exceptions raised while indexing and verifying archives.

Every exception keeps its constructor arguments in ``args`` so that it survives
the trip back from a worker process of the :class:`~classdup.utils.processor.Processor`.
"""

import os


class ClassDupError(Exception):
    """Base class of all fatal errors of a duplicate class check."""


class ArchiveIoError(ClassDupError):
    """Opening, reading or closing an archive failed.

    Attributes:
        path: The archive being accessed
        cause: The underlying I/O or format error
    """

    def __init__(self, path: str | os.PathLike, cause: BaseException):
        super().__init__(path, cause)
        self.path = path
        self.cause = cause

    def __str__(self):
        return f"Unable to process dependency {os.fspath(self.path)} due to {self.cause}"


class EntryNotFound(ClassDupError):
    """An archive has no entry with the requested name."""

    def __init__(self, path: str | os.PathLike, name: str):
        super().__init__(path, name)
        self.path = path
        self.name = name

    def __str__(self):
        return f"No entry {self.name} in {os.fspath(self.path)}"


class IndexBuildError(ClassDupError):
    """The class index could not be built because an admitted archive was unreadable."""


class MissingEntryError(ClassDupError):
    """A class recorded in the index has disappeared from its archive before verification.

    Attributes:
        class_path: The archive-internal class entry name
        coordinates: ``group:name:version`` of the archive that lost the entry
    """

    def __init__(self, class_path: str, coordinates: str):
        super().__init__(class_path, coordinates)
        self.class_path = class_path
        self.coordinates = coordinates

    def __str__(self):
        return f"Expected to find {self.class_path} in artifact: {self.coordinates}"


def first_fatal_error(group: BaseExceptionGroup) -> ClassDupError | None:
    """Find the first :class:`ClassDupError` in a (possibly nested) exception group."""
    matched = group.subgroup(lambda e: isinstance(e, ClassDupError))
    while matched is not None:
        first = matched.exceptions[0]
        if not isinstance(first, BaseExceptionGroup):
            return first
        matched = first
    return None
