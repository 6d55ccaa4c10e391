"""Read access to jar archives.

Entry names are used exactly as they are stored in the archive: forward slashes, case-sensitive,
no normalization.
"""

import itertools
import os
import zipfile
import zlib
from contextlib import closing
from pathlib import Path
from typing import IO, Iterator

from ..errors import ArchiveIoError, EntryNotFound


MODULE_INFO = 'module-info.class'

# Read buffer size for streamed entry comparison (64KB)
CHUNK_SIZE = 64 * 1024

_ARCHIVE_ERRORS = (OSError, zipfile.BadZipFile, zlib.error, EOFError)

# zipfile raises these for unsupported compression methods and encrypted entries
_ENTRY_ERRORS = _ARCHIVE_ERRORS + (NotImplementedError, RuntimeError)


def is_class_entry(name: str) -> bool:
    """Check whether an archive entry name denotes a class file taking part in duplicate detection."""
    return name.endswith('.class') and MODULE_INFO not in name


class ArchiveReader:
    """Scoped read-only handle on a single archive.

    Use as a context manager; the underlying file is released on every exit path. Every I/O or
    format failure surfaces as :class:`ArchiveIoError` carrying the archive path.

    Example:
        with ArchiveReader(Path('lib/foo-1.0.jar')) as reader:
            for name in reader.class_entries():
                ...
    """

    def __init__(self, path: str | os.PathLike):
        self._path = Path(path)
        self._zip: zipfile.ZipFile | None = None

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> None:
        try:
            self._zip = zipfile.ZipFile(self._path)
        except _ARCHIVE_ERRORS as e:
            raise ArchiveIoError(self._path, e) from e

    def close(self) -> None:
        if self._zip is not None:
            archive, self._zip = self._zip, None
            try:
                archive.close()
            except _ARCHIVE_ERRORS as e:
                raise ArchiveIoError(self._path, e) from e

    def __enter__(self) -> 'ArchiveReader':
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _archive(self) -> zipfile.ZipFile:
        if self._zip is None:
            raise RuntimeError("Archive not opened. Use context manager or call open().")
        return self._zip

    def entry_names(self) -> Iterator[str]:
        """Yield the names of all entries in archive order."""
        try:
            infos = self._archive().infolist()
        except _ARCHIVE_ERRORS as e:
            raise ArchiveIoError(self._path, e) from e
        for info in infos:
            yield info.filename

    def class_entries(self) -> Iterator[str]:
        """Yield the names of class entries, skipping module descriptors."""
        return (name for name in self.entry_names() if is_class_entry(name))

    def entry_size(self, name: str) -> int:
        """Uncompressed size of an entry as recorded in the archive directory."""
        try:
            return self._archive().getinfo(name).file_size
        except KeyError:
            raise EntryNotFound(self._path, name) from None

    def open_entry(self, name: str) -> IO[bytes]:
        """Open a binary stream over the decompressed content of an entry."""
        archive = self._archive()
        try:
            return archive.open(name)
        except KeyError:
            raise EntryNotFound(self._path, name) from None
        except _ENTRY_ERRORS as e:
            raise ArchiveIoError(self._path, e) from e

    def iter_chunks(self, name: str, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
        """Yield the decompressed content of an entry in chunks of ``chunk_size`` bytes.

        Every chunk but the last has exactly ``chunk_size`` bytes.
        """
        with self.open_entry(name) as stream:
            while True:
                try:
                    chunk = stream.read(chunk_size)
                except _ENTRY_ERRORS as e:
                    raise ArchiveIoError(self._path, e) from e
                if not chunk:
                    return
                yield chunk

    def read_entry(self, name: str) -> bytes:
        """Read the full decompressed content of an entry."""
        return b''.join(self.iter_chunks(name))


def find_class_entries(path: str | os.PathLike) -> frozenset[str]:
    """Collect the class entry names of one archive."""
    with ArchiveReader(path) as reader:
        return frozenset(reader.class_entries())


def compare_entries(path_a: str | os.PathLike, path_b: str | os.PathLike, name: str,
                    chunk_size: int = CHUNK_SIZE) -> bool:
    """Compare an entry of two archives byte for byte.

    Both entries are streamed in lockstep and the comparison stops at the first differing chunk,
    so memory use does not depend on the entry size.

    :return: True if both entries hold exactly the same bytes, False otherwise.
    """
    with ArchiveReader(path_a) as reader_a, ArchiveReader(path_b) as reader_b:
        if reader_a.entry_size(name) != reader_b.entry_size(name):
            return False

        with closing(reader_a.iter_chunks(name, chunk_size)) as chunks_a, \
                closing(reader_b.iter_chunks(name, chunk_size)) as chunks_b:
            for chunk_a, chunk_b in itertools.zip_longest(chunks_a, chunks_b):
                if chunk_a != chunk_b:
                    return False

        return True
