"""Report storage for duplicate class check results."""

import datetime
import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Iterator

import mmh3
import msgpack
import plyvel

from ..artifact import ArtifactRef, Conflict
from ..result import DuplicateClassesFailure, FatalFailure, RunResult


def _artifact_to_list(artifact: ArtifactRef) -> list[Any]:
    path = None if artifact.path is None else str(artifact.path)
    return [artifact.group, artifact.name, artifact.version, artifact.type, path]


def _artifact_from_list(data: list[Any]) -> ArtifactRef:
    group, name, version, artifact_type, path = data
    return ArtifactRef(group, name, version, artifact_type, None if path is None else Path(path))


def conflict_to_msgpack(conflict: Conflict) -> bytes:
    """Serialize a conflict to msgpack format for storage.

    Returns:
        Msgpack-encoded bytes containing [class_path, representative, offender] where each
        artifact is [group, name, version, type, path]
    """
    result = msgpack.dumps([
        conflict.class_path,
        _artifact_to_list(conflict.representative),
        _artifact_to_list(conflict.offender),
    ])
    assert isinstance(result, bytes)
    return result


def conflict_from_msgpack(data: bytes) -> Conflict:
    decoded = msgpack.loads(data)
    assert isinstance(decoded, list)
    class_path, representative, offender = decoded
    return Conflict(class_path, _artifact_from_list(representative), _artifact_from_list(offender))


@dataclass
class ReportManifest:
    """Summary of a check, persisted as manifest.json in the report directory."""
    version: str = "1.0"
    """Report format version"""

    timestamp: str = ""
    """ISO format timestamp when the check was performed"""

    outcome: str = ""
    """'ok', 'duplicates' or 'fatal'"""

    message: str = ""
    """Final message of the check"""

    artifact_count: int = 0
    """Number of artifacts supplied to the check"""

    conflict_count: int = 0
    """Number of class paths with differing copies"""

    ignored: list[str] | None = None
    """Coordinates excluded from the check"""

    def to_dict(self) -> dict[str, Any]:
        """Convert manifest to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReportManifest":
        """Load manifest from dictionary."""
        return cls(**data)

    @classmethod
    def for_result(cls, result: RunResult, artifact_count: int, ignored=()) -> "ReportManifest":
        if isinstance(result, DuplicateClassesFailure):
            outcome, conflict_count = 'duplicates', result.conflict_count
        elif isinstance(result, FatalFailure):
            outcome, conflict_count = 'fatal', 0
        else:
            outcome, conflict_count = 'ok', 0

        return cls(
            timestamp=datetime.datetime.now(datetime.UTC).isoformat(),
            outcome=outcome,
            message=result.message,
            artifact_count=artifact_count,
            conflict_count=conflict_count,
            ignored=sorted(ignored),
        )


class ReportStore:
    """Handles reading and writing check reports to a report directory with LevelDB storage.

    Conflicts are keyed by the 128-bit Murmur3 hash of their class path followed by the class
    path itself.
    """

    def __init__(self, report_dir: Path) -> None:
        self.report_dir: Path = report_dir
        self.manifest_path: Path = report_dir / 'manifest.json'
        self.database_path: Path = report_dir / 'database'
        self._database: plyvel.DB | None = None

    def create_report_directory(self) -> None:
        """Create the report directory if it doesn't exist."""
        self.report_dir.mkdir(parents=True, exist_ok=True)

    def open_database(self, *, create_if_missing: bool = False) -> None:
        """Open the LevelDB database.

        Args:
            create_if_missing: If True, create the database if it doesn't exist.
                              If False, raise FileNotFoundError if database doesn't exist.
        """
        if create_if_missing:
            self.database_path.mkdir(parents=True, exist_ok=True)
        elif not self.database_path.exists():
            raise FileNotFoundError(f"Database directory not found: {self.database_path}")
        self._database = plyvel.DB(str(self.database_path), create_if_missing=create_if_missing)

    def close_database(self) -> None:
        """Close the LevelDB database."""
        if self._database is not None:
            self._database.close()
            self._database = None

    def __enter__(self) -> "ReportStore":
        """Context manager entry."""
        self.open_database()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close_database()

    def _db(self) -> plyvel.DB:
        if self._database is None:
            raise RuntimeError("Database not opened. Use context manager or call open_database().")
        return self._database

    def truncate(self) -> None:
        """Remove all conflict records."""
        database = self._db()
        with database.write_batch() as batch:
            for key in database.iterator(include_value=False):
                batch.delete(key)

    def write_conflict(self, conflict: Conflict) -> None:
        """Write a conflict record, replacing any record for the same class path."""
        self._db().put(self._compute_key(conflict.class_path), conflict_to_msgpack(conflict))

    def read_conflict(self, class_path: str) -> Conflict | None:
        """Read the conflict recorded for a class path.

        Returns:
            The conflict if found, None otherwise
        """
        data = self._db().get(self._compute_key(class_path))
        if data is None:
            return None
        return conflict_from_msgpack(data)

    def iter_conflicts(self) -> Iterator[Conflict]:
        """Yield all recorded conflicts in storage order."""
        for _, value in self._db().iterator():
            yield conflict_from_msgpack(value)

    def write_manifest(self, manifest: ReportManifest) -> None:
        with open(self.manifest_path, 'w') as f:
            json.dump(manifest.to_dict(), f, indent=2)

    def read_manifest(self) -> ReportManifest:
        """Read existing report manifest.

        Raises:
            FileNotFoundError: If manifest.json doesn't exist
        """
        with open(self.manifest_path, 'r') as f:
            data = json.load(f)
        return ReportManifest.from_dict(data)

    @staticmethod
    def _compute_key(class_path: str) -> bytes:
        """Compute the database key for a class path.

        Returns:
            16 bytes of 128-bit Murmur3 hash followed by the UTF-8 encoded class path
        """
        encoded = class_path.encode('utf-8')
        hash_value = mmh3.hash128(encoded, signed=False)
        return hash_value.to_bytes(16, byteorder='big') + encoded


def save_report(report_dir: Path, result: RunResult, artifact_count: int, ignored=()) -> None:
    """Persist the outcome of a check, replacing any earlier report in the same directory."""
    store = ReportStore(report_dir)
    store.create_report_directory()
    store.open_database(create_if_missing=True)
    try:
        store.truncate()
        if isinstance(result, DuplicateClassesFailure):
            for conflict in result.conflicts:
                store.write_conflict(conflict)
    finally:
        store.close_database()

    store.write_manifest(ReportManifest.for_result(result, artifact_count, ignored))
