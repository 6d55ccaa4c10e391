from dataclasses import dataclass, field
from pathlib import Path


ALLOWED_ARTIFACT_TYPES = frozenset({'jar', 'test-jar'})

CLASS_SUFFIX = '.class'


def render_class_name(class_path: str) -> str:
    """Turn an archive entry name such as ``a/b/C.class`` into ``a.b.C``."""
    if class_path.endswith(CLASS_SUFFIX):
        class_path = class_path[:-len(CLASS_SUFFIX)]
    return class_path.replace('/', '.')


@dataclass(frozen=True)
class ArtifactRef:
    """An archive supplied by the host, identified by its coordinates and type.

    The filesystem path is carried along but does not take part in equality or hashing,
    so the same artifact resolved to two locations is still one artifact.

    Attributes:
        group: Group identifier (e.g. ``org.example``)
        name: Artifact identifier within the group
        version: Version string
        type: Opaque type label; only ``jar`` and ``test-jar`` are ever indexed
        path: Location of the archive, or None if the host could not resolve it
    """
    group: str
    name: str
    version: str
    type: str = 'jar'
    path: Path | None = field(default=None, compare=False)

    @property
    def coordinate(self) -> str:
        """``group:name``, the form used by ignore lists."""
        return f"{self.group}:{self.name}"

    @property
    def gav(self) -> str:
        """``group:name:version``, the form used in reports."""
        return f"{self.group}:{self.name}:{self.version}"

    @property
    def sort_key(self) -> tuple[str, str]:
        return self.gav, self.type

    def __str__(self):
        return f"{self.gav}:{self.type}"


@dataclass(frozen=True)
class Conflict:
    """A class path whose bytes differ between two archives.

    Only the first offender found for a class path is recorded.
    """
    class_path: str
    representative: ArtifactRef
    offender: ArtifactRef

    @property
    def class_name(self) -> str:
        return render_class_name(self.class_path)

    def describe(self) -> str:
        return (f"Multiple differing copies of {self.class_name} found in "
                f"{self.representative.gav} and {self.offender.gav}")
