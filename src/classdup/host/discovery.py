"""Discovery of the artifacts to check from filesystem paths.

Coordinates are taken from the Maven metadata a jar carries under ``META-INF/maven`` when it
carries exactly one ``pom.properties``; otherwise they are derived from the file name.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator

from ..archive.reader import ArchiveReader
from ..artifact import ArtifactRef
from ..errors import ArchiveIoError

logger = logging.getLogger(__name__)

UNKNOWN_GROUP = 'unknown'
UNKNOWN_VERSION = 'unknown'
TEST_JAR_SUFFIX = '-tests'

_POM_PROPERTIES = re.compile(r'META-INF/maven/[^/]+/[^/]+/pom\.properties')
_NAME_VERSION = re.compile(r'(?P<name>.+?)-(?P<version>\d[^-]*(?:-.+)?)')
_PROPERTY = re.compile(r'(?P<key>[^=:\s]+)\s*[=:]?\s*(?P<value>.*)')


def parse_properties(text: str) -> dict[str, str]:
    """Parse the simple ``key=value`` form of a Java properties file."""
    properties = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line[0] in '#!':
            continue
        match = _PROPERTY.match(line)
        if match is not None:
            properties[match['key']] = match['value']
    return properties


def read_maven_coordinates(path: Path) -> tuple[str, str, str] | None:
    """Read ``(groupId, artifactId, version)`` from the single pom.properties inside a jar.

    Returns:
        The coordinates, or None if the jar has no or several pom.properties, or an incomplete one
    """
    with ArchiveReader(path) as reader:
        candidates = [name for name in reader.entry_names() if _POM_PROPERTIES.fullmatch(name)]
        if len(candidates) != 1:
            return None
        text = reader.read_entry(candidates[0]).decode('iso-8859-1')

    properties = parse_properties(text)
    try:
        return properties['groupId'], properties['artifactId'], properties['version']
    except KeyError:
        return None


def split_file_name(stem: str) -> tuple[str, str]:
    """Split a file name stem such as ``foo-bar-1.2.3`` into name and version."""
    match = _NAME_VERSION.fullmatch(stem)
    if match is None:
        return stem, UNKNOWN_VERSION
    return match['name'], match['version']


def artifact_for_path(path: Path) -> ArtifactRef:
    """Build the artifact reference of one archive file.

    ``*-tests.jar`` files are test jars; other files are typed by their extension, so that only
    jars pass admission later on.
    """
    stem = path.stem
    artifact_type = path.suffix[1:] or 'unknown'
    if artifact_type == 'jar' and stem.endswith(TEST_JAR_SUFFIX):
        artifact_type = 'test-jar'
        stem = stem[:-len(TEST_JAR_SUFFIX)]

    coordinates = None
    if path.is_file():
        try:
            coordinates = read_maven_coordinates(path)
        except ArchiveIoError as e:
            logger.warning(f"Unable to read Maven metadata: {e}")

    if coordinates is None:
        name, version = split_file_name(stem)
        coordinates = UNKNOWN_GROUP, name, version

    group, name, version = coordinates
    return ArtifactRef(group, name, version, artifact_type, path)


def _walk_archives(path: Path) -> Iterator[Path]:
    if path.is_dir():
        yield from sorted(p for p in path.rglob('*.jar') if p.is_file())
    else:
        yield path


def discover_artifacts(paths: Iterable[Path]) -> list[ArtifactRef]:
    """Collect artifact references for files and directory trees.

    Directories are searched recursively for ``*.jar`` files in sorted order; other paths are
    taken as given, even if they do not exist. The result keeps the order of discovery, which
    decides the representative of each contended class. When two archives resolve to the same
    coordinates only the first is kept.
    """
    artifacts: dict[ArtifactRef, ArtifactRef] = {}
    for root in paths:
        for path in _walk_archives(Path(root)):
            artifact = artifact_for_path(path)
            if artifact in artifacts:
                logger.warning(f"{path} has the same coordinates as {artifacts[artifact].path}, "
                               f"keeping {artifacts[artifact].path}")
                continue
            artifacts[artifact] = artifact
    return list(artifacts)
