from typing import Mapping

from ..artifact import ArtifactRef


ContentionMap = dict[str, frozenset[ArtifactRef]]


def invert(index: Mapping[ArtifactRef, frozenset[str]]) -> dict[str, set[ArtifactRef]]:
    """Map every class path to the set of archives containing it."""
    classes_to_artifacts: dict[str, set[ArtifactRef]] = {}
    for artifact, class_paths in index.items():
        for class_path in class_paths:
            classes_to_artifacts.setdefault(class_path, set()).add(artifact)
    return classes_to_artifacts


def filter_contended(classes_to_artifacts: Mapping[str, set[ArtifactRef]]) -> ContentionMap:
    """Keep only class paths found in more than one archive."""
    return {
        class_path: frozenset(artifacts)
        for class_path, artifacts in classes_to_artifacts.items()
        if len(artifacts) > 1
    }


def build_contention_map(index: Mapping[ArtifactRef, frozenset[str]]) -> ContentionMap:
    return filter_contended(invert(index))
