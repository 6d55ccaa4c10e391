"""Describe subcommand for displaying a stored check report."""

from pathlib import Path

from ..report.store import ReportStore


def do_describe(report_dir: Path, show_paths: bool = False) -> int:
    """Print the manifest and conflicts of a report.

    Args:
        report_dir: Directory written by ``classdup check --report``
        show_paths: Also print the archive files involved in each conflict

    Returns:
        Number of conflicts printed
    """
    store = ReportStore(report_dir)
    manifest = store.read_manifest()

    print(f"Report: {report_dir}")
    print(f"Timestamp: {manifest.timestamp}")
    print(f"Artifacts: {manifest.artifact_count}")
    if manifest.ignored:
        print(f"Ignored: {', '.join(manifest.ignored)}")
    print(f"Outcome: {manifest.outcome}")

    with store:
        conflicts = sorted(store.iter_conflicts(), key=lambda c: (c.class_name, c.class_path))

    for conflict in conflicts:
        print(conflict.describe())
        if show_paths:
            print(f"  {conflict.representative.gav}: {conflict.representative.path}")
            print(f"  {conflict.offender.gav}: {conflict.offender.path}")

    print(manifest.message)
    return len(conflicts)
