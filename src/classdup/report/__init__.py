"""Reporting of duplicate class findings.

This package contains:
- reporter: emits conflict records and turns findings into a RunResult
- store: ReportStore, ReportManifest and ConflictRecord for persistence
"""
