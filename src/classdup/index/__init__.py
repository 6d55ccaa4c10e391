"""Class index for duplicate detection.

This package contains:
- builder: admission of artifacts and the archive to class entries index
- inverter: the class entry to archives contention map
"""
