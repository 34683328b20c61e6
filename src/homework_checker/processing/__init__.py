"""
Submission processing module.

Scans a submission directory against the configured roster.
"""

from .submissions import (
    ScanError,
    find_missing,
    has_submitted,
    list_entry_names,
)

__all__ = [
    "ScanError",
    "find_missing",
    "has_submitted",
    "list_entry_names",
]
