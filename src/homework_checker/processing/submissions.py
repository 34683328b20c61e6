"""
Submission discovery.

Determines which roster students have nothing in the submission
directory. A student counts as submitted when any entry directly under
the directory contains the student's name.
"""

import os
from pathlib import Path
from typing import Iterable

from ..config.models import Student
from ..utils.logging import get_logger

logger = get_logger(__name__)


class ScanError(Exception):
    """The submission directory could not be read."""

    def __init__(self, directory: Path, reason: str):
        super().__init__(f"Cannot read directory {directory}: {reason}")
        self.directory = directory


def list_entry_names(directory: Path) -> list[str]:
    """
    List names of files and subdirectories directly under a directory.

    Args:
        directory: Directory to list (not recursed into)

    Returns:
        Entry names in directory order

    Raises:
        ScanError: If the directory is missing, not a directory, or unreadable
    """
    try:
        with os.scandir(directory) as entries:
            return [entry.name for entry in entries]
    except OSError as e:
        raise ScanError(directory, e.strerror or str(e)) from e


def has_submitted(student: Student, entry_names: Iterable[str]) -> bool:
    """Check whether any entry name contains the student's name (case-sensitive)."""
    return any(student.name in name for name in entry_names)


def find_missing(
    roster: Iterable[Student],
    directory: str | Path | None = None,
) -> list[Student]:
    """
    Find students with no submission in a directory.

    Args:
        roster: Students in roster order
        directory: Directory holding the submissions. Defaults to the
            current working directory

    Returns:
        Missing students, in roster order

    Raises:
        ScanError: If the directory cannot be read
    """
    path = Path(directory) if directory is not None else Path(".")
    entry_names = list_entry_names(path)
    logger.info(f"Scanned {path}: {len(entry_names)} entries")

    missing = []
    for student in roster:
        if has_submitted(student, entry_names):
            logger.debug(f"Submission found for {student.name}")
        else:
            logger.debug(f"No submission for {student.name}")
            missing.append(student)

    logger.info(f"{len(missing)} students missing a submission")
    return missing
