"""
Tests for missing-submission detection.
"""

import os

import pytest

from homework_checker.config.models import Student
from homework_checker.processing.submissions import (
    ScanError,
    find_missing,
    has_submitted,
    list_entry_names,
)


def make_entries(directory, names):
    for name in names:
        (directory / name).write_text("submission", encoding="utf-8")


class TestListEntryNames:
    """Test directory listing."""

    def test_lists_files_and_directories(self, tmp_path):
        make_entries(tmp_path, ["a.pdf"])
        (tmp_path / "folder_b").mkdir()
        (tmp_path / "folder_b" / "nested_c.pdf").write_text("x", encoding="utf-8")

        assert sorted(list_entry_names(tmp_path)) == ["a.pdf", "folder_b"]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ScanError, match="Cannot read directory"):
            list_entry_names(tmp_path / "missing")

    def test_not_a_directory(self, tmp_path):
        file_path = tmp_path / "file.txt"
        file_path.write_text("x", encoding="utf-8")

        with pytest.raises(ScanError) as exc_info:
            list_entry_names(file_path)

        assert exc_info.value.directory == file_path
        assert isinstance(exc_info.value.__cause__, OSError)


class TestHasSubmitted:
    """Test substring matching."""

    def test_substring_match(self):
        assert has_submitted(Student("Li", "li@x.com"), ["hw1_Li_final.docx"])

    def test_case_sensitive(self):
        assert not has_submitted(Student("Li", "li@x.com"), ["hw1_li.docx"])

    def test_no_entries(self):
        assert not has_submitted(Student("Li", "li@x.com"), [])


class TestFindMissing:
    """Test missing list computation."""

    def test_one_submitted_one_missing(self, tmp_path, students):
        make_entries(tmp_path, ["A_hw1.pdf"])

        assert find_missing(students, tmp_path) == [Student("B", "b@x.com")]

    def test_empty_directory_reports_full_roster(self, tmp_path, students):
        assert find_missing(students, tmp_path) == students

    def test_empty_roster(self, tmp_path):
        make_entries(tmp_path, ["A_hw1.pdf"])

        assert find_missing([], tmp_path) == []

    def test_empty_roster_still_requires_readable_directory(self, tmp_path):
        with pytest.raises(ScanError):
            find_missing([], tmp_path / "missing")

    def test_roster_order_preserved(self, tmp_path):
        roster = [
            Student("Zoe", "z@x.com"),
            Student("Adam", "a@x.com"),
            Student("Mia", "m@x.com"),
        ]
        make_entries(tmp_path, ["Adam.pdf"])

        assert [s.name for s in find_missing(roster, tmp_path)] == ["Zoe", "Mia"]

    def test_subdirectory_counts_as_submission(self, tmp_path, students):
        (tmp_path / "A-project").mkdir()
        (tmp_path / "archive").mkdir()
        (tmp_path / "archive" / "B.pdf").write_text("x", encoding="utf-8")

        assert find_missing(students, tmp_path) == [Student("B", "b@x.com")]

    def test_unicode_names(self, tmp_path):
        roster = [Student("张三", "zs@x.com"), Student("李四", "ls@x.com")]
        make_entries(tmp_path, ["作业1-张三.docx"])

        assert find_missing(roster, tmp_path) == [Student("李四", "ls@x.com")]

    def test_defaults_to_current_directory(self, tmp_path, students, monkeypatch):
        make_entries(tmp_path, ["B_hw1.pdf"])
        monkeypatch.chdir(tmp_path)

        assert find_missing(students) == [Student("A", "a@x.com")]

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="permission checks do not apply to root",
    )
    def test_unreadable_directory(self, tmp_path, students):
        locked = tmp_path / "locked"
        locked.mkdir()
        locked.chmod(0)
        try:
            with pytest.raises(ScanError):
                find_missing(students, locked)
        finally:
            locked.chmod(0o755)
