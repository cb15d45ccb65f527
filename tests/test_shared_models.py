"""
Unit tests for shared models.

This module covers commit classification, git log line parsing and the
log entry model's wire format.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from shared.models import (
    ChangeSet,
    CommitCategory,
    CommitRecord,
    LogEntry,
    LogTag,
    ProjectRegistration,
    classify_commit_message,
)


class TestCommitClassification:
    """Test cases for commit message classification."""

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("Fix crash on empty config", CommitCategory.FIX),
            ("修复登录问题", CommitCategory.FIX),
            ("feat: dark mode", CommitCategory.FEATURE),
            ("新增导出功能", CommitCategory.FEATURE),
            ("Implement retry queue", CommitCategory.FEATURE),
            ("Refactor scanner", CommitCategory.IMPROVEMENT),
            ("优化加载速度", CommitCategory.IMPROVEMENT),
            ("Update README", CommitCategory.DOCS),
            ("补充使用说明", CommitCategory.DOCS),
            ("Add unit tests", CommitCategory.TEST),
            ("Bump version", CommitCategory.OTHER),
            ("", CommitCategory.OTHER),
        ],
    )
    def test_classify_commit_message(self, message, expected):
        """Test each category's keywords."""
        assert classify_commit_message(message) == expected

    def test_classification_is_case_insensitive(self):
        """Test keyword matching ignores case."""
        assert classify_commit_message("HOTFIX for BUG 12") == CommitCategory.FIX

    def test_fix_takes_precedence_over_feature(self):
        """Test a message matching fix and feature keywords is a fix."""
        message = "feat: implement retry to fix flaky upload"

        assert classify_commit_message(message) == CommitCategory.FIX

    def test_feature_takes_precedence_over_test(self):
        """Test earlier categories win over later ones."""
        assert classify_commit_message("create test data") == CommitCategory.FEATURE

    def test_category_labels(self):
        """Test every category has a display label."""
        assert CommitCategory.FIX.label == "🔧 Fix"
        assert CommitCategory.OTHER.label == "📝 Other"
        assert all(category.label for category in CommitCategory)


class TestCommitRecord:
    """Test cases for CommitRecord parsing."""

    def test_from_log_line(self):
        """Test parsing a regular git log line."""
        record = CommitRecord.from_log_line("a1b2c3d|Add login page|2026-10-19 10:15:00 +0800")

        assert record.hash == "a1b2c3d"
        assert record.msg == "Add login page"
        assert record.time == "2026-10-19 10:15:00 +0800"

    def test_subject_containing_separator(self):
        """Test a subject with | keeps every part of the message."""
        record = CommitRecord.from_log_line("a1b2c3d|Fix a|b parsing|2026-10-19 10:15:00 +0800")

        assert record.msg == "Fix a|b parsing"
        assert record.time == "2026-10-19 10:15:00 +0800"

    def test_line_without_timestamp(self):
        """Test a truncated line still yields a record."""
        record = CommitRecord.from_log_line("a1b2c3d|Only a subject")

        assert record.hash == "a1b2c3d"
        assert record.msg == "Only a subject"
        assert record.time == ""

    def test_category_property(self):
        """Test the record exposes its classification."""
        record = CommitRecord(hash="a1b2c3d", msg="docs: guide", time="")

        assert record.category == CommitCategory.DOCS


class TestChangeSet:
    """Test cases for ChangeSet."""

    def test_has_changes(self):
        """Test has_changes reflects the commit list."""
        assert ChangeSet().has_changes is False
        assert ChangeSet(commits=[CommitRecord(hash="a1b2c3d")]).has_changes is True


class TestProjectRegistration:
    """Test cases for ProjectRegistration."""

    def test_registration_is_frozen(self):
        """Test registrations cannot be changed."""
        project = ProjectRegistration(id="demo", name="Demo", path="/srv/demo")

        with pytest.raises(ValidationError):
            project.path = "/elsewhere"


class TestLogEntry:
    """Test cases for LogEntry."""

    @pytest.fixture
    def entry(self):
        """Create a sample entry."""
        return LogEntry(
            id="abc",
            project_id="demo",
            project_name="Demo",
            date=date(2026, 10, 19),
            datetime="2026/10/19 09:30:00",
            title="🔧 Fix - Demo",
            tags=[LogTag.for_category(CommitCategory.FIX)],
            items=["✅ Fix crash"],
        )

    def test_serializes_with_camel_case_keys(self, entry):
        """Test the wire format uses projectId/projectName."""
        data = entry.model_dump(mode="json", by_alias=True)

        assert data == {
            "id": "abc",
            "projectId": "demo",
            "projectName": "Demo",
            "date": "2026-10-19",
            "datetime": "2026/10/19 09:30:00",
            "title": "🔧 Fix - Demo",
            "tags": [{"name": "🔧 Fix", "type": "fix"}],
            "items": ["✅ Fix crash"],
            "code": None,
        }

    def test_accepts_aliases(self, entry):
        """Test entries can be rebuilt from their wire format."""
        rebuilt = LogEntry.model_validate(entry.model_dump(mode="json", by_alias=True))

        assert rebuilt == entry

    def test_requires_single_tag(self):
        """Test an entry must carry exactly one tag."""
        with pytest.raises(ValidationError):
            LogEntry(
                id="abc",
                project_id="demo",
                project_name="Demo",
                date=date(2026, 10, 19),
                datetime="2026/10/19 09:30:00",
                title="Demo",
                tags=[],
            )
