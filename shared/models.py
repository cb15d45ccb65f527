"""
Data models for the Project Log service.

This module provides:
- The immutable project registration record
- Commit records parsed from git output
- Commit categories with keyword classification
- The synthesized log entry returned to clients
"""

import re
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


class CommitCategory(str, Enum):
    """Commit categories, in classification order."""
    FIX = "fix"
    FEATURE = "feature"
    IMPROVEMENT = "improvement"
    DOCS = "docs"
    TEST = "test"
    OTHER = "other"

    @classmethod
    def from_message(cls, message: str) -> "CommitCategory":
        """Classify a commit message; the first matching category wins."""
        for category, pattern in CATEGORY_PATTERNS:
            if pattern.search(message or ""):
                return category
        return cls.OTHER

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


# Order matters: "fix: implement retry" is a fix, not a feature.
CATEGORY_PATTERNS: Tuple[Tuple[CommitCategory, "re.Pattern[str]"], ...] = (
    (CommitCategory.FIX, re.compile(r"修复|fix|bug|问题|error", re.IGNORECASE)),
    (CommitCategory.FEATURE, re.compile(r"添加|新增|feat|功能|create|implement", re.IGNORECASE)),
    (CommitCategory.IMPROVEMENT, re.compile(r"优化|改进|improve|重构|refactor", re.IGNORECASE)),
    (CommitCategory.DOCS, re.compile(r"文档|doc|readme|说明|guide", re.IGNORECASE)),
    (CommitCategory.TEST, re.compile(r"测试|test|spec", re.IGNORECASE)),
)

CATEGORY_LABELS = {
    CommitCategory.FIX: "🔧 Fix",
    CommitCategory.FEATURE: "✨ Feature",
    CommitCategory.IMPROVEMENT: "🚀 Improvement",
    CommitCategory.DOCS: "📚 Docs",
    CommitCategory.TEST: "🧪 Test",
    CommitCategory.OTHER: "📝 Other",
}


def classify_commit_message(message: str) -> CommitCategory:
    """Return the category of a single commit message."""
    return CommitCategory.from_message(message)


class ProjectRegistration(BaseModel):
    """A project the scanner operates over. Immutable once loaded."""

    id: str = Field(..., min_length=1, description="Project identifier")
    name: str = Field(..., min_length=1, description="Display name")
    path: str = Field(..., min_length=1, description="Filesystem path")

    model_config = {"frozen": True}


class CommitRecord(BaseModel):
    """One line of ``git log --pretty=format:%h|%s|%ai`` output."""

    hash: str = Field(..., description="Short commit hash")
    msg: str = Field(default="", description="Subject line")
    time: str = Field(default="", description="Author timestamp as printed by git")

    @classmethod
    def from_log_line(cls, line: str) -> "CommitRecord":
        """
        Parse a ``hash|subject|timestamp`` line.

        The subject may itself contain ``|``, so the hash ends at the first
        separator and the timestamp starts after the last one.
        """
        commit_hash, _, rest = line.partition("|")
        msg, sep, timestamp = rest.rpartition("|")
        if not sep:
            msg, timestamp = rest, ""
        return cls(hash=commit_hash.strip(), msg=msg, time=timestamp.strip())

    @property
    def category(self) -> CommitCategory:
        return classify_commit_message(self.msg)


class ChangeSet(BaseModel):
    """Commits and changed files found for one project in the scan window."""

    commits: List[CommitRecord] = Field(default_factory=list)
    files_changed: List[str] = Field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return len(self.commits) > 0


class LogTag(BaseModel):
    """Display tag attached to a log entry."""

    name: str
    type: CommitCategory

    @classmethod
    def for_category(cls, category: CommitCategory) -> "LogTag":
        return cls(name=category.label, type=category)


class LogEntry(BaseModel):
    """A synthesized project-log entry. Returned to clients, never stored."""

    id: str = Field(..., description="Synthesized entry identifier")
    project_id: str = Field(..., alias="projectId")
    project_name: str = Field(..., alias="projectName")
    date: date
    datetime: str = Field(..., description="Human-readable local generation time")
    title: str
    tags: List[LogTag] = Field(default_factory=list)
    items: List[str] = Field(default_factory=list)
    code: Optional[str] = None

    model_config = {"populate_by_name": True}

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        if len(v) != 1:
            raise ValueError("A log entry carries exactly one tag")
        return v
