"""Turn a project's change set into a project-log entry."""

import uuid
from datetime import date, datetime
from typing import Optional

from shared.models import ChangeSet, LogEntry, LogTag, ProjectRegistration

DATETIME_DISPLAY_FORMAT = "%Y/%m/%d %H:%M:%S"


def build_log_entry(
    project_id: str,
    project: ProjectRegistration,
    changes: Optional[ChangeSet],
    today: date,
    now: Optional[datetime] = None,
) -> Optional[LogEntry]:
    """
    Synthesize one log entry for a project with commits.

    Only the first (oldest) commit is classified; its category titles and
    tags the whole entry, even when later commits are of another kind.

    Returns:
        LogEntry, or None when there is nothing to report.
    """
    if changes is None or not changes.commits:
        return None

    category = changes.commits[0].category
    tag = LogTag.for_category(category)
    now = now or datetime.now()

    return LogEntry(
        id=uuid.uuid4().hex,
        project_id=project_id,
        project_name=project.name,
        date=today,
        datetime=now.strftime(DATETIME_DISPLAY_FORMAT),
        title=f"{tag.name} - {project.name}",
        tags=[tag],
        items=[f"✅ {commit.msg}" for commit in changes.commits],
        code=None,
    )
