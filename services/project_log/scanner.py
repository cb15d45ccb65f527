"""
Git change scanner.

Runs ``git log`` in a project checkout for the scan window (the day before the
target date through the end of the target date) and parses the pipe-delimited
output into commit records. Every non-error "nothing to report" outcome, and
every git failure, is reported as ``None``.
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from git import Repo, InvalidGitRepositoryError, NoSuchPathError

from shared.models import ChangeSet, CommitRecord

logger = logging.getLogger(__name__)

LOG_PRETTY_FORMAT = "%h|%s|%ai"


def scan_window(today: date, lookback_days: int = 1) -> Tuple[str, str]:
    """Return the inclusive ``(since, until)`` bounds git understands."""
    start = today - timedelta(days=lookback_days)
    return f"{start.isoformat()} 00:00:00", f"{today.isoformat()} 23:59:59"


def parse_log_output(output: str) -> List[CommitRecord]:
    """Parse ``%h|%s|%ai`` lines, keeping git's order."""
    return [
        CommitRecord.from_log_line(line)
        for line in output.splitlines()
        if line.strip()
    ]


def parse_name_only_output(output: str) -> List[str]:
    """Unique file paths from ``--name-only`` output, in first-seen order."""
    seen = dict.fromkeys(line.strip() for line in output.splitlines() if line.strip())
    return list(seen)


class ChangeScanner:
    """Detects recent commits in a local checkout."""

    def __init__(self, lookback_days: int = 1, command_timeout: Optional[float] = None):
        self.lookback_days = lookback_days
        self.command_timeout = command_timeout

    def _git_kwargs(self) -> Dict[str, Any]:
        if self.command_timeout is None:
            return {}
        return {"kill_after_timeout": self.command_timeout}

    def open_repository(self, path: str) -> Optional[Repo]:
        """Open the checkout containing ``path``, or ``None`` if there is none."""
        try:
            return Repo(path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            return None

    def scan(self, path: str, today: date) -> Optional[ChangeSet]:
        """
        Collect the commits made in the scan window ending on ``today``.

        Args:
            path: Project checkout directory
            today: Last calendar day of the window

        Returns:
            ChangeSet with commits oldest first, or None when the path is not
            a repository, nothing was committed, or git failed.
        """
        try:
            repo = self.open_repository(path)
            if repo is None:
                logger.debug(f"Not a git repository: {path}")
                return None

            with repo:
                if not repo.head.is_valid():
                    logger.debug(f"Repository has no commits yet: {path}")
                    return None

                since, until = scan_window(today, self.lookback_days)
                output = repo.git.log(
                    f"--since={since}",
                    f"--until={until}",
                    f"--pretty=format:{LOG_PRETTY_FORMAT}",
                    "--reverse",
                    **self._git_kwargs(),
                )
                commits = parse_log_output(output)
                if not commits:
                    return None

                files_changed = self.collect_changed_files(repo, since, until)

            return ChangeSet(commits=commits, files_changed=files_changed)

        except Exception as e:
            logger.error(f"Failed to check git changes for {path}: {e}")
            return None

    def collect_changed_files(self, repo: Repo, since: str, until: str) -> List[str]:
        """Files touched in the window. Best effort: failures yield an empty list."""
        try:
            output = repo.git.log(
                f"--since={since}",
                f"--until={until}",
                "--name-only",
                "--pretty=format:",
                **self._git_kwargs(),
            )
            return parse_name_only_output(output)
        except Exception as e:
            logger.debug(f"Could not collect changed files in {repo.working_dir}: {e}")
            return []
