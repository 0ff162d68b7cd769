"""List the files a pull request or push changed, via the GitHub API."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from migrascope.github.api import GitHubClient
from migrascope.github.event import EventSource, PullRequestEvent, PushEvent
from migrascope.output.workflow import group

logger = logging.getLogger(__name__)

# `before` of a push that created the branch; there is nothing to diff against
NULL_SHA = "0" * 40


class FileStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
    RENAMED = "renamed"


class ChangedFilesError(RuntimeError):
    """Raised when GitHub reports a file status this tool does not know."""


@dataclass
class ChangedFiles:
    all: list[str] = field(default_factory=list)
    added: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    renamed: list[str] = field(default_factory=list)
    added_modified: list[str] = field(default_factory=list)

    def add(self, filename: str, status: str) -> None:
        try:
            kind = FileStatus(status)
        except ValueError:
            expected = ",".join(s.value for s in FileStatus)
            raise ChangedFilesError(
                f"One of your files includes an unsupported file status '{status}', "
                f"expected {expected}."
            ) from None

        self.all.append(filename)
        if kind is FileStatus.ADDED:
            self.added.append(filename)
            self.added_modified.append(filename)
        elif kind is FileStatus.MODIFIED:
            self.modified.append(filename)
            self.added_modified.append(filename)
        elif kind is FileStatus.REMOVED:
            self.removed.append(filename)
        else:
            self.renamed.append(filename)


def diff_range(event: EventSource) -> tuple[str, str] | None:
    """(base, head) commits to compare, or None for events without a diff."""
    if isinstance(event, PullRequestEvent):
        return event.base_sha, event.head_sha
    if isinstance(event, PushEvent):
        return event.before, event.after
    logger.warning(
        "`report-only-changed-files: true` supports only on `pull_request` and "
        "`push`, `%s` events are not supported.", event.event_name,
    )
    return None


def _strip_prefix(filename: str, prefix: str) -> str:
    if prefix and filename.startswith(prefix):
        return filename[len(prefix):]
    return filename


def get_changed_files(
    client: GitHubClient,
    owner: str,
    repo: str,
    event: EventSource,
    path_prefix: str = "",
) -> ChangedFiles | None:
    """Files changed between the event's base and head commits.

    Returns None when the event type has no base/head pair.
    """
    commits = diff_range(event)
    if commits is None:
        return None
    base, head = commits

    with group("Changed files"):
        logger.info("Base commit: %s", base)
        logger.info("Head commit: %s", head)

        if base == NULL_SHA:
            data = client.get_commit(owner, repo, head)
        else:
            data = client.compare_commits(owner, repo, base, head)

        changed = ChangedFiles()
        for entry in data.get("files") or []:
            changed.add(_strip_prefix(entry["filename"], path_prefix), entry["status"])

        logger.info("All: %s", ",".join(changed.all))
        logger.info("Added: %s", ", ".join(changed.added))
        logger.info("Modified: %s", ", ".join(changed.modified))
        logger.info("Removed: %s", ", ".join(changed.removed))
        logger.info("Renamed: %s", ", ".join(changed.renamed))
        logger.info("Added or modified: %s", ", ".join(changed.added_modified))

    return changed
