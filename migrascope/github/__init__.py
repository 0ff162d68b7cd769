"""GitHub event decoding and changed-file lookup."""
from migrascope.github.api import GitHubAPIError, GitHubClient
from migrascope.github.changed_files import (
    ChangedFiles, ChangedFilesError, FileStatus, get_changed_files,
)
from migrascope.github.event import (
    EventSource, PullRequestEvent, PushEvent, UnsupportedEvent, load_event,
)

__all__ = [
    "GitHubAPIError", "GitHubClient",
    "ChangedFiles", "ChangedFilesError", "FileStatus", "get_changed_files",
    "EventSource", "PullRequestEvent", "PushEvent", "UnsupportedEvent", "load_event",
]
