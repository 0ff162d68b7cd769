"""Triggering event, decoded from the Actions event payload."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PullRequestEvent:
    commit_sha: str     # head commit of the PR
    head_ref: str
    base_ref: str
    base_sha: str
    head_sha: str


@dataclass(frozen=True)
class PushEvent:
    commit_sha: str     # same as `after`
    head_ref: str       # refs/heads/<branch>
    before: str
    after: str


@dataclass(frozen=True)
class UnsupportedEvent:
    event_name: str


EventSource = Union[PullRequestEvent, PushEvent, UnsupportedEvent]


def read_event_payload(path: str | None) -> dict:
    """Read the webhook payload GitHub writes to GITHUB_EVENT_PATH."""
    if not path or not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_event(event_name: str, payload: dict, ref: str = "") -> EventSource:
    if event_name == "pull_request" and payload.get("pull_request"):
        pr = payload["pull_request"]
        return PullRequestEvent(
            commit_sha=pr["head"]["sha"],
            head_ref=pr["head"]["ref"],
            base_ref=pr["base"]["ref"],
            base_sha=pr["base"]["sha"],
            head_sha=pr["head"]["sha"],
        )
    if event_name == "push":
        return PushEvent(
            commit_sha=payload.get("after", ""),
            head_ref=ref or payload.get("ref", ""),
            before=payload.get("before", ""),
            after=payload.get("after", ""),
        )
    logger.debug("Event %r carries no diff information", event_name)
    return UnsupportedEvent(event_name=event_name)
