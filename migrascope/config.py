"""Action inputs and run configuration.

Inputs arrive the way GitHub Actions passes them to any step: as
`INPUT_<NAME>` environment variables. Everything else comes from the
runner's `GITHUB_*` variables and the event payload.
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from typing import Mapping

from migrascope.github.changed_files import ChangedFiles
from migrascope.github.event import (
    EventSource, PullRequestEvent, PushEvent, load_event, read_event_payload,
)

DEFAULT_SOURCE_FILE = "migration-lint-report.json"

_TRUE_VALUES = ("true", "True", "TRUE")
_FALSE_VALUES = ("false", "False", "FALSE")


class ConfigError(ValueError):
    """Raised for missing or malformed inputs."""


def _input_key(name: str) -> str:
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(name: str, required: bool = False,
              env: Mapping[str, str] | None = None) -> str:
    env = os.environ if env is None else env
    value = env.get(_input_key(name), "").strip()
    if required and not value:
        raise ConfigError(f"Input required and not supplied: {name}")
    return value


def get_boolean_input(name: str, default: bool = False,
                      env: Mapping[str, str] | None = None) -> bool:
    """Parse a YAML 1.2 core-schema boolean input."""
    value = get_input(name, env=env)
    if not value:
        return default
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(
        f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}\n"
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )


@dataclass(frozen=True)
class ActionInputs:
    token: str
    source_file: str
    report_only_changed_files: bool
    create_new_comment: bool


def load_inputs(env: Mapping[str, str] | None = None) -> ActionInputs:
    return ActionInputs(
        token=get_input("github-token", required=True, env=env),
        source_file=get_input("source-file", env=env) or DEFAULT_SOURCE_FILE,
        report_only_changed_files=get_boolean_input("report-only-changed-files", env=env),
        create_new_comment=get_boolean_input("create-new-comment", env=env),
    )


@dataclass(frozen=True)
class ActionConfig:
    """Everything one run needs, resolved up front."""
    repository: str             # owner/repo
    path_prefix: str            # <workspace>/
    create_new_comment: bool
    report_only_changed_files: bool
    event: EventSource
    changed_files: ChangedFiles | None

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        return self.repository.split("/", 1)[1]

    @property
    def commit(self) -> str | None:
        if isinstance(self.event, (PullRequestEvent, PushEvent)):
            return self.event.commit_sha
        return None

    @property
    def head(self) -> str | None:
        if isinstance(self.event, (PullRequestEvent, PushEvent)):
            return self.event.head_ref
        return None

    @property
    def base(self) -> str | None:
        if isinstance(self.event, PullRequestEvent):
            return self.event.base_ref
        return None

    def with_changed_files(self, changed_files: ChangedFiles | None) -> "ActionConfig":
        """Record the lookup result. No result means filtering is not possible."""
        if changed_files is None:
            return replace(self, changed_files=None, report_only_changed_files=False)
        return replace(self, changed_files=changed_files)


def build_config(inputs: ActionInputs, env: Mapping[str, str] | None = None) -> ActionConfig:
    env = os.environ if env is None else env

    repository = env.get("GITHUB_REPOSITORY", "")
    if "/" not in repository:
        raise ConfigError("GITHUB_REPOSITORY must be set to 'owner/repo'")

    try:
        payload = read_event_payload(env.get("GITHUB_EVENT_PATH"))
        event = load_event(env.get("GITHUB_EVENT_NAME", ""), payload, env.get("GITHUB_REF", ""))
    except (OSError, json.JSONDecodeError, KeyError, TypeError) as e:
        raise ConfigError(f"Could not read the event payload: {e}") from e

    workspace = env.get("GITHUB_WORKSPACE") or os.getcwd()
    return ActionConfig(
        repository=repository,
        path_prefix=f"{workspace.rstrip('/')}/",
        create_new_comment=inputs.create_new_comment,
        report_only_changed_files=inputs.report_only_changed_files,
        event=event,
        changed_files=None,
    )
