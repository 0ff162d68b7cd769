"""GitHub Actions workflow-command logging.

Inside a workflow run, warnings and errors are printed as `::warning::` and
`::error::` commands so they show up as annotations on the run summary.
"""
from __future__ import annotations

import contextlib
import logging
import os
import sys
import uuid
from typing import Iterator, TextIO

_COMMANDS = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class WorkflowCommandHandler(logging.Handler):
    """Write log records to stdout as workflow commands."""

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            command = _COMMANDS.get(record.levelno)
            if command is None:
                line = message
            else:
                line = f"::{command}::{escape_data(message)}"
            self.stream.write(line + "\n")
            self.stream.flush()
        except Exception:
            self.handleError(record)


@contextlib.contextmanager
def group(title: str, stream: TextIO | None = None) -> Iterator[None]:
    """Fold the enclosed output into a collapsible group in the Actions log."""
    out = stream if stream is not None else sys.stdout
    out.write(f"::group::{title}\n")
    out.flush()
    try:
        yield
    finally:
        out.write("::endgroup::\n")
        out.flush()


def configure_logging(verbose: bool = False, workflow: bool = False) -> None:
    if workflow:
        level = logging.DEBUG if verbose else logging.INFO
        root = logging.getLogger()
        for handler in list(root.handlers):
            if isinstance(handler, WorkflowCommandHandler):
                root.removeHandler(handler)
        handler = WorkflowCommandHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
        root.setLevel(level)
    else:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format="%(name)s: %(message)s",
        )


def set_output(name: str, value: str, path: str | None = None) -> bool:
    """Expose a step output through the GITHUB_OUTPUT file.

    Returns False when not running inside a workflow.
    """
    path = path or os.environ.get("GITHUB_OUTPUT")
    if not path:
        return False
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    return True
