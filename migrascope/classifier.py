"""Changed-file classification: which migrations did this change touch?"""
from __future__ import annotations

import logging
from typing import Iterable

from migrascope.models import GroupedChanges

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = "migrations"
MIGRATION_SUFFIX = ".py"


def migration_of(path: str) -> tuple[str, str] | None:
    """Return (app, migration) for `<app>/migrations/<name>.py`, else None.

    Only the first occurrence of the suffix is stripped, so
    "0003_py_models.py" keeps its name intact but "0004.py.bak" becomes "0004.bak".
    """
    segments = path.split("/")
    if len(segments) != 3 or segments[1] != MIGRATIONS_DIR:
        return None
    app, _, filename = segments
    return app, filename.replace(MIGRATION_SUFFIX, "", 1)


def classify(paths: Iterable[str]) -> GroupedChanges:
    """Group changed migration files by owning app.

    Paths that are not migration files are dropped. Migrations keep the order
    they appear in `paths`; the per-app lists are always flat.
    """
    grouped: GroupedChanges = {}
    for path in paths:
        found = migration_of(path)
        if found is None:
            continue
        app, migration = found
        if app in grouped:
            grouped[app].append(migration)
        else:
            grouped[app] = [migration]

    logger.debug("classify: %d app(s) with changed migrations", len(grouped))
    return grouped
