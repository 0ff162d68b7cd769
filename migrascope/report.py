"""Read and decode the migration linter's JSON report."""
from __future__ import annotations

import json
import logging
import os

from migrascope.models import (
    Category, DOWNTIME_CATEGORIES, MigrationStatusReport, SqlMigration, UnsafeSql,
)

logger = logging.getLogger(__name__)


class ReportError(ValueError):
    """Raised when the report file is not a valid migration status report."""


def get_path_to_file(path: str, workspace: str | None = None) -> str | None:
    """Resolve `path` against the workspace root unless it is already absolute."""
    if not path:
        return None
    if os.path.isabs(path):
        return path
    root = workspace or os.environ.get("GITHUB_WORKSPACE") or os.getcwd()
    return os.path.join(root, path)


def get_content_file(path: str) -> str | None:
    """Return the file's text, or None when it is missing or empty."""
    if not path:
        return None

    if not os.path.exists(path):
        logger.warning('File "%s" doesn\'t exist', path)
        return None

    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    if not content:
        logger.warning('No content found in file "%s"', path)
        return None

    logger.info('File read successfully "%s"', path)
    logger.debug(content)
    return content


def get_content(path: str, workspace: str | None = None) -> str | None:
    full_path = get_path_to_file(path, workspace)
    if full_path is None:
        return None
    try:
        return get_content_file(full_path)
    except UnicodeDecodeError as e:
        raise ReportError(f"Report \"{path}\" is not valid UTF-8: {e}") from e
    except OSError as e:
        logger.error('Could not get content of "%s". %s', path, e)
        return None


def parse_report(text: str) -> MigrationStatusReport:
    """Decode report JSON. Missing sections are treated as empty."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ReportError(f"Report is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ReportError("Report must be a JSON object")

    sections = {}
    for category in Category:
        section = raw.get(category.value) or {}
        if not isinstance(section, dict):
            raise ReportError(f"'{category.value}' must map apps to migrations")
        if category in DOWNTIME_CATEGORIES:
            sections[category] = _parse_section(category, section, _parse_sql_migration)
        else:
            sections[category] = _parse_section(category, section, _parse_culprit_ids)

    return MigrationStatusReport(
        errors=sections[Category.ERRORS],
        warnings=sections[Category.WARNINGS],
        forward_downtimes=sections[Category.FORWARD_DOWNTIMES],
        backward_downtimes=sections[Category.BACKWARD_DOWNTIMES],
    )


def load_report(path: str, workspace: str | None = None) -> MigrationStatusReport | None:
    """Load the report at `path`; None when there is nothing to read."""
    content = get_content(path, workspace)
    if content is None:
        return None
    return parse_report(content)


def _parse_section(category: Category, section: dict, parse_finding) -> dict:
    parsed: dict = {}
    for app, migrations in section.items():
        if not isinstance(migrations, dict):
            raise ReportError(f"'{category.value}.{app}' must map migrations to findings")
        parsed[app] = {
            migration: parse_finding(f"{category.value}.{app}.{migration}", finding)
            for migration, finding in migrations.items()
        }
    return parsed


def _parse_culprit_ids(where: str, finding) -> list[int]:
    if not isinstance(finding, list) or not all(
        isinstance(n, int) and not isinstance(n, bool) for n in finding
    ):
        raise ReportError(f"'{where}' must be a list of integers")
    return list(finding)


def _parse_sql_migration(where: str, finding) -> SqlMigration:
    if not isinstance(finding, dict):
        raise ReportError(f"'{where}' must be an object")
    try:
        unsafe = [
            UnsafeSql(
                index=int(item["index"]),
                at=str(item.get("at", "")),
                operation=str(item.get("operation", "")),
                operation_type=str(item.get("operation_type", "")),
            )
            for item in finding.get("unsafeSqls") or []
        ]
    except (KeyError, TypeError, ValueError) as e:
        raise ReportError(f"'{where}.unsafeSqls' is malformed: {e}") from e

    is_reverse = finding.get("isReverse", False)
    if not isinstance(is_reverse, bool):
        raise ReportError(f"'{where}.isReverse' must be a boolean")

    return SqlMigration(
        unsafe_sqls=unsafe,
        sql=str(finding.get("sql", "")),
        is_reverse=is_reverse,
    )
