"""Cross-reference changed migrations against the linter report."""
from __future__ import annotations

import logging

from migrascope.models import (
    Category, Culprit, GroupedChanges, MatchResult, MigrationStatusReport,
)

logger = logging.getLogger(__name__)


def match(grouped: GroupedChanges, report: MigrationStatusReport) -> MatchResult:
    """Collect the report's findings for every changed migration.

    Output order: category, then app order in `grouped`, then migration order
    within the app. Apps that only appear in the report are never reported.
    """
    result = MatchResult()

    for category in Category:
        section = report.section(category)
        culprits = result.for_category(category)
        for app, migrations in grouped.items():
            findings = section.get(app)
            if findings is None:
                continue
            for migration in migrations:
                finding = findings.get(migration)
                if finding is None:
                    continue
                culprits.append(Culprit(
                    application=app,
                    migration=migration,
                    culprits=finding,
                ))

    logger.debug(
        "match: errors=%d warnings=%d forward=%d backward=%d",
        len(result.errors), len(result.warnings),
        len(result.forward_downtimes), len(result.backward_downtimes),
    )
    return result


def report_migrations(report: MigrationStatusReport) -> GroupedChanges:
    """Every app/migration named anywhere in the report.

    Used in place of the changed-file grouping when filtering is off, so that
    match(report_migrations(r), r) returns the whole report.
    """
    grouped: GroupedChanges = {}
    for category in Category:
        for app, findings in report.section(category).items():
            known = grouped.setdefault(app, [])
            for migration in findings:
                if migration not in known:
                    known.append(migration)
    return grouped
