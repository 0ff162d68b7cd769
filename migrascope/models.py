from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class Category(str, Enum):
    """Report sections, in the order results are produced."""
    ERRORS = "errors"
    WARNINGS = "warnings"
    FORWARD_DOWNTIMES = "forwardDowntimes"
    BACKWARD_DOWNTIMES = "backwardDowntimes"


# Sections holding SqlMigration records rather than culprit line numbers
DOWNTIME_CATEGORIES = (Category.FORWARD_DOWNTIMES, Category.BACKWARD_DOWNTIMES)


# app -> migrations changed in that app (flat, discovery order)
GroupedChanges = dict[str, list[str]]


@dataclass(frozen=True)
class UnsafeSql:
    """A single statement the linter flagged inside a migration's SQL."""
    index: int
    at: str               # excerpt of the statement
    operation: str        # e.g. "ADD COLUMN"
    operation_type: str   # e.g. "ALTER TABLE"

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "at": self.at,
            "operation": self.operation,
            "operation_type": self.operation_type,
        }


@dataclass(frozen=True)
class SqlMigration:
    """Downtime finding for one migration."""
    unsafe_sqls: list[UnsafeSql] = field(default_factory=list)
    sql: str = ""
    is_reverse: bool = False

    def to_dict(self) -> dict:
        return {
            "unsafeSqls": [u.to_dict() for u in self.unsafe_sqls],
            "sql": self.sql,
            "isReverse": self.is_reverse,
        }


Finding = Union[list[int], SqlMigration]


@dataclass(frozen=True)
class MigrationStatusReport:
    """Precomputed linter report. Each section is app -> migration -> finding."""
    errors: dict[str, dict[str, list[int]]] = field(default_factory=dict)
    warnings: dict[str, dict[str, list[int]]] = field(default_factory=dict)
    forward_downtimes: dict[str, dict[str, SqlMigration]] = field(default_factory=dict)
    backward_downtimes: dict[str, dict[str, SqlMigration]] = field(default_factory=dict)

    def section(self, category: Category) -> dict[str, dict[str, Finding]]:
        if category is Category.ERRORS:
            return self.errors
        if category is Category.WARNINGS:
            return self.warnings
        if category is Category.FORWARD_DOWNTIMES:
            return self.forward_downtimes
        return self.backward_downtimes


@dataclass(frozen=True)
class Culprit:
    application: str
    migration: str
    culprits: Finding

    def to_dict(self) -> dict:
        if isinstance(self.culprits, SqlMigration):
            payload = self.culprits.to_dict()
        else:
            payload = list(self.culprits)
        return {
            "app": self.application,
            "migration": self.migration,
            "culprits": payload,
        }


@dataclass
class MatchResult:
    """Culprits for changed migrations, one list per report section."""
    errors: list[Culprit] = field(default_factory=list)
    warnings: list[Culprit] = field(default_factory=list)
    forward_downtimes: list[Culprit] = field(default_factory=list)
    backward_downtimes: list[Culprit] = field(default_factory=list)

    def for_category(self, category: Category) -> list[Culprit]:
        if category is Category.ERRORS:
            return self.errors
        if category is Category.WARNINGS:
            return self.warnings
        if category is Category.FORWARD_DOWNTIMES:
            return self.forward_downtimes
        return self.backward_downtimes

    def total(self) -> int:
        return sum(len(self.for_category(c)) for c in Category)

    def is_empty(self) -> bool:
        return self.total() == 0

    def to_dict(self) -> dict:
        return {
            c.value: [culprit.to_dict() for culprit in self.for_category(c)]
            for c in Category
        }
