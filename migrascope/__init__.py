"""migrascope - migration linter findings scoped to the migrations a change touches."""

__version__ = "0.1.0"
