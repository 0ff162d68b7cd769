"""Click CLI entry point for migrascope."""
from __future__ import annotations

import json
import logging
import os
import sys

import click

from migrascope import __version__
from migrascope.classifier import classify
from migrascope.config import ConfigError, build_config, load_inputs
from migrascope.github.api import GitHubAPIError, GitHubClient
from migrascope.github.changed_files import ChangedFilesError, get_changed_files
from migrascope.matcher import match, report_migrations
from migrascope.models import MatchResult
from migrascope.output.terminal import render
from migrascope.output.workflow import configure_logging, escape_data, set_output
from migrascope.report import ReportError, load_report

logger = logging.getLogger(__name__)

RUN_ERRORS = (ConfigError, ReportError, ChangedFilesError, GitHubAPIError)


@click.group()
@click.version_option(version=__version__, prog_name="migrascope")
def cli() -> None:
    """migrascope - migration linter findings scoped to a change."""
    pass


def _read_paths(paths: tuple[str, ...], from_stdin: bool) -> list[str]:
    collected = list(paths)
    if from_stdin:
        collected.extend(line.strip() for line in sys.stdin if line.strip())
    return collected


def _emit(result: MatchResult, output_format: str) -> None:
    if output_format == "terminal":
        render(result)
    else:
        click.echo(json.dumps(result.to_dict(), indent=2))


@cli.command()
@click.option("--format", "output_format", type=click.Choice(["json", "terminal"]),
              default="json", help="How to print the matched findings")
@click.option("--verbose", is_flag=True, help="Debug logging")
def run(output_format: str, verbose: bool) -> None:
    """Run as a GitHub Action step (inputs come from INPUT_* variables)."""
    configure_logging(verbose=verbose, workflow=True)

    try:
        inputs = load_inputs()
        config = build_config(inputs)

        if config.report_only_changed_files:
            client = GitHubClient(inputs.token)
            changed = get_changed_files(
                client, config.owner, config.repo, config.event, config.path_prefix,
            )
            config = config.with_changed_files(changed)
            logger.info("changedFiles: %s", ",".join(changed.all) if changed else None)

        report = load_report(inputs.source_file, workspace=config.path_prefix)
        if report is None:
            # Nothing to annotate
            return

        if config.report_only_changed_files and config.changed_files is not None:
            grouped = classify(config.changed_files.all)
        else:
            grouped = report_migrations(report)

        result = match(grouped, report)
    except RUN_ERRORS as e:
        click.echo(f"::error::{escape_data(str(e))}")
        sys.exit(1)

    payload = json.dumps(result.to_dict())
    logger.info(payload)
    set_output("result", payload)
    set_output("total", str(result.total()))
    if output_format == "terminal":
        render(result)


@cli.command("match")
@click.argument("report_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("paths", nargs=-1)
@click.option("--stdin", "from_stdin", is_flag=True,
              help="Also read changed paths from stdin, one per line")
@click.option("--all", "all_migrations", is_flag=True,
              help="Report every migration in the report, not only changed ones")
@click.option("--format", "output_format", type=click.Choice(["json", "terminal"]),
              default="terminal", help="Output format")
@click.option("--verbose", is_flag=True, help="Debug logging")
def match_cmd(report_path: str, paths: tuple[str, ...], from_stdin: bool,
              all_migrations: bool, output_format: str, verbose: bool) -> None:
    """Match changed PATHS against the findings in REPORT_PATH."""
    configure_logging(verbose=verbose)

    try:
        report = load_report(os.path.abspath(report_path))
    except ReportError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if report is None:
        click.echo("Report is empty, nothing to match.", err=True)
        return

    if all_migrations:
        grouped = report_migrations(report)
    else:
        grouped = classify(_read_paths(paths, from_stdin))

    _emit(match(grouped, report), output_format)


@cli.command("classify")
@click.argument("paths", nargs=-1)
@click.option("--stdin", "from_stdin", is_flag=True,
              help="Also read changed paths from stdin, one per line")
def classify_cmd(paths: tuple[str, ...], from_stdin: bool) -> None:
    """Print the changed migrations in PATHS, grouped by app."""
    click.echo(json.dumps(classify(_read_paths(paths, from_stdin)), indent=2))


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
