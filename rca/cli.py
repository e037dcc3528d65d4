"""CLI entry point: rca.

Subcommands:
    rca analyze <path-or-git-url>    # Interactive menu of checks
    rca report <path-or-git-url>     # Write a quality report and exit
    rca deps                         # Install/verify toolchain dependencies
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from pathlib import Path

import click

from rca import issues, quality
from rca.command import CommandOutput
from rca.core.logging import setup_logging
from rca.dependencies import DependencyFailure, DependencyInstaller
from rca.exceptions import AnalyzerError
from rca.issues import ISSUE_CHECKS, Issue
from rca.models.quality import Quality
from rca.progress import CheckTracker
from rca.quality import METRIC_CHECKS, Metric
from rca.target import materialize, resolve

# Defaults (overridable via env vars)
_DEFAULT_CLONE_DIR = os.environ.get("RCA_CLONE_DIR", ".")
_DEFAULT_REPORT_NAME = os.environ.get("RCA_REPORT_NAME", "quality_report")
_DEFAULT_REPORT_DIR = os.environ.get("RCA_REPORT_DIR", ".")

_STATUS_ICONS = {
    "completed": "+",
    "failed": "!",
    "skipped": "-",
    "running": "~",
}


def _prepare_target(raw: str, clone_dir: str) -> Path:
    """Resolve and materialize the target, exiting 1 on failure."""
    try:
        target = resolve(raw)
        if target.is_remote:
            click.echo(f"Cloning {target.value} ...")
        path = materialize(target, clone_dir)
    except AnalyzerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Analyzing: {path}")
    return path


def _print_failures(failures: list[DependencyFailure]) -> None:
    click.secho("Dependency installation reported failures:", fg="red", bold=True, err=True)
    for failure in failures:
        click.echo(f"  [!] {failure}", err=True)


def _install_dependencies(strict: bool) -> None:
    click.secho("Installing Dependencies...", fg="green", bold=True)
    failures = DependencyInstaller().ensure()
    if not failures:
        click.echo("All dependencies are installed.")
        return
    _print_failures(failures)
    if strict:
        sys.exit(1)


def _echo_output(title: str, output: CommandOutput) -> None:
    click.secho(f"# {title}:", fg="green", bold=True)
    click.echo(f"Status: {output.exit_status}")
    if output.stdout:
        click.echo(output.stdout_text.rstrip("\n"))
    if output.stderr:
        click.echo(output.stderr_text.rstrip("\n"), err=True)
    click.echo()


def _echo_summary(tracker: CheckTracker) -> None:
    summary = tracker.get_summary()
    click.echo(f"Checks summary (total: {summary['total_duration']}s):")
    for c in summary["checks"]:
        status_icon = _STATUS_ICONS.get(c["status"], "?")
        duration = f" ({c['duration']}s)" if c["duration"] else ""
        detail = f" - {c['detail']}" if c["detail"] else ""
        error = f" - {c['error']}" if c["error"] else ""
        click.echo(f"  [{status_icon}] {c['check']}{duration}{detail}{error}")


def _run_single(title: str, action: Callable[[], CommandOutput]) -> None:
    try:
        output = action()
    except OSError as e:
        click.echo(f"Error: could not run check '{title}': {e}", err=True)
        return
    _echo_output(title, output)


def _run_all_issues(path: Path) -> None:
    tracker = CheckTracker()
    results = issues.search(path, tracker=tracker)
    for issue, output in results.items():
        _echo_output(ISSUE_CHECKS[issue].title, output)
    _echo_summary(tracker)


def _run_all_metrics(path: Path) -> None:
    tracker = CheckTracker()
    results = quality.search(path, tracker=tracker)
    for metric, output in results.items():
        _echo_output(METRIC_CHECKS[metric].title, output)
    _echo_summary(tracker)


def _echo_report(report: Quality, report_file: Path) -> None:
    if report.sloc is not None:
        click.echo(f"SLOC: {report.sloc.code} code, {report.sloc.comments} comments")
    if report.coverage is not None:
        click.echo(
            f"Coverage: {report.coverage.percentage}% "
            f"({report.coverage.covered}/{report.coverage.total} lines)"
        )
    for note in report.notes:
        click.secho(f"Partial report: {note}", fg="yellow", err=True)
    click.echo(f"Quality report written to {report_file}")


def _generate_report(path: Path, name: str, directory: str) -> None:
    try:
        report, report_file = quality.generate_quality_report(path, name, directory)
    except OSError as e:
        click.echo(f"Error: could not generate quality report: {e}", err=True)
        return
    _echo_report(report, report_file)


def _build_menu(path: Path, report_name: str, report_dir: str) -> list[tuple[str, Callable[[], None]]]:
    entries: list[tuple[str, Callable[[], None]]] = []
    for issue in Issue:
        check = ISSUE_CHECKS[issue]
        entries.append(
            (
                f"Find {check.title[0].lower()}{check.title[1:]}",
                lambda issue=issue, title=check.title: _run_single(
                    title, lambda: issues.find_issue(issue, path)
                ),
            )
        )
    for metric in Metric:
        check = METRIC_CHECKS[metric]
        entries.append(
            (
                f"Find {check.title[0].lower()}{check.title[1:]}",
                lambda metric=metric, title=check.title: _run_single(
                    title, lambda: quality.search_metric(metric, path)
                ),
            )
        )
    entries.append(("Find all issues", lambda: _run_all_issues(path)))
    entries.append(("Find all quality metrics", lambda: _run_all_metrics(path)))
    entries.append(
        ("Generate Quality Report", lambda: _generate_report(path, report_name, report_dir))
    )
    return entries


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """Rust Code Analyzer: run toolchain checks against a repository."""
    setup_logging(verbose)


@main.command("analyze")
@click.argument("target")
@click.option("--clone-dir", default=_DEFAULT_CLONE_DIR, help="Where remote targets are cloned")
@click.option(
    "--install-deps/--skip-deps",
    default=None,
    help="Install dependencies without asking (default: ask)",
)
@click.option("--strict", is_flag=True, help="Exit 1 if any dependency fails to install")
@click.option("--report-name", default=_DEFAULT_REPORT_NAME, help="Quality report name")
@click.option("--report-dir", default=_DEFAULT_REPORT_DIR, help="Quality report directory")
def analyze(
    target: str,
    clone_dir: str,
    install_deps: bool | None,
    strict: bool,
    report_name: str,
    report_dir: str,
) -> None:
    """Interactive analysis of a local path or git repository."""
    click.secho("Welcome to Rust Code Analyzer!\n", fg="green", bold=True)
    path = _prepare_target(target, clone_dir)

    if install_deps is None:
        install_deps = click.confirm("\nDo you want to install dependencies?", default=False)
    if install_deps:
        _install_dependencies(strict)

    menu = _build_menu(path, report_name, report_dir)
    exit_option = str(len(menu) + 1)
    while True:
        click.secho("\nMenu:", fg="yellow", bold=True)
        for i, (label, _) in enumerate(menu, start=1):
            click.echo(f"\t{i}. {label}")
        click.echo(f"\t{exit_option}. Exit")

        option = click.prompt("\nChoose an option", default="", show_default=False).strip()
        if option == exit_option:
            break
        if option.isdigit() and 1 <= int(option) <= len(menu):
            menu[int(option) - 1][1]()
        else:
            click.echo("Invalid option.")


@main.command("report")
@click.argument("target")
@click.option("--clone-dir", default=_DEFAULT_CLONE_DIR, help="Where remote targets are cloned")
@click.option("-n", "--name", default=_DEFAULT_REPORT_NAME, help="Report name (without extension)")
@click.option("-o", "--output-dir", default=_DEFAULT_REPORT_DIR, help="Report directory")
def report_cmd(target: str, clone_dir: str, name: str, output_dir: str) -> None:
    """Collect line counts and coverage into a JSON quality report."""
    path = _prepare_target(target, clone_dir)
    try:
        report, report_file = quality.generate_quality_report(path, name, output_dir)
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    _echo_report(report, report_file)


@main.command("deps")
def deps() -> None:
    """Install missing toolchain components, subcommands and binaries."""
    failures = DependencyInstaller().ensure()
    if failures:
        _print_failures(failures)
        sys.exit(1)
    click.echo("All dependencies are installed.")


if __name__ == "__main__":
    main()
