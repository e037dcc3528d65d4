"""Quality metrics: line counts, dependency graph and test coverage."""

from __future__ import annotations

from enum import Enum
from os import PathLike
from pathlib import Path

import structlog

from rca import command, report
from rca.command import Check, CommandOutput, ToolRunner
from rca.exceptions import ParseError
from rca.models.quality import Coverage, Quality, Sloc
from rca.parsers.coverage import TOTAL_LINES_MARKER, parse_coverage
from rca.parsers.sloc import parse_sloc
from rca.progress import CheckTracker

log = structlog.get_logger("rca.quality")


class Metric(str, Enum):
    SLOC = "sloc"
    DEPENDENCY_GRAPH = "dependency_graph"
    COVERAGE = "coverage"


METRIC_CHECKS: dict[Metric, Check] = {
    Metric.SLOC: Check("sloc", "Number of SLOC", "tokei"),
    Metric.DEPENDENCY_GRAPH: Check("dependency_graph", "Dependency graph", "cargo", ("tree",)),
    Metric.COVERAGE: Check("coverage", "Code coverage", "cargo", ("tarpaulin",)),
}

SLOC_JSON_CHECK = Check("sloc_json", "Number of SLOC (JSON)", "tokei", ("--output", "json"))


def search_metric(
    metric: Metric,
    path: str | PathLike[str],
    runner: ToolRunner = command.run,
) -> CommandOutput:
    return METRIC_CHECKS[metric].run(path, runner)


def search(
    path: str | PathLike[str],
    runner: ToolRunner = command.run,
    tracker: CheckTracker | None = None,
    fast: bool = False,
) -> dict[Metric, CommandOutput]:
    """Run every metric check; ``fast`` skips the coverage run."""
    tracker = tracker or CheckTracker()
    results: dict[Metric, CommandOutput] = {}
    for metric, check in METRIC_CHECKS.items():
        if fast and metric is Metric.COVERAGE:
            tracker.skip(check.name, "fast search")
            continue
        try:
            with tracker.track(check.name) as progress:
                output = check.run(path, runner)
                progress.detail = f"exit {output.exit_status}"
        except OSError as e:
            log.warning("quality.launch_failed", check=check.name, error=str(e))
            continue
        results[metric] = output
    return results


def fast_search(
    path: str | PathLike[str],
    runner: ToolRunner = command.run,
    tracker: CheckTracker | None = None,
) -> dict[Metric, CommandOutput]:
    return search(path, runner, tracker, fast=True)


def collect_sloc(path: str | PathLike[str], runner: ToolRunner = command.run) -> Sloc:
    output = SLOC_JSON_CHECK.run(path, runner)
    return parse_sloc(output.stdout_text)


def collect_coverage(path: str | PathLike[str], runner: ToolRunner = command.run) -> Coverage:
    output = METRIC_CHECKS[Metric.COVERAGE].run(path, runner)
    # tarpaulin's report lines go through its logger, which may target either stream
    text = output.stdout_text
    if TOTAL_LINES_MARKER not in text:
        text = output.stderr_text
    return parse_coverage(text)


def generate_quality_report(
    path: str | PathLike[str],
    name: str,
    directory: str | Path = ".",
    runner: ToolRunner = command.run,
) -> tuple[Quality, Path]:
    """Collect line counts and coverage, then persist them as one report.

    The two fragments are independent: a parse failure in one is logged,
    noted in the report, and does not prevent the other from being kept.
    Process launch failures and write failures propagate.
    """
    notes: list[str] = []

    sloc: Sloc | None = None
    try:
        sloc = collect_sloc(path, runner)
    except ParseError as e:
        log.warning("quality.sloc_unparsed", error=str(e))
        notes.append(f"sloc: {e}")

    coverage: Coverage | None = None
    try:
        coverage = collect_coverage(path, runner)
    except ParseError as e:
        log.warning("quality.coverage_unparsed", error=str(e))
        notes.append(f"coverage: {e}")

    quality = report.synthesize(sloc, coverage, notes)
    return quality, report.persist(quality, name, directory)
