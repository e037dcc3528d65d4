"""Issue checks: compiler diagnostics, formatting, dependencies and lints."""

from __future__ import annotations

from enum import Enum
from os import PathLike

import structlog

from rca import command
from rca.command import Check, CommandOutput, ToolRunner
from rca.progress import CheckTracker

log = structlog.get_logger("rca.issues")


class Issue(str, Enum):
    COMPILATION = "compilation"
    FORMATTING = "formatting"
    OUTDATED_DEPENDENCY = "outdated_dependency"
    VULNERABLE_DEPENDENCY = "vulnerable_dependency"
    INTEGER_ARITHMETIC = "integer_arithmetic"
    UNWRAP_EXPECT = "unwrap_expect"


ISSUE_CHECKS: dict[Issue, Check] = {
    Issue.COMPILATION: Check(
        "compilation", "Compilation errors and warnings", "cargo", ("check", "--all-targets")
    ),
    Issue.FORMATTING: Check("formatting", "Formatting issues", "cargo", ("fmt", "--check")),
    Issue.OUTDATED_DEPENDENCY: Check(
        "outdated_dependency", "Outdated dependencies", "cargo", ("outdated",)
    ),
    Issue.VULNERABLE_DEPENDENCY: Check(
        "vulnerable_dependency", "Vulnerable dependencies", "cargo", ("audit",)
    ),
    Issue.INTEGER_ARITHMETIC: Check(
        "integer_arithmetic",
        "Integer arithmetic",
        "cargo",
        ("clippy", "--", "-W", "clippy::arithmetic_side_effects"),
    ),
    Issue.UNWRAP_EXPECT: Check(
        "unwrap_expect",
        "Error handling and unwrapping",
        "cargo",
        ("clippy", "--", "-W", "clippy::unwrap_used", "-W", "clippy::expect_used"),
    ),
}


def find_issue(
    issue: Issue,
    path: str | PathLike[str],
    runner: ToolRunner = command.run,
) -> CommandOutput:
    return ISSUE_CHECKS[issue].run(path, runner)


def search(
    path: str | PathLike[str],
    runner: ToolRunner = command.run,
    tracker: CheckTracker | None = None,
) -> dict[Issue, CommandOutput]:
    """Run every issue check; a check whose tool cannot be launched is
    recorded as failed and the remaining checks still run."""
    tracker = tracker or CheckTracker()
    results: dict[Issue, CommandOutput] = {}
    for issue, check in ISSUE_CHECKS.items():
        try:
            with tracker.track(check.name) as progress:
                output = check.run(path, runner)
                progress.detail = f"exit {output.exit_status}"
        except OSError as e:
            log.warning("issues.launch_failed", check=check.name, error=str(e))
            continue
        results[issue] = output
    return results
