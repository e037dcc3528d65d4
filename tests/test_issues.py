"""Tests for issue checks — cargo is faked."""

from __future__ import annotations

from pathlib import Path

from rca.command import CommandOutput
from rca.issues import ISSUE_CHECKS, Issue, find_issue, search
from rca.progress import CheckStatus, CheckTracker
from tests.conftest import FakeRunner


class TestFindIssue:
    def test_compilation(self, tmp_path: Path, fake_runner: FakeRunner):
        find_issue(Issue.COMPILATION, tmp_path, fake_runner)
        assert fake_runner.calls == [("cargo", str(tmp_path), ["check", "--all-targets"])]

    def test_unwrap_lints(self, tmp_path: Path, fake_runner: FakeRunner):
        find_issue(Issue.UNWRAP_EXPECT, tmp_path, fake_runner)
        assert fake_runner.commands == [
            "cargo clippy -- -W clippy::unwrap_used -W clippy::expect_used"
        ]

    def test_nonzero_exit_is_not_an_error(self, tmp_path: Path):
        runner = FakeRunner({"cargo audit": CommandOutput(1, stdout=b"RUSTSEC-2023-0001")})
        output = find_issue(Issue.VULNERABLE_DEPENDENCY, tmp_path, runner)
        assert output.exit_status == 1
        assert "RUSTSEC" in output.stdout_text


class TestSearch:
    def test_runs_every_check(self, tmp_path: Path, fake_runner: FakeRunner):
        results = search(tmp_path, fake_runner)
        assert list(results) == list(Issue)
        assert len(fake_runner.calls) == len(ISSUE_CHECKS)

    def test_launch_failure_does_not_stop_other_checks(self, tmp_path: Path):
        runner = FakeRunner({"cargo outdated": FileNotFoundError("cargo-outdated")})
        tracker = CheckTracker()
        results = search(tmp_path, runner, tracker)
        assert Issue.OUTDATED_DEPENDENCY not in results
        assert Issue.VULNERABLE_DEPENDENCY in results
        assert [p.check for p in tracker.failed] == ["outdated_dependency"]
        statuses = {p.check: p.status for p in tracker.checks}
        assert statuses["compilation"] is CheckStatus.COMPLETED
