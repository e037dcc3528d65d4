"""Shared pytest fixtures for Rust Code Analyzer tests."""

from __future__ import annotations

import json

import pytest

from rca.command import CommandOutput

TOKEI_JSON = json.dumps(
    {
        "Rust": {
            "blanks": 5,
            "children": {},
            "code": 100,
            "comments": 10,
            "inaccurate": False,
            "reports": [
                {"name": "src/lib.rs", "stats": {"blanks": 5, "code": 100, "comments": 10}}
            ],
        },
        "TOML": {"blanks": 1, "children": {}, "code": 12, "comments": 0, "reports": []},
        "Total": {
            "blanks": 6,
            "children": {"Rust": []},
            "code": 112,
            "comments": 10,
            "inaccurate": False,
            "reports": [],
        },
    }
)

TARPAULIN_REPORT = """\
Nov 10 12:00:00.000  INFO cargo_tarpaulin::config: Creating config
Nov 10 12:00:01.000  INFO cargo_tarpaulin: Running Tarpaulin
running 3 tests
test tests::it_works ... ok
|| Uncovered Lines:
|| src/lib.rs: 12-15, 20
|| src/main.rs: 3
|| Tested/Total Lines:
|| src/lib.rs: 10/15 +0.00%
|| src/main.rs: 4/5 +0.00%
||
85.50% coverage, 171/200 lines covered
"""


class FakeRunner:
    """Stand-in for :func:`rca.command.run` that records every call.

    ``responses`` maps a command string such as ``"cargo tree"`` (or just
    the program name) to a :class:`CommandOutput` or an exception to raise.
    Unknown commands succeed with empty output.
    """

    def __init__(self, responses: dict | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[tuple[str, str | None, list[str]]] = []

    def __call__(self, name, path, args):
        self.calls.append((name, str(path) if path is not None else None, list(args)))
        key = " ".join([name, *args])
        response = self.responses.get(key, self.responses.get(name, CommandOutput(0)))
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def commands(self) -> list[str]:
        return [" ".join([name, *args]) for name, _, args in self.calls]


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def tokei_json():
    return TOKEI_JSON


@pytest.fixture
def tarpaulin_report():
    return TARPAULIN_REPORT
