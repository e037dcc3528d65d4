"""Run external tools and probe the executable search path."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from os import PathLike
from typing import Protocol

import structlog

log = structlog.get_logger("rca.command")


@dataclass
class CommandOutput:
    """Exit status and captured streams of one finished process."""

    exit_status: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def ok(self) -> bool:
        return self.exit_status == 0

    @property
    def stdout_text(self) -> str:
        return self.stdout.decode(errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode(errors="replace")


class ToolRunner(Protocol):
    """Callable that runs ``name`` with ``args`` inside ``path``."""

    def __call__(
        self,
        name: str,
        path: str | PathLike[str] | None,
        args: Sequence[str],
    ) -> CommandOutput: ...


def run(
    name: str,
    path: str | PathLike[str] | None,
    args: Sequence[str],
) -> CommandOutput:
    """Run ``name args...`` in ``path`` (cwd when None) and wait for it.

    A non-zero exit is returned, not raised. Failing to launch the process
    raises ``OSError`` unchanged.
    """
    cmd = [name, *args]
    log.debug("command.run", cmd=cmd, cwd=str(path) if path is not None else None)
    result = subprocess.run(
        cmd,
        cwd=path,
        capture_output=True,
        check=False,
    )
    log.debug("command.finished", cmd=cmd, exit_status=result.returncode)
    return CommandOutput(
        exit_status=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
    )


def is_on_path(name: str) -> bool:
    """Return True if an executable called ``name`` is on PATH."""
    return shutil.which(name) is not None


@dataclass(frozen=True)
class Check:
    """A named external tool invocation run inside the target directory."""

    name: str
    title: str
    program: str
    args: tuple[str, ...] = ()

    def run(
        self,
        path: str | PathLike[str],
        runner: ToolRunner | None = None,
    ) -> CommandOutput:
        runner = runner or run
        output = runner(self.program, path, list(self.args))
        if not output.ok:
            # non-zero usually just means the tool found something
            log.info("check.nonzero_exit", check=self.name, exit_status=output.exit_status)
        return output
