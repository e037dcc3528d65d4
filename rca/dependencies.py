"""Toolchain dependency installer.

Four independent phases run in a fixed order: toolchain self-update,
rustup components, cargo subcommands and system binaries. Every phase
runs regardless of earlier failures; each contributes at most one
:class:`DependencyFailure` to the result.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

import structlog

from rca import command
from rca.command import ToolRunner

log = structlog.get_logger("rca.deps")

RUSTUP_COMPONENT_LIST: tuple[str, ...] = ("clippy", "rustfmt")
CARGO_SUBCOMMAND_LIST: tuple[str, ...] = ("fmt", "outdated", "audit", "tarpaulin")
SYSTEM_BINARY_LIST: tuple[str, ...] = ("git", "tokei")

# Binary each rustup component puts on PATH
COMPONENT_BINARIES: dict[str, str] = {
    "clippy": "cargo-clippy",
    "rustfmt": "rustfmt",
}

# Per-item install commands: name -> (program, args). Unlisted items use the default.
COMPONENT_INSTALL_ARGS: dict[str, tuple[str, list[str]]] = {}
SUBCOMMAND_INSTALL_ARGS: dict[str, tuple[str, list[str]]] = {
    "fmt": ("rustup", ["component", "add", "rustfmt"]),
    "audit": ("cargo", ["install", "cargo-audit", "--locked"]),
    "tarpaulin": ("cargo", ["install", "cargo-tarpaulin", "--locked"]),
}

UPDATE_COMMAND: tuple[str, list[str]] = ("rustup", ["update"])


class FailureKind(str, Enum):
    UPDATE_FAILED = "update_failed"
    COMPONENTS_FAILED = "components_failed"
    SUBCOMMANDS_FAILED = "subcommands_failed"
    BINARIES_MISSING = "binaries_missing"


@dataclass(frozen=True)
class DependencyFailure:
    """One non-empty failure bucket."""

    kind: FailureKind
    items: tuple[str, ...] = ()

    def __str__(self) -> str:
        if self.kind is FailureKind.UPDATE_FAILED:
            return "toolchain update failed"
        label = self.kind.value.replace("_", " ")
        return f"{label}: {', '.join(self.items)}"


def component_install_command(name: str) -> tuple[str, list[str]]:
    return COMPONENT_INSTALL_ARGS.get(name, ("rustup", ["component", "add", name]))


def subcommand_install_command(name: str) -> tuple[str, list[str]]:
    return SUBCOMMAND_INSTALL_ARGS.get(name, ("cargo", ["install", f"cargo-{name}"]))


class DependencyInstaller:
    """Verify and install toolchain dependencies, collecting every failure.

    ``runner`` and ``probe`` default to real process execution and a PATH
    lookup; both are injectable so the phases can be exercised without a
    toolchain.
    """

    def __init__(
        self,
        runner: ToolRunner | None = None,
        probe: Callable[[str], bool] | None = None,
    ) -> None:
        self._run = runner or command.run
        self._probe = probe or command.is_on_path

    def ensure(
        self,
        components: Sequence[str] = RUSTUP_COMPONENT_LIST,
        subcommands: Sequence[str] = CARGO_SUBCOMMAND_LIST,
        binaries: Sequence[str] = SYSTEM_BINARY_LIST,
    ) -> list[DependencyFailure]:
        """Run all four phases; an empty list means full success."""
        outcomes = [
            self.update(),
            self.install_components(components),
            self.install_subcommands(subcommands),
            self.check_binaries(binaries),
        ]
        failures = [o for o in outcomes if o is not None]
        if failures:
            log.warning("deps.failed", failures=[str(f) for f in failures])
        else:
            log.info("deps.ok")
        return failures

    # ── phases ──────────────────────────────────────────────────────────

    def update(self) -> DependencyFailure | None:
        program, args = UPDATE_COMMAND
        if not self._attempt(program, args):
            return DependencyFailure(FailureKind.UPDATE_FAILED)
        return None

    def install_components(self, components: Sequence[str]) -> DependencyFailure | None:
        failed = self._install_missing(
            components,
            binary_for=lambda name: COMPONENT_BINARIES.get(name, name),
            install_command=component_install_command,
        )
        if failed:
            return DependencyFailure(FailureKind.COMPONENTS_FAILED, tuple(failed))
        return None

    def install_subcommands(self, subcommands: Sequence[str]) -> DependencyFailure | None:
        failed = self._install_missing(
            subcommands,
            binary_for=lambda name: f"cargo-{name}",
            install_command=subcommand_install_command,
        )
        if failed:
            return DependencyFailure(FailureKind.SUBCOMMANDS_FAILED, tuple(failed))
        return None

    def check_binaries(self, binaries: Sequence[str]) -> DependencyFailure | None:
        missing = [name for name in binaries if not self._probe(name)]
        if missing:
            log.warning("deps.binaries_missing", binaries=missing)
            return DependencyFailure(FailureKind.BINARIES_MISSING, tuple(missing))
        return None

    # ── helpers ─────────────────────────────────────────────────────────

    def _install_missing(
        self,
        items: Sequence[str],
        binary_for: Callable[[str], str],
        install_command: Callable[[str], tuple[str, list[str]]],
    ) -> list[str]:
        """Install every item whose binary is absent; return those still absent."""
        failed: list[str] = []
        for name in items:
            binary = binary_for(name)
            if self._probe(binary):
                log.debug("deps.present", item=name)
                continue
            program, args = install_command(name)
            self._attempt(program, args)
            if not self._probe(binary):
                log.warning("deps.install_failed", item=name)
                failed.append(name)
        return failed

    def _attempt(self, program: str, args: list[str]) -> bool:
        log.info("deps.run", cmd=[program, *args])
        try:
            output = self._run(program, None, args)
        except OSError as e:
            log.warning("deps.launch_failed", cmd=[program, *args], error=str(e))
            return False
        if not output.ok:
            log.warning(
                "deps.command_failed",
                cmd=[program, *args],
                exit_status=output.exit_status,
                stderr=output.stderr_text.strip(),
            )
        return output.ok


def ensure(
    components: Sequence[str] = RUSTUP_COMPONENT_LIST,
    subcommands: Sequence[str] = CARGO_SUBCOMMAND_LIST,
    binaries: Sequence[str] = SYSTEM_BINARY_LIST,
) -> list[DependencyFailure]:
    """Module-level shortcut using the real process runner."""
    return DependencyInstaller().ensure(components, subcommands, binaries)
