"""Git clone helper for remote targets."""

from __future__ import annotations

import re
from pathlib import Path

import structlog

from rca import command
from rca.exceptions import CloneError

log = structlog.get_logger("rca.download")

_VCS_SUFFIX_RE = re.compile(r"\.git\Z")


def repository_dir_name(reference: str) -> str:
    """Derive the local directory name git would use for ``reference``.

    ``https://github.com/hknio/rca.git/`` and ``git@github.com:hknio/rca.git``
    both give ``rca``.
    """
    last = re.split(r"[/:]", reference.rstrip("/"))[-1]
    name = _VCS_SUFFIX_RE.sub("", last)
    if not name:
        raise CloneError(f"Cannot derive a directory name from {reference!r}")
    return name


def git_clone(reference: str, destination: Path) -> Path:
    """Clone ``reference`` into ``destination`` and return it.

    Raises ``CloneError`` when git cannot be launched or exits non-zero.
    """
    log.info("download.clone", reference=reference, destination=str(destination))
    try:
        output = command.run("git", None, ["clone", "--", reference, str(destination)])
    except OSError as e:
        raise CloneError(f"git could not be launched: {e}") from e
    if not output.ok:
        raise CloneError(
            f"git clone failed (exit {output.exit_status}): {output.stderr_text.strip()}"
        )
    return destination
