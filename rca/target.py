"""Analysis target: a local path or a remote repository reference."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import structlog

from rca.download import git_clone, repository_dir_name
from rca.exceptions import LocalPathNotFoundError

log = structlog.get_logger("rca.target")

# scheme or user@host, colon, path body, mandatory .git, optional trailing slash
_REMOTE_REPOSITORY_RE = re.compile(
    r"^((git|ssh|https?)|([\w.\-]+@[\w.\-]+))(:(//)?)([\w.@:/\-~]+)(\.git)(/)?\Z"
)


class TargetKind(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class Target:
    """Tagged value: ``path`` for local targets, ``reference`` for remote ones."""

    kind: TargetKind
    value: str

    @classmethod
    def local(cls, path: str | Path) -> Target:
        return cls(TargetKind.LOCAL, str(path))

    @classmethod
    def remote(cls, reference: str) -> Target:
        return cls(TargetKind.REMOTE, reference)

    @property
    def is_local(self) -> bool:
        return self.kind is TargetKind.LOCAL

    @property
    def is_remote(self) -> bool:
        return self.kind is TargetKind.REMOTE

    @property
    def path(self) -> Path:
        if not self.is_local:
            raise ValueError(f"Remote target {self.value!r} has no local path")
        return Path(self.value)


def is_remote_repository(raw: str) -> bool:
    """Purely syntactic check; reachability is never tested."""
    return _REMOTE_REPOSITORY_RE.match(raw) is not None


def resolve(raw: str) -> Target:
    """Classify ``raw`` as a remote repository or an existing local path.

    Raises:
        LocalPathNotFoundError: ``raw`` is not a remote reference and no
            filesystem entry exists at that path.
    """
    if is_remote_repository(raw):
        return Target.remote(raw)
    if Path(raw).exists():
        return Target.local(raw)
    raise LocalPathNotFoundError(raw)


def materialize(
    target: Target,
    workdir: str | Path | None = None,
    clone: Callable[[str, Path], Path] = git_clone,
) -> Path:
    """Return a local directory holding ``target``.

    Local targets are returned as-is. Remote targets are cloned into
    ``workdir`` (cwd by default) under a name derived from the reference,
    unless that directory already exists, in which case it is reused.
    """
    if target.is_local:
        return target.path

    base = Path(workdir) if workdir is not None else Path.cwd()
    destination = base / repository_dir_name(target.value)
    if destination.exists():
        log.info("target.clone_skipped", reference=target.value, path=str(destination))
        return destination

    return clone(target.value, destination)
