"""Compose parsed fragments into a :class:`Quality` report and persist it."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from rca.exceptions import ReportError
from rca.models.quality import Coverage, Quality, Sloc

log = structlog.get_logger("rca.report")

REPORT_EXTENSION = ".json"


def synthesize(
    sloc: Sloc | None,
    coverage: Coverage | None,
    notes: list[str] | None = None,
) -> Quality:
    return Quality(sloc=sloc, coverage=coverage, notes=list(notes or []))


def report_path(name: str, directory: str | Path = ".") -> Path:
    return Path(directory) / f"{name}{REPORT_EXTENSION}"


def persist(quality: Quality, name: str, directory: str | Path = ".") -> Path:
    """Write ``quality`` to ``<directory>/<name>.json``, replacing any old file.

    ``OSError`` from creating or writing the file propagates.
    """
    path = report_path(name, directory)
    path.write_text(json.dumps(quality.to_dict(), indent=2) + "\n")
    log.info("report.persisted", path=str(path), partial=quality.is_partial)
    return path


def load(path: str | Path) -> Quality:
    """Read a persisted report back into a :class:`Quality`."""
    try:
        data = json.loads(Path(path).read_text())
        if not isinstance(data, dict):
            raise ReportError(f"Malformed quality report {path}: expected a JSON object")
        return Quality.from_dict(data)
    except json.JSONDecodeError as e:
        raise ReportError(f"Invalid JSON in {path}: {e}") from e
    except (KeyError, TypeError, ValueError) as e:
        raise ReportError(f"Malformed quality report {path}: {e}") from e
