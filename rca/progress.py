"""Progress tracking for batches of analysis checks."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

log = structlog.get_logger("rca.progress")


class CheckStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class CheckProgress:
    check: str
    status: CheckStatus = CheckStatus.RUNNING
    start_time: float | None = None
    end_time: float | None = None
    detail: str = ""
    error: str | None = None

    @property
    def duration(self) -> float | None:
        if self.start_time is not None and self.end_time is not None:
            return round(self.end_time - self.start_time, 2)
        return None


class CheckTracker:
    """Record the outcome and duration of each check in a run."""

    def __init__(self) -> None:
        self.checks: list[CheckProgress] = []
        self.callbacks: list[Callable[[CheckProgress], None]] = []

    @contextmanager
    def track(self, check: str) -> Iterator[CheckProgress]:
        """Time the enclosed block; an exception marks the check failed and re-raises."""
        p = CheckProgress(check=check, start_time=time.monotonic())
        self.checks.append(p)
        self._notify(p)
        try:
            yield p
        except Exception as e:
            p.status = CheckStatus.FAILED
            p.error = str(e)
            raise
        else:
            p.status = CheckStatus.COMPLETED
        finally:
            p.end_time = time.monotonic()
            self._notify(p)

    def skip(self, check: str, reason: str) -> None:
        p = CheckProgress(check=check, status=CheckStatus.SKIPPED, detail=reason)
        self.checks.append(p)
        self._notify(p)

    @property
    def failed(self) -> list[CheckProgress]:
        return [p for p in self.checks if p.status is CheckStatus.FAILED]

    def get_summary(self) -> dict[str, Any]:
        total_duration = sum(p.duration or 0 for p in self.checks)
        return {
            "checks": [
                {
                    "check": p.check,
                    "status": p.status.value,
                    "duration": p.duration,
                    "detail": p.detail,
                    "error": p.error,
                }
                for p in self.checks
            ],
            "total_duration": round(total_duration, 2),
        }

    def _notify(self, p: CheckProgress) -> None:
        for cb in self.callbacks:
            try:
                cb(p)
            except Exception:
                log.debug("progress.callback_error", check=p.check, exc_info=True)
