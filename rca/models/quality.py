"""Data models for the quality report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class LanguageInfo:
    """Line counts for one language in a scanned tree."""

    language: str
    blanks: int
    code: int
    comments: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LanguageInfo:
        return cls(
            language=data["language"],
            blanks=data["blanks"],
            code=data["code"],
            comments=data["comments"],
        )


@dataclass
class Sloc:
    """Per-language breakdown plus the totals reported by the counter."""

    languages: list[LanguageInfo] = field(default_factory=list)
    code: int = 0
    comments: int = 0
    blanks: int = 0
    inaccurate: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "languages": [
                {
                    "language": lang.language,
                    "blanks": lang.blanks,
                    "code": lang.code,
                    "comments": lang.comments,
                }
                for lang in self.languages
            ],
            "code": self.code,
            "comments": self.comments,
            "blanks": self.blanks,
            "inaccurate": self.inaccurate,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Sloc:
        return cls(
            languages=[LanguageInfo.from_dict(d) for d in data["languages"]],
            code=data["code"],
            comments=data["comments"],
            blanks=data.get("blanks", 0),
            inaccurate=data["inaccurate"],
        )


@dataclass
class FileCoverage:
    """Uncovered lines of a single source file."""

    name: str
    uncovered_lines: set[int] = field(default_factory=set)


@dataclass
class Coverage:
    """Per-file uncovered lines and the tool's own summary figures."""

    files: list[FileCoverage] = field(default_factory=list)
    percentage: float = 0.0  # as printed by the tool, never recomputed
    covered: int = 0
    total: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": [
                {"name": f.name, "uncovered_lines": sorted(f.uncovered_lines)}
                for f in self.files
            ],
            "percentage": self.percentage,
            "covered": self.covered,
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Coverage:
        return cls(
            files=[
                FileCoverage(name=f["name"], uncovered_lines=set(f["uncovered_lines"]))
                for f in data["files"]
            ],
            percentage=float(data["percentage"]),
            covered=data["covered"],
            total=data["total"],
        )


@dataclass
class Quality:
    """Aggregate report of one analysis run.

    A fragment is None when its tool output could not be parsed; the
    reason is kept in ``notes``.
    """

    sloc: Sloc | None = None
    coverage: Coverage | None = None
    notes: list[str] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return self.sloc is None or self.coverage is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "sloc": self.sloc.to_dict() if self.sloc is not None else None,
            "coverage": self.coverage.to_dict() if self.coverage is not None else None,
            "notes": list(self.notes),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Quality:
        sloc = data.get("sloc")
        coverage = data.get("coverage")
        return cls(
            sloc=Sloc.from_dict(sloc) if sloc is not None else None,
            coverage=Coverage.from_dict(coverage) if coverage is not None else None,
            notes=list(data.get("notes", [])),
        )
