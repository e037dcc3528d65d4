"""Parse the human-readable report printed by ``cargo tarpaulin``.

The interesting part of the output looks like::

    || Uncovered Lines:
    || src/lib.rs: 12-15, 20
    || src/main.rs: 3
    || Tested/Total Lines:
    || src/lib.rs: 10/15 +0.00%
    ||
    85.50% coverage, 171/200 lines covered

Splitting on ``||`` yields the log preamble, the ``Uncovered Lines:``
header, one section per file with uncovered lines, the ``Tested/Total
Lines:`` marker section and finally the summary.
"""

from __future__ import annotations

import structlog

from rca.exceptions import CoverageParseError
from rca.models.quality import Coverage, FileCoverage

log = structlog.get_logger("rca.parser")

SECTION_DELIMITER = "||"
UNCOVERED_LINES_HEADER = "Uncovered Lines:"
TOTAL_LINES_MARKER = "Total Lines"
_PREAMBLE_SECTIONS = 2


def parse_coverage(raw_text: str) -> Coverage:
    """Parse a full tarpaulin report into :class:`Coverage`.

    Raises:
        CoverageParseError: the marker section or summary is missing, or a
            line token or summary figure is malformed.
    """
    sections = raw_text.split(SECTION_DELIMITER)
    # the test run printed before the report may itself contain the delimiter
    header_index = next(
        (
            i
            for i, section in enumerate(sections)
            if section.lstrip().startswith(UNCOVERED_LINES_HEADER)
        ),
        None,
    )
    start = header_index + 1 if header_index is not None else _PREAMBLE_SECTIONS
    sections = sections[start:]

    marker_index = next(
        (i for i, section in enumerate(sections) if TOTAL_LINES_MARKER in section),
        None,
    )
    if marker_index is None:
        raise CoverageParseError(f"No '{TOTAL_LINES_MARKER}' section in coverage report")
    if marker_index == len(sections) - 1:
        raise CoverageParseError("Coverage report ends before the summary line")

    files = [
        parse_file_coverage(section)
        for section in sections[:marker_index]
        if section.strip()
    ]

    summary = _last_line(sections[-1])
    if summary is None:
        raise CoverageParseError("Coverage summary line is empty")
    coverage = parse_summary(summary)
    coverage.files = files

    log.debug(
        "coverage.parsed",
        files=len(files),
        percentage=coverage.percentage,
        covered=coverage.covered,
        total=coverage.total,
    )
    return coverage


def parse_file_coverage(section: str) -> FileCoverage:
    """Parse ``"<file>: 12-15, 20"`` into a :class:`FileCoverage`.

    Only the first line counts; tarpaulin may append the log prefix of
    the next record after it.
    """
    first_line = section.strip().splitlines()[0] if section.strip() else ""
    name, sep, tokens = first_line.partition(":")
    if not sep or not name.strip():
        raise CoverageParseError(f"Malformed file coverage section: {first_line!r}")

    lines: set[int] = set()
    for token in tokens.split(","):
        token = token.strip()
        if not token:
            continue
        lines.update(_expand_token(token))

    return FileCoverage(name=name.strip(), uncovered_lines=lines)


def parse_summary(line: str) -> Coverage:
    """Parse ``"85.5% coverage, 171/200 lines covered"``.

    Only the scalar fields are filled; ``files`` is left empty.
    """
    fields = [f.strip() for f in line.split(",")]
    if len(fields) < 2:
        raise CoverageParseError(f"Malformed coverage summary: {line!r}")

    head, sep, _ = fields[0].partition("%")
    if not sep or not head.split():
        raise CoverageParseError(f"Missing '%' in coverage summary: {line!r}")
    # log prefixes may precede the figure
    percent_text = head.split()[-1]
    try:
        percentage = float(percent_text.strip())
    except ValueError as e:
        raise CoverageParseError(f"Malformed coverage percentage: {percent_text!r}") from e
    if not 0.0 <= percentage <= 100.0:
        raise CoverageParseError(f"Coverage percentage out of range: {percentage}")

    ratio = fields[1].split()[0] if fields[1].split() else ""
    covered_text, sep, total_text = ratio.partition("/")
    if not sep:
        raise CoverageParseError(f"Missing covered/total figures in summary: {line!r}")
    covered = _to_int(covered_text)
    total = _to_int(total_text)
    if covered > total:
        raise CoverageParseError(f"Covered lines exceed total lines: {covered}/{total}")

    return Coverage(percentage=percentage, covered=covered, total=total)


def _expand_token(token: str) -> range:
    """Expand ``"12"`` or the inclusive range ``"12-15"``."""
    start_text, sep, end_text = token.partition("-")
    start = _to_int(start_text)
    if not sep:
        return range(start, start + 1)
    end = _to_int(end_text)
    if end < start:
        raise CoverageParseError(f"Malformed line range: {token!r}")
    return range(start, end + 1)


def _to_int(text: str) -> int:
    text = text.strip()
    if not (text.isascii() and text.isdigit()):
        raise CoverageParseError(f"Malformed line number: {text!r}")
    return int(text)


def _last_line(section: str) -> str | None:
    lines = [line.strip() for line in section.splitlines() if line.strip()]
    return lines[-1] if lines else None
