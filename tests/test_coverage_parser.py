"""Tests for the tarpaulin report parser."""

from __future__ import annotations

import pytest

from rca.exceptions import CoverageParseError
from rca.parsers.coverage import parse_coverage, parse_file_coverage, parse_summary


class TestParseFileCoverage:
    def test_ranges_and_singles(self):
        fc = parse_file_coverage("src/lib.rs: 12-15, 20")
        assert fc.name == "src/lib.rs"
        assert sorted(fc.uncovered_lines) == [12, 13, 14, 15, 20]

    def test_single_line(self):
        fc = parse_file_coverage(" src/main.rs: 3\n")
        assert fc.uncovered_lines == {3}

    def test_single_element_range(self):
        assert parse_file_coverage("a.rs: 7-7").uncovered_lines == {7}

    def test_trailing_log_prefix_ignored(self):
        section = " src/lib.rs: 1, 2\nNov 10 12:00:00.000  INFO cargo_tarpaulin::report: "
        assert parse_file_coverage(section).uncovered_lines == {1, 2}

    def test_empty_tokens_skipped(self):
        assert parse_file_coverage("a.rs: 1,, 3,").uncovered_lines == {1, 3}

    def test_missing_colon(self):
        with pytest.raises(CoverageParseError):
            parse_file_coverage("src/lib.rs 12-15")

    def test_malformed_number(self):
        with pytest.raises(CoverageParseError, match="Malformed line number"):
            parse_file_coverage("src/lib.rs: 12, abc")

    def test_non_ascii_digit_is_malformed(self):
        with pytest.raises(CoverageParseError, match="Malformed line number"):
            parse_file_coverage("src/lib.rs: 1\u00b2")

    def test_reversed_range(self):
        with pytest.raises(CoverageParseError, match="range"):
            parse_file_coverage("src/lib.rs: 15-12")

    def test_open_range(self):
        with pytest.raises(CoverageParseError):
            parse_file_coverage("src/lib.rs: 12-")


class TestParseSummary:
    def test_basic(self):
        cov = parse_summary("85.5% coverage, 171/200 lines covered")
        assert cov.percentage == pytest.approx(85.5)
        assert cov.covered == 171
        assert cov.total == 200
        assert cov.files == []

    def test_percentage_trusted_not_recomputed(self):
        cov = parse_summary("85.00% coverage, 171/200 lines covered")
        assert cov.percentage == pytest.approx(85.0)

    def test_log_prefix(self):
        cov = parse_summary(
            "Nov 10 12:00:02.000  INFO cargo_tarpaulin: 50.00% coverage, 1/2 lines covered"
        )
        assert cov.percentage == pytest.approx(50.0)
        assert (cov.covered, cov.total) == (1, 2)

    def test_missing_percent_sign(self):
        with pytest.raises(CoverageParseError, match="%"):
            parse_summary("85.5 coverage, 171/200 lines covered")

    def test_malformed_percentage(self):
        with pytest.raises(CoverageParseError, match="percentage"):
            parse_summary("abc% coverage, 171/200 lines covered")

    def test_percentage_out_of_range(self):
        with pytest.raises(CoverageParseError, match="out of range"):
            parse_summary("120.0% coverage, 171/200 lines covered")

    def test_missing_ratio(self):
        with pytest.raises(CoverageParseError):
            parse_summary("85.5% coverage")

    def test_malformed_ratio(self):
        with pytest.raises(CoverageParseError):
            parse_summary("85.5% coverage, 171 lines covered")

    def test_non_ascii_digit_in_ratio(self):
        with pytest.raises(CoverageParseError):
            parse_summary("50.00% coverage, 1\u00b2/200 lines covered")

    def test_covered_exceeds_total(self):
        with pytest.raises(CoverageParseError, match="exceed"):
            parse_summary("100.0% coverage, 201/200 lines covered")


class TestParseCoverage:
    def test_full_report(self, tarpaulin_report: str):
        cov = parse_coverage(tarpaulin_report)
        assert [f.name for f in cov.files] == ["src/lib.rs", "src/main.rs"]
        assert sorted(cov.files[0].uncovered_lines) == [12, 13, 14, 15, 20]
        assert cov.files[1].uncovered_lines == {3}
        assert cov.percentage == pytest.approx(85.5)
        assert cov.covered == 171
        assert cov.total == 200
        assert cov.covered <= cov.total

    def test_fully_covered(self):
        text = (
            "INFO Running Tarpaulin\n"
            "|| Uncovered Lines:\n"
            "|| Tested/Total Lines:\n"
            "|| src/lib.rs: 5/5 +0.00%\n"
            "||\n"
            "100.00% coverage, 5/5 lines covered\n"
        )
        cov = parse_coverage(text)
        assert cov.files == []
        assert cov.percentage == pytest.approx(100.0)

    def test_missing_marker(self):
        text = "|| Uncovered Lines:\n|| src/lib.rs: 1\n||\n50.00% coverage, 1/2 lines covered\n"
        with pytest.raises(CoverageParseError, match="Total Lines"):
            parse_coverage(text)

    def test_not_a_report(self):
        with pytest.raises(CoverageParseError):
            parse_coverage("error: no such subcommand: `tarpaulin`\n")

    def test_marker_is_last_section(self):
        with pytest.raises(CoverageParseError, match="summary"):
            parse_coverage("preamble|| Uncovered Lines:\n|| Tested/Total Lines:\n")

    def test_empty_summary(self):
        text = "pre|| Uncovered Lines:\n|| Tested/Total Lines:\n||   \n"
        with pytest.raises(CoverageParseError, match="empty"):
            parse_coverage(text)

    def test_malformed_file_section_fails_whole_parse(self):
        text = (
            "pre|| Uncovered Lines:\n"
            "|| src/lib.rs: 1-x\n"
            "|| Tested/Total Lines:\n"
            "||\n"
            "50.00% coverage, 1/2 lines covered\n"
        )
        with pytest.raises(CoverageParseError):
            parse_coverage(text)

    def test_delimiter_in_test_output_before_report(self):
        text = (
            "running 1 test\n"
            "test parses_a || b ... ok\n"
            "|| Uncovered Lines:\n"
            "|| src/lib.rs: 4\n"
            "|| Tested/Total Lines:\n"
            "|| src/lib.rs: 9/10 +0.00%\n"
            "||\n"
            "90.00% coverage, 9/10 lines covered\n"
        )
        cov = parse_coverage(text)
        assert [f.name for f in cov.files] == ["src/lib.rs"]
        assert cov.files[0].uncovered_lines == {4}
        assert (cov.covered, cov.total) == (9, 10)
