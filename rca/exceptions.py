"""Custom exceptions for the Rust Code Analyzer."""

from __future__ import annotations


class AnalyzerError(Exception):
    """Base exception for all analyzer errors."""


class TargetError(AnalyzerError):
    """Raised when a user-supplied target cannot be resolved."""


class LocalPathNotFoundError(TargetError):
    """Raised when a target is neither a remote repository nor an existing path."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"Local path `{raw}` does not exist")


class CloneError(AnalyzerError):
    """Raised when fetching a remote repository fails."""


class ParseError(AnalyzerError):
    """Base exception for tool output that cannot be parsed."""


class SlocParseError(ParseError):
    """Raised when a line-of-code payload is malformed."""


class CoverageParseError(ParseError):
    """Raised when a coverage report is malformed."""


class ReportError(AnalyzerError):
    """Raised when a persisted quality report cannot be loaded."""
