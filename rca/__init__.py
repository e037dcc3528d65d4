"""Rust Code Analyzer: toolchain-driven analysis of Rust repositories."""

__version__ = "0.1.0"

from rca.dependencies import DependencyFailure, DependencyInstaller, FailureKind
from rca.models.quality import Coverage, FileCoverage, LanguageInfo, Quality, Sloc
from rca.parsers.coverage import parse_coverage, parse_file_coverage, parse_summary
from rca.parsers.sloc import parse_sloc
from rca.report import load, persist, synthesize
from rca.target import Target, TargetKind, materialize, resolve

__all__ = [
    "Coverage",
    "DependencyFailure",
    "DependencyInstaller",
    "FailureKind",
    "FileCoverage",
    "LanguageInfo",
    "Quality",
    "Sloc",
    "Target",
    "TargetKind",
    "load",
    "materialize",
    "parse_coverage",
    "parse_file_coverage",
    "parse_sloc",
    "parse_summary",
    "persist",
    "resolve",
    "synthesize",
]
