"""Data models for chartdoc."""

from chartdoc.model.config import LintConfig
from chartdoc.model.snippet import (
    Finding,
    LintReport,
    Severity,
    Snippet,
    SnippetKind,
)

__all__ = [
    "LintConfig",
    "Finding",
    "LintReport",
    "Severity",
    "Snippet",
    "SnippetKind",
]
