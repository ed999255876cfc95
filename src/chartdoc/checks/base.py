"""Shared helpers for snippet checkers."""

from dataclasses import dataclass, field
from typing import Any

import pydantic
import yaml

from chartdoc.model.config import LintConfig
from chartdoc.model.snippet import Finding, Severity, Snippet


@dataclass
class LintContext:
    """State shared by the checkers of one document."""

    config: LintConfig = field(default_factory=LintConfig)
    # Values collected from values snippets or values files
    known_values: dict[str, Any] = field(default_factory=dict)
    values_seen: bool = False


def finding(
    snippet: Snippet,
    code: str,
    message: str,
    severity: Severity = Severity.ERROR,
    line: int | None = None,
) -> Finding:
    """Build a finding for a snippet, mapping a relative line to an absolute one."""
    return Finding(
        code=code,
        severity=severity,
        message=message,
        line=snippet.absolute_line(line) if line is not None else snippet.start_line,
        snippet=snippet.index,
    )


def format_loc(loc: tuple[Any, ...]) -> str:
    """Format a pydantic error location as a dotted path."""
    parts = []
    for item in loc:
        if isinstance(item, int):
            parts.append(f"[{item}]")
        else:
            parts.append(("." if parts else "") + str(item))
    return "".join(parts) or "<root>"


def schema_findings(
    snippet: Snippet,
    code: str,
    error: pydantic.ValidationError,
    line: int | None = None,
) -> list[Finding]:
    """Convert a pydantic validation error into findings."""
    results = []
    for item in error.errors():
        message = item["msg"]
        # Errors raised from model validators have an empty location
        location = format_loc(tuple(item["loc"]))
        results.append(finding(snippet, code, f"{location}: {message}", line=line))
    return results


def load_documents(snippet: Snippet, text: str | None = None) -> tuple[list[tuple[int, Any]], list[Finding]]:
    """Parse all YAML documents of a snippet.

    Args:
        snippet: Snippet being checked
        text: Text to parse instead of the snippet content

    Returns:
        Tuple of ([(relative start line, document)], findings). Empty
        documents are skipped.
    """
    source = snippet.content if text is None else text
    documents: list[tuple[int, Any]] = []
    try:
        loader = yaml.SafeLoader(source)
        try:
            while loader.check_node():
                node = loader.get_node()
                if node is None:
                    continue
                start = node.start_mark.line + 1
                data = loader.construct_document(node)
                if data is not None:
                    documents.append((start, data))
        finally:
            loader.dispose()
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None) or getattr(e, "context_mark", None)
        line = mark.line + 1 if mark is not None else None
        problem = getattr(e, "problem", None) or str(e)
        return documents, [finding(snippet, "YAML_SYNTAX", f"Invalid YAML: {problem}", line=line)]

    if not documents:
        return documents, [
            finding(snippet, "EMPTY_SNIPPET", "YAML snippet has no content", severity=Severity.WARNING)
        ]
    return documents, []
