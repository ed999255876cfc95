"""Helm template placeholder handling.

Templates are never evaluated. Every `{{ ... }}` action is either removed
(when it is the only thing on its line, like `{{- if }}` or `{{- end }}`)
or replaced by a plain scalar, so that the surrounding YAML structure can be
parsed and checked. Line numbers are preserved.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from chartdoc.model.snippet import Finding, Severity

PLACEHOLDER = "__TPL__"

ACTION_RE = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
VALUES_REF_RE = re.compile(r"(?<![\w.])\$?\.Values((?:\.[A-Za-z_][A-Za-z0-9_]*)+)")

# Marks an action while lines are being rebuilt; never present in real YAML
_SENTINEL = "\x00"


@dataclass
class ValueReference:
    """A `.Values.<path>` reference and the line it appears on."""

    path: str
    line: int


@dataclass
class NeutralizedTemplate:
    """Template text with actions neutralised."""

    text: str
    findings: list[Finding] = field(default_factory=list)
    references: list[ValueReference] = field(default_factory=list)


def has_actions(content: str) -> bool:
    """Return True when content contains Helm template delimiters."""
    return "{{" in content or "}}" in content


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def neutralize(content: str) -> NeutralizedTemplate:
    """Neutralise template actions so the YAML skeleton can be parsed.

    Args:
        content: Template source

    Returns:
        NeutralizedTemplate whose findings carry lines relative to content
    """
    result = NeutralizedTemplate(text="")
    pieces: list[str] = []
    last = 0

    for match in ACTION_RE.finditer(content):
        start_line = _line_of(content, match.start())
        body = match.group(1)
        if "{{" in body:
            result.findings.append(
                Finding(
                    code="UNBALANCED_TEMPLATE",
                    severity=Severity.ERROR,
                    message="Template action opened with '{{' is not closed before the next one",
                    line=start_line,
                )
            )
        for ref in VALUES_REF_RE.finditer(body):
            result.references.append(
                ValueReference(path=ref.group(1).lstrip("."), line=start_line + body.count("\n", 0, ref.start()))
            )
        pieces.append(content[last : match.start()])
        # Keep newlines so later line numbers do not move
        pieces.append(_SENTINEL + "\n" * body.count("\n"))
        last = match.end()
    pieces.append(content[last:])
    skeleton = "".join(pieces)

    lines = []
    for lineno, line in enumerate(skeleton.split("\n"), start=1):
        if "{{" in line or "}}" in line:
            result.findings.append(
                Finding(
                    code="UNBALANCED_TEMPLATE",
                    severity=Severity.ERROR,
                    message="Unmatched template delimiter",
                    line=lineno,
                )
            )
        if _SENTINEL in line and not line.replace(_SENTINEL, "").strip():
            lines.append("")
        else:
            lines.append(line.replace(_SENTINEL, PLACEHOLDER))

    result.text = "\n".join(lines)
    return result


def lookup_value(values: Any, dotted: str) -> bool:
    """Return True when the dotted path resolves inside a values mapping."""
    node = values
    for key in dotted.split("."):
        if not isinstance(node, dict) or key not in node:
            return False
        node = node[key]
    return True


def merge_values(base: dict[str, Any], extra: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge two values mappings, extra taking precedence."""
    merged = dict(base)
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_values(merged[key], value)
        else:
            merged[key] = value
    return merged
