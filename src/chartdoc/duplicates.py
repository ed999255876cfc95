"""Detection of sections repeated across a document.

Tutorials that have been pasted together often repeat whole sections with
only emoji or emphasis changed. Sections are compared after normalising
those differences away.
"""

import re
from dataclasses import dataclass, field

from chartdoc.markdown import Section, extract_sections
from chartdoc.model.snippet import Finding, Severity

_EMPHASIS_RE = re.compile(r"[*_~`>]+")
_SYMBOL_RE = re.compile(r"[^\w\s./:=-]+")
_SPACE_RE = re.compile(r"\s+")


@dataclass
class Occurrence:
    heading: str
    line: int


@dataclass
class DuplicateGroup:
    """Sections whose normalised bodies are identical."""

    fingerprint: str
    occurrences: list[Occurrence] = field(default_factory=list)


def normalize(text: str) -> str:
    """Normalise a section body for comparison."""
    text = _EMPHASIS_RE.sub(" ", text.lower())
    # Emoji, box drawing and other pictographs
    text = _SYMBOL_RE.sub(" ", text)
    return _SPACE_RE.sub(" ", text).strip()


def find_duplicate_sections(text: str, min_chars: int = 40) -> list[DuplicateGroup]:
    """Group sections with identical normalised bodies.

    Args:
        text: Markdown source
        min_chars: Minimum normalised body length to be considered

    Returns:
        Groups with two or more occurrences, in order of first appearance
    """
    groups: dict[str, DuplicateGroup] = {}
    sections: list[Section] = extract_sections(text)
    for section in sections:
        fingerprint = normalize(section.body)
        if len(fingerprint) < min_chars:
            continue
        group = groups.setdefault(fingerprint, DuplicateGroup(fingerprint=fingerprint))
        group.occurrences.append(Occurrence(heading=section.heading, line=section.start_line))
    return [group for group in groups.values() if len(group.occurrences) > 1]


def duplicate_findings(groups: list[DuplicateGroup]) -> list[Finding]:
    """Report every repeated occurrence, pointing back at the first one."""
    findings = []
    for group in groups:
        first = group.occurrences[0]
        for occurrence in group.occurrences[1:]:
            label = occurrence.heading or "(untitled)"
            findings.append(
                Finding(
                    code="DUPLICATE_SECTION",
                    severity=Severity.WARNING,
                    message=f"Section '{label}' repeats the section at line {first.line}",
                    line=occurrence.line,
                )
            )
    return findings
