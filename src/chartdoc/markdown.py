"""Markdown parsing: fenced code blocks and sections."""

import re
from dataclasses import dataclass

from chartdoc.model.snippet import Finding, Severity, Snippet

FENCE_RE = re.compile(r"^( {0,3})(`{3,}|~{3,})\s*([^`]*?)\s*$")
HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:\s+(.*?))?\s*$")


@dataclass
class Section:
    """A heading and the text up to the next heading of any level."""

    heading: str
    level: int
    body: str
    start_line: int


def _heading(line: str) -> tuple[int, str] | None:
    match = HEADING_RE.match(line)
    if not match:
        return None
    text = (match.group(2) or "").rstrip("#").strip()
    return len(match.group(1)), text


def _is_closing(line: str, fence: str) -> bool:
    stripped = line.strip()
    if len(line) - len(line.lstrip(" ")) > 3:
        return False
    return (
        len(stripped) >= len(fence)
        and set(stripped) == {fence[0]}
    )


def extract_snippets(text: str) -> tuple[list[Snippet], list[Finding]]:
    """Extract fenced code blocks from Markdown text.

    Args:
        text: Markdown source

    Returns:
        Tuple of (snippets in document order, structural findings)
    """
    snippets: list[Snippet] = []
    findings: list[Finding] = []
    heading: str | None = None

    fence: str | None = None
    indent = 0
    language = ""
    body: list[str] = []
    open_line = 0

    for lineno, line in enumerate(text.splitlines(), start=1):
        if fence is None:
            match = FENCE_RE.match(line)
            if match:
                fence = match.group(2)
                indent = len(match.group(1))
                info = match.group(3).strip()
                language = info.split()[0].lower() if info else ""
                # Info strings like {.yaml} or yaml{3}
                language = language.strip("{}.")
                body = []
                open_line = lineno
                continue
            parsed = _heading(line)
            if parsed:
                heading = parsed[1] or None
            continue

        if _is_closing(line, fence):
            snippets.append(
                Snippet(
                    index=len(snippets),
                    language=language,
                    content="\n".join(body),
                    start_line=open_line + 1,
                    heading=heading,
                )
            )
            fence = None
            continue

        # Strip up to the opening fence's indentation
        strip = min(indent, len(line) - len(line.lstrip(" ")))
        body.append(line[strip:])

    if fence is not None:
        findings.append(
            Finding(
                code="UNCLOSED_FENCE",
                severity=Severity.ERROR,
                message=f"Code fence opened with {fence} is never closed",
                line=open_line,
                snippet=len(snippets),
            )
        )
        snippets.append(
            Snippet(
                index=len(snippets),
                language=language,
                content="\n".join(body),
                start_line=open_line + 1,
                heading=heading,
            )
        )

    return snippets, findings


def extract_sections(text: str) -> list[Section]:
    """Split Markdown text into sections at every heading.

    Text before the first heading is returned as a level-0 section with an
    empty heading. Headings inside code fences are ignored.
    """
    sections: list[Section] = []
    current = Section(heading="", level=0, body="", start_line=1)
    lines: list[str] = []
    fence: str | None = None

    for lineno, line in enumerate(text.splitlines(), start=1):
        if fence is None:
            match = FENCE_RE.match(line)
            if match:
                fence = match.group(2)
            else:
                parsed = _heading(line)
                if parsed:
                    current.body = "\n".join(lines)
                    sections.append(current)
                    current = Section(heading=parsed[1], level=parsed[0], body="", start_line=lineno)
                    lines = []
                    continue
        elif _is_closing(line, fence):
            fence = None
        lines.append(line)

    current.body = "\n".join(lines)
    sections.append(current)

    # Drop an empty preamble
    if sections and sections[0].level == 0 and not sections[0].body.strip():
        sections.pop(0)
    return sections
