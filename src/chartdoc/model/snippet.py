"""Snippet, finding and report models."""

from collections import Counter
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class SnippetKind(str, Enum):
    """Kind of a fenced code block."""

    ARGOCD_APPLICATION = "argocd-application"
    GITHUB_WORKFLOW = "github-workflow"
    K8S_MANIFEST = "k8s-manifest"
    HELM_TEMPLATE = "helm-template"
    HELM_VALUES = "helm-values"
    CHART_METADATA = "chart-metadata"
    SHELL = "shell"
    YAML = "yaml"
    TEXT = "text"


class Severity(str, Enum):
    """Finding severity."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return {"info": 0, "warning": 1, "error": 2}[self.value]


class Snippet(BaseModel):
    """A fenced code block extracted from a Markdown document."""

    index: int
    language: str = Field(default="")
    content: str
    start_line: int
    heading: str | None = Field(default=None)
    kind: SnippetKind = Field(default=SnippetKind.TEXT)

    def absolute_line(self, relative: int | None) -> int | None:
        """Map a 1-based line inside the snippet to a line in the source file."""
        if relative is None:
            return None
        return self.start_line + relative - 1


class Finding(BaseModel):
    """A single problem found while checking a document."""

    code: str
    severity: Severity
    message: str
    line: int | None = Field(default=None)
    snippet: int | None = Field(default=None)
    # File inside a chart directory, relative to the chart root
    file: str | None = Field(default=None)


class LintReport(BaseModel):
    """Result of checking one source (Markdown file or chart directory)."""

    source: str
    snippets: list[Snippet] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)

    @classmethod
    def for_path(cls, path: Path) -> "LintReport":
        return cls(source=str(path))

    def errors(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == Severity.ERROR]

    def warnings(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == Severity.WARNING]

    def max_severity(self) -> Severity | None:
        if not self.findings:
            return None
        return max((f.severity for f in self.findings), key=lambda s: s.rank)

    def ok(self, fail_on: Severity = Severity.ERROR) -> bool:
        """Return True when no finding reaches the fail_on threshold."""
        return all(f.severity.rank < fail_on.rank for f in self.findings)

    def counts_by_kind(self) -> dict[str, int]:
        counts = Counter(s.kind.value for s in self.snippets)
        return dict(sorted(counts.items()))

    def sorted_findings(self) -> list[Finding]:
        return sorted(self.findings, key=lambda f: (f.line or 0, -f.severity.rank, f.code))
