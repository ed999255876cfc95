"""Helm chart directory checks."""

from pathlib import Path

from chartdoc.checks import LintContext
from chartdoc.checks.base import finding
from chartdoc.checks.yaml_docs import check_chart_metadata, check_helm_template, check_helm_values
from chartdoc.model.config import LintConfig
from chartdoc.model.snippet import Finding, LintReport, Severity, Snippet, SnippetKind
from chartdoc.model.validation import ValidationError
from chartdoc.templating import neutralize
from chartdoc.utils.cmd import run_tool

TEMPLATE_SUFFIXES = (".yaml", ".yml", ".tpl")


def _file_snippet(index: int, path: Path, chart_dir: Path, kind: SnippetKind) -> Snippet:
    return Snippet(
        index=index,
        language="yaml",
        content=path.read_text(encoding="utf-8"),
        start_line=1,
        heading=str(path.relative_to(chart_dir)),
        kind=kind,
    )


def _tag(findings: list[Finding], snippet: Snippet) -> list[Finding]:
    # Chart findings point at files, not at snippet indexes
    return [f.model_copy(update={"file": snippet.heading, "snippet": None}) for f in findings]


def _missing(code: str, message: str, severity: Severity = Severity.ERROR) -> Finding:
    return Finding(code=code, severity=severity, message=message)


def _has_data(content: str) -> bool:
    for line in content.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#") and stripped not in ("---", "..."):
            return True
    return False


def _helm_lint(chart_dir: Path) -> list[Finding]:
    try:
        result = run_tool("helm", ["lint", str(chart_dir)])
    except ValidationError as e:
        if e.code == "TOOL_NOT_FOUND":
            return [_missing("HELM_NOT_FOUND", "helm is not installed, skipping 'helm lint'", Severity.WARNING)]
        raise

    if result.returncode == 0:
        return []
    output = (result.stdout or "") + (result.stderr or "")
    tail = "\n".join(output.strip().splitlines()[-10:])
    return [_missing("HELM_LINT_FAILED", f"'helm lint' failed:\n{tail}")]


def check_chart(chart_dir: Path, run_helm: bool = False, config: LintConfig | None = None) -> LintReport:
    """Check the layout and files of a Helm chart directory.

    Args:
        chart_dir: Chart root (the directory holding Chart.yaml)
        run_helm: Also run `helm lint` when helm is installed
        config: Lint configuration

    Returns:
        LintReport for the chart

    Raises:
        ValidationError: If chart_dir is not a directory (CHART_NOT_FOUND)
    """
    if not chart_dir.is_dir():
        raise ValidationError("CHART_NOT_FOUND", f"Chart directory not found: {chart_dir}")
    if config is None:
        config = LintConfig()

    report = LintReport.for_path(chart_dir)
    context = LintContext(config=config)

    chart_file = chart_dir / "Chart.yaml"
    if chart_file.exists():
        snippet = _file_snippet(len(report.snippets), chart_file, chart_dir, SnippetKind.CHART_METADATA)
        report.snippets.append(snippet)
        report.findings.extend(_tag(check_chart_metadata(snippet, context), snippet))
    else:
        report.findings.append(_missing("CHART_MISSING_FILE", "Chart.yaml is missing"))

    values_file = chart_dir / "values.yaml"
    if values_file.exists():
        snippet = _file_snippet(len(report.snippets), values_file, chart_dir, SnippetKind.HELM_VALUES)
        report.snippets.append(snippet)
        if _has_data(snippet.content):
            report.findings.extend(_tag(check_helm_values(snippet, context), snippet))
        else:
            # An empty or comment-only values.yaml is valid: no template may reference values
            context.values_seen = True

    templates_dir = chart_dir / "templates"
    if not templates_dir.is_dir():
        report.findings.append(
            _missing("CHART_MISSING_TEMPLATES", "templates/ directory is missing", Severity.WARNING)
        )
    else:
        for path in sorted(templates_dir.rglob("*")):
            if not path.is_file() or path.suffix not in TEMPLATE_SUFFIXES:
                continue
            snippet = _file_snippet(len(report.snippets), path, chart_dir, SnippetKind.HELM_TEMPLATE)
            report.snippets.append(snippet)
            if path.name.startswith("_") or path.suffix == ".tpl":
                # Helpers only define named templates: check delimiters only
                template = neutralize(snippet.content)
                helper_findings = [
                    finding(snippet, f.code, f.message, severity=f.severity, line=f.line)
                    for f in template.findings
                ]
                report.findings.extend(_tag(helper_findings, snippet))
            else:
                report.findings.extend(_tag(check_helm_template(snippet, context), snippet))

    if run_helm:
        report.findings.extend(_helm_lint(chart_dir))

    ignored = set(config.ignore)
    report.findings = [f for f in report.findings if f.code not in ignored]
    return report
