"""Checkers for YAML snippets: manifests, workflows, charts and templates."""

from typing import Any

import pydantic

from chartdoc.checks.base import LintContext, finding, load_documents, schema_findings
from chartdoc.model.manifests import ArgoApplication, ChartMetadata, GitHubWorkflow, K8sObject
from chartdoc.model.snippet import Finding, Severity, Snippet
from chartdoc.templating import lookup_value, merge_values, neutralize


def check_yaml(snippet: Snippet, context: LintContext) -> list[Finding]:
    """Plain YAML: syntax only."""
    _, findings = load_documents(snippet)
    return findings


def check_argocd_application(snippet: Snippet, context: LintContext) -> list[Finding]:
    """Validate an argoproj.io/v1alpha1 Application."""
    documents, findings = load_documents(snippet)
    for start, data in documents:
        try:
            app = ArgoApplication.model_validate(data)
        except pydantic.ValidationError as e:
            findings.extend(schema_findings(snippet, "SCHEMA_ARGOCD", e, line=start))
            continue

        automated = app.spec.syncPolicy.automated if app.spec.syncPolicy else None
        if automated is None:
            continue
        if automated.prune and not automated.selfHeal:
            findings.append(
                finding(
                    snippet,
                    "ARGOCD_PARTIAL_AUTOSYNC",
                    f"Application '{app.metadata.name}' prunes automatically but does not self-heal drift",
                    severity=Severity.INFO,
                    line=start,
                )
            )
        for source in app.spec.all_sources():
            if str(source.targetRevision or "HEAD") == "HEAD":
                findings.append(
                    finding(
                        snippet,
                        "ARGOCD_FLOATING_REVISION",
                        f"Application '{app.metadata.name}' auto-syncs a floating revision (HEAD) of {source.repoURL}",
                        severity=Severity.INFO,
                        line=start,
                    )
                )
    return findings


def check_github_workflow(snippet: Snippet, context: LintContext) -> list[Finding]:
    """Validate a GitHub Actions workflow."""
    documents, findings = load_documents(snippet)
    for start, data in documents:
        try:
            workflow = GitHubWorkflow.model_validate(data)
        except pydantic.ValidationError as e:
            findings.extend(schema_findings(snippet, "SCHEMA_WORKFLOW", e, line=start))
            continue

        for step in workflow.steps():
            # Local actions (./path) and docker:// images are not versioned by ref
            if step.uses and not step.uses.startswith(("./", "docker://")) and "@" not in step.uses:
                findings.append(
                    finding(
                        snippet,
                        "WORKFLOW_UNPINNED_ACTION",
                        f"Action '{step.uses}' is not pinned to a ref (owner/repo@ref)",
                        severity=Severity.WARNING,
                        line=_line_containing(snippet.content, step.uses),
                    )
                )
    return findings


def check_chart_metadata(snippet: Snippet, context: LintContext) -> list[Finding]:
    """Validate Chart.yaml content."""
    documents, findings = load_documents(snippet)
    for start, data in documents:
        try:
            ChartMetadata.model_validate(data)
        except pydantic.ValidationError as e:
            findings.extend(schema_findings(snippet, "SCHEMA_CHART", e, line=start))
    return findings


def check_k8s_manifest(snippet: Snippet, context: LintContext) -> list[Finding]:
    """Validate the identifying fields of every Kubernetes object."""
    documents, findings = load_documents(snippet)
    findings.extend(_check_objects(snippet, documents))
    return findings


def check_helm_values(snippet: Snippet, context: LintContext) -> list[Finding]:
    """Validate a values.yaml snippet and remember its keys."""
    documents, findings = load_documents(snippet)
    for start, data in documents:
        if not isinstance(data, dict):
            findings.append(
                finding(snippet, "SCHEMA_VALUES", "Helm values must be a mapping", line=start)
            )
            continue
        context.known_values = merge_values(context.known_values, data)
        context.values_seen = True
    return findings


def check_helm_template(snippet: Snippet, context: LintContext) -> list[Finding]:
    """Check a Helm template with its placeholders neutralised."""
    template = neutralize(snippet.content)
    findings = [
        finding(snippet, f.code, f.message, severity=f.severity, line=f.line) for f in template.findings
    ]
    if findings:
        # The skeleton of an unbalanced template cannot be trusted
        return findings

    documents, parse_findings = load_documents(snippet, template.text)
    findings.extend(parse_findings)
    findings.extend(_check_objects(snippet, documents))

    if context.values_seen:
        reported: set[str] = set()
        for ref in template.references:
            if ref.path in reported or lookup_value(context.known_values, ref.path):
                continue
            reported.add(ref.path)
            findings.append(
                finding(
                    snippet,
                    "UNDEFINED_VALUE",
                    f".Values.{ref.path} is not defined in the known values",
                    severity=Severity.WARNING,
                    line=ref.line,
                )
            )
    return findings


def _check_objects(snippet: Snippet, documents: list[tuple[int, Any]]) -> list[Finding]:
    findings = []
    for start, data in documents:
        try:
            K8sObject.model_validate(data)
        except pydantic.ValidationError as e:
            findings.extend(schema_findings(snippet, "SCHEMA_K8S", e, line=start))
    return findings


def _line_containing(content: str, needle: str) -> int | None:
    for lineno, line in enumerate(content.splitlines(), start=1):
        if needle in line:
            return lineno
    return None
