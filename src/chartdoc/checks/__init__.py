"""Snippet checkers, one per snippet kind."""

from collections.abc import Callable

from chartdoc.checks.base import LintContext
from chartdoc.checks.shell import check_shell
from chartdoc.checks.yaml_docs import (
    check_argocd_application,
    check_chart_metadata,
    check_github_workflow,
    check_helm_template,
    check_helm_values,
    check_k8s_manifest,
    check_yaml,
)
from chartdoc.model.snippet import Finding, Snippet, SnippetKind

Checker = Callable[[Snippet, LintContext], list[Finding]]

CHECKERS: dict[SnippetKind, Checker] = {
    SnippetKind.ARGOCD_APPLICATION: check_argocd_application,
    SnippetKind.GITHUB_WORKFLOW: check_github_workflow,
    SnippetKind.K8S_MANIFEST: check_k8s_manifest,
    SnippetKind.HELM_TEMPLATE: check_helm_template,
    SnippetKind.HELM_VALUES: check_helm_values,
    SnippetKind.CHART_METADATA: check_chart_metadata,
    SnippetKind.SHELL: check_shell,
    SnippetKind.YAML: check_yaml,
}


def get_checker(kind: SnippetKind | str) -> Checker | None:
    """Get the checker for a snippet kind.

    Args:
        kind: Snippet kind

    Returns:
        Checker callable, or None for kinds that are not checked
    """
    # Normalize to enum if string
    if isinstance(kind, str):
        kind = SnippetKind(kind)
    return CHECKERS.get(kind)


__all__ = [
    "CHECKERS",
    "Checker",
    "LintContext",
    "get_checker",
]
