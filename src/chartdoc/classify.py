"""Snippet kind detection."""

import re

from chartdoc.catalog.commands import is_known_command
from chartdoc.model.snippet import Snippet, SnippetKind
from chartdoc.templating import has_actions

SHELL_LANGUAGES = frozenset({"bash", "sh", "shell", "console", "zsh", "shell-session", "powershell", "ps1"})
YAML_LANGUAGES = frozenset({"yaml", "yml"})

# GitHub Actions expressions use the same braces as Helm actions
GH_EXPRESSION_RE = re.compile(r"\$\{\{.*?\}\}")

VALUES_HINT_KEYS = ("replicaCount", "image", "service", "ingress", "resources", "autoscaling")


def _top_level_keys(content: str) -> set[str]:
    keys = set()
    for line in content.splitlines():
        # Keys may be quoted, as PyYAML does for `on`
        match = re.match(r"^[\"']?([A-Za-z_][\w.-]*)[\"']?\s*:", line)
        if match:
            keys.add(match.group(1))
    return keys


def _looks_like_shell(content: str) -> bool:
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("$ "):
            return True
        word = stripped.split()[0]
        return is_known_command(word)
    return False


def _classify_yaml(snippet: Snippet) -> SnippetKind:
    content = snippet.content
    if has_actions(GH_EXPRESSION_RE.sub("", content)):
        return SnippetKind.HELM_TEMPLATE

    keys = _top_level_keys(content)
    if re.search(r"^kind:\s*Application\s*$", content, re.MULTILINE) and "argoproj.io/" in content:
        return SnippetKind.ARGOCD_APPLICATION
    if "jobs" in keys and "on" in keys:
        return SnippetKind.GITHUB_WORKFLOW
    if {"apiVersion", "name", "version"} <= keys and "kind" not in keys:
        return SnippetKind.CHART_METADATA
    if {"apiVersion", "kind"} <= keys:
        return SnippetKind.K8S_MANIFEST

    heading = (snippet.heading or "").lower()
    if "values" in heading or any(key in keys for key in VALUES_HINT_KEYS):
        return SnippetKind.HELM_VALUES
    return SnippetKind.YAML


def classify(snippet: Snippet) -> SnippetKind:
    """Decide how a snippet should be checked.

    Args:
        snippet: Extracted snippet

    Returns:
        SnippetKind for the snippet
    """
    language = snippet.language
    if language in SHELL_LANGUAGES:
        return SnippetKind.SHELL
    if language in YAML_LANGUAGES:
        return _classify_yaml(snippet)
    if language:
        return SnippetKind.TEXT

    # Unlabelled fence: guess from the content
    if _looks_like_shell(snippet.content):
        return SnippetKind.SHELL
    if has_actions(snippet.content) or re.search(r"^apiVersion:", snippet.content, re.MULTILINE):
        return _classify_yaml(snippet)
    return SnippetKind.TEXT
