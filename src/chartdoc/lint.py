"""Lint a Markdown tutorial: extract, classify and check every snippet."""

from pathlib import Path

import yaml

from chartdoc.checks import LintContext, get_checker
from chartdoc.checks.yaml_docs import check_helm_values
from chartdoc.classify import classify
from chartdoc.duplicates import duplicate_findings, find_duplicate_sections
from chartdoc.markdown import extract_snippets
from chartdoc.model.config import LintConfig
from chartdoc.model.snippet import Finding, LintReport, Snippet, SnippetKind
from chartdoc.model.validation import ValidationError
from chartdoc.templating import merge_values

SNIPPET_EXTENSIONS = {SnippetKind.SHELL: "sh"}


def load_values_file(path: Path) -> dict:
    """Load a Helm values file used to seed the .Values reference check."""
    if not path.exists():
        raise ValidationError("VALUES_FILE_NOT_FOUND", f"Values file not found: {path}")
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValidationError("VALUES_FILE_INVALID", f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("VALUES_FILE_INVALID", f"Values file {path} is not a mapping")
    return data


def _seed_context(config: LintConfig, base_dir: Path) -> LintContext:
    context = LintContext(config=config)
    for name in config.values_files:
        path = Path(name)
        if not path.is_absolute():
            path = base_dir / path
        context.known_values = merge_values(context.known_values, load_values_file(path))
        context.values_seen = True
    return context


def _apply_filters(findings: list[Finding], config: LintConfig) -> list[Finding]:
    ignored = set(config.ignore)
    return [f for f in findings if f.code not in ignored]


def classify_snippets(text: str) -> tuple[list[Snippet], list[Finding]]:
    """Extract snippets and assign each its kind."""
    snippets, findings = extract_snippets(text)
    for snippet in snippets:
        snippet.kind = classify(snippet)
    return snippets, findings


def lint_text(
    text: str,
    source: str = "<text>",
    config: LintConfig | None = None,
    base_dir: Path | None = None,
) -> LintReport:
    """Check every snippet of a Markdown document.

    Args:
        text: Markdown source
        source: Name reported for the document
        config: Lint configuration, defaults when omitted
        base_dir: Directory that relative values files are resolved against

    Returns:
        LintReport with snippets in document order and all findings
    """
    if config is None:
        config = LintConfig()
    if base_dir is None:
        base_dir = Path.cwd()

    snippets, findings = classify_snippets(text)
    context = _seed_context(config, base_dir)
    disabled = set(config.disabled_kinds)

    # Values snippets first, so templates shown before them can be checked
    values_findings: dict[int, list[Finding]] = {}
    for snippet in snippets:
        if snippet.kind == SnippetKind.HELM_VALUES and snippet.kind not in disabled:
            values_findings[snippet.index] = check_helm_values(snippet, context)

    for snippet in snippets:
        if snippet.kind in disabled:
            continue
        if snippet.index in values_findings:
            findings.extend(values_findings[snippet.index])
            continue
        checker = get_checker(snippet.kind)
        if checker is not None:
            findings.extend(checker(snippet, context))

    if config.check_duplicates:
        groups = find_duplicate_sections(text, config.duplicate_min_chars)
        findings.extend(duplicate_findings(groups))

    return LintReport(source=source, snippets=snippets, findings=_apply_filters(findings, config))


def read_markdown(path: Path) -> str:
    """Read a Markdown file, raising ValidationError when it is missing."""
    if not path.is_file():
        raise ValidationError("FILE_NOT_FOUND", f"File not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ValidationError("FILE_UNREADABLE", f"Cannot read {path}: {e}") from e


def lint_file(path: Path, config: LintConfig | None = None, base_dir: Path | None = None) -> LintReport:
    """Check a Markdown file."""
    return lint_text(read_markdown(path), source=str(path), config=config, base_dir=base_dir)


def extract_to_dir(path: Path, output_dir: Path) -> list[Path]:
    """Write every checkable snippet of a Markdown file to its own file.

    Files are named NN-<kind>.<ext>, numbered by snippet index.

    Returns:
        Paths of the written files
    """
    snippets, _ = classify_snippets(read_markdown(path))
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for snippet in snippets:
        if snippet.kind == SnippetKind.TEXT:
            continue
        extension = SNIPPET_EXTENSIONS.get(snippet.kind, "yaml")
        target = output_dir / f"{snippet.index:02d}-{snippet.kind.value}.{extension}"
        target.write_text(snippet.content + "\n", encoding="utf-8")
        written.append(target)
    return written
