"""Checker for shell snippets invoking helm, kubectl and argocd."""

import re
import shlex
from dataclasses import dataclass

from chartdoc.catalog.commands import Subcommand, get_subcommand, get_tool
from chartdoc.checks.base import LintContext, finding
from chartdoc.model.snippet import Finding, Severity, Snippet

SEPARATORS = frozenset({"&&", "||", ";", "|", "&", ";;"})
PLACEHOLDER_RE = re.compile(r"<[A-Za-z][\w.\-/:]*>")
ENV_ASSIGN_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*=")
PORT_MAPPING_RE = re.compile(r"^(\d+|\d*:\d+)$")
PROMPT_LANGUAGES = frozenset({"console", "shell-session"})
HEREDOC_RE = re.compile(r"(?<!<)<<(?!<)-?\s*(['\"]?)([A-Za-z_][\w-]*)\1")

# Stands in for <placeholder> arguments so shlex does not read them as redirections
_ARG = "__ARG__"


@dataclass
class CommandLine:
    """A logical command line and the snippet line it starts on."""

    text: str
    line: int


def _logical_lines(snippet: Snippet) -> list[CommandLine]:
    lines = snippet.content.splitlines()
    prompt_only = snippet.language in PROMPT_LANGUAGES and any(line.lstrip().startswith("$ ") for line in lines)

    result: list[CommandLine] = []
    buffer: list[str] = []
    start = 0
    heredoc_end = None
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if heredoc_end is not None:
            # Heredoc body is input data, not commands
            if line.lstrip("> ") == heredoc_end:
                heredoc_end = None
            continue
        if not buffer:
            if line.startswith("$ "):
                line = line[2:]
            elif prompt_only:
                # Command output
                continue
            start = lineno
        if line.endswith("\\"):
            buffer.append(line[:-1])
            continue
        buffer.append(line)
        text = " ".join(part.strip() for part in buffer).strip()
        buffer = []
        if text and not text.startswith("#"):
            result.append(CommandLine(text=text, line=start))
            match = HEREDOC_RE.search(text)
            if match:
                heredoc_end = match.group(2)
    if buffer:
        text = " ".join(part.strip() for part in buffer).strip()
        if text:
            result.append(CommandLine(text=text, line=start))
    return result


def _tokenize(text: str) -> list[str]:
    lexer = shlex.shlex(PLACEHOLDER_RE.sub(_ARG, text), posix=True, punctuation_chars=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    tokens = []
    for token in lexer:
        if token.startswith("#"):
            break
        tokens.append(token)
    return tokens


def split_commands(tokens: list[str]) -> list[list[str]]:
    """Split a token stream at shell separators, dropping redirections."""
    commands: list[list[str]] = []
    current: list[str] = []
    skip_next = False
    for token in tokens:
        if skip_next:
            skip_next = False
            continue
        if token in SEPARATORS:
            if current:
                commands.append(current)
            current = []
        elif token in ("(", ")"):
            continue
        elif set(token) <= set("<>&"):
            # Redirection: drop the target and a leading file descriptor
            if current and current[-1].isdigit():
                current.pop()
            skip_next = True
        else:
            current.append(token)
    if current:
        commands.append(current)
    return commands


def _is_placeholder(token: str) -> bool:
    return token == _ARG or token.startswith("$")


def _positionals(value_flags: frozenset[str], args: list[str]) -> list[str]:
    positionals = []
    skip_next = False
    flags_done = False
    for arg in args:
        if skip_next:
            skip_next = False
            continue
        if flags_done or not arg.startswith("-") or arg == "-":
            positionals.append(arg)
        elif arg == "--":
            flags_done = True
        elif "=" not in arg and arg in value_flags:
            skip_next = True
    return positionals


def _has_selector(args: list[str]) -> bool:
    return any(
        arg in ("-l", "--selector") or arg.startswith("--selector=") or (arg.startswith("-l") and len(arg) > 2)
        for arg in args
    )


def _arity_message(sub: Subcommand, path: str, args: list[str], count: int) -> str | None:
    min_args = 0 if sub.selectable and _has_selector(args) else sub.min_args
    if count < min_args:
        return f"'{path}' expects at least {min_args} argument(s), got {count}"
    if sub.max_args is not None and count > sub.max_args:
        return f"'{path}' expects at most {sub.max_args} argument(s), got {count}"
    return None


def check_command(tokens: list[str], extra_tools: list[str] | None = None) -> list[tuple[str, Severity, str]]:
    """Check one command against the catalog.

    Returns:
        List of (code, severity, message)
    """
    while tokens and ENV_ASSIGN_RE.match(tokens[0]):
        tokens = tokens[1:]
    if not tokens:
        return []

    name = tokens[0]
    if _is_placeholder(name):
        return []
    tool = get_tool(name, extra_tools)
    if tool is None:
        return [("UNKNOWN_COMMAND", Severity.INFO, f"'{name}' is not a known command")]
    if tool.passthrough:
        return []

    args = tokens[1:]
    positionals = _positionals(tool.value_flags, args)
    if not positionals:
        return []

    sub = get_subcommand(tool, positionals[0])
    if sub is None:
        if _is_placeholder(positionals[0]):
            return []
        return [("UNKNOWN_SUBCOMMAND", Severity.ERROR, f"'{name} {positionals[0]}' is not a known subcommand")]
    path = f"{name} {sub.name}"
    depth = 1

    if sub.children:
        if len(positionals) < 2:
            return [("BAD_ARITY", Severity.ERROR, f"'{path}' requires a subcommand")]
        child = sub.children.get(positionals[1])
        if child is None:
            if _is_placeholder(positionals[1]):
                return []
            return [("UNKNOWN_SUBCOMMAND", Severity.ERROR, f"'{path} {positionals[1]}' is not a known subcommand")]
        sub = child
        path = f"{path} {child.name}"
        depth = 2

    if sub.switch_flags:
        # Re-read the arguments now that the subcommand's own switches are known
        positionals = _positionals(tool.value_flags - sub.switch_flags, args)
    rest = positionals[depth:]

    problems = []
    message = _arity_message(sub, path, args, len(rest))
    if message:
        problems.append(("BAD_ARITY", Severity.ERROR, message))

    if path == "helm rollback" and len(rest) >= 2:
        revision = rest[1]
        if not (revision.isdigit() or _is_placeholder(revision)):
            problems.append(("BAD_REVISION", Severity.ERROR, f"Rollback revision '{revision}' is not an integer"))

    if path == "kubectl port-forward":
        for mapping in rest[1:]:
            if not (PORT_MAPPING_RE.match(mapping) or _is_placeholder(mapping)):
                problems.append(
                    ("BAD_PORT_MAPPING", Severity.ERROR, f"Port mapping '{mapping}' must be PORT or LOCAL:REMOTE")
                )
    return problems


def check_shell(snippet: Snippet, context: LintContext) -> list[Finding]:
    """Check every command of a shell snippet."""
    findings = []
    for command_line in _logical_lines(snippet):
        try:
            tokens = _tokenize(command_line.text)
        except ValueError as e:
            findings.append(
                finding(snippet, "SHELL_SYNTAX", f"Cannot parse command: {e}", line=command_line.line)
            )
            continue
        for command in split_commands(tokens):
            for code, severity, message in check_command(command, context.config.extra_tools):
                findings.append(finding(snippet, code, message, severity=severity, line=command_line.line))
    return findings
