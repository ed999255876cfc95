"""External command execution with command echo."""

import shutil
import subprocess
from typing import Any

from rich.console import Console

console = Console(stderr=True)

# Global flag to control command display
_show_commands = True


def set_show_commands(show: bool) -> None:
    """Enable or disable command display."""
    global _show_commands
    _show_commands = show


def get_show_commands() -> bool:
    """Get current show_commands setting."""
    return _show_commands


def quote_arg(arg: str) -> str:
    """Quote argument if it contains spaces or special characters."""
    if " " in arg or any(c in arg for c in "'\"$\\"):
        return "'" + arg.replace("'", "'\\''") + "'"
    return arg


def which(tool: str) -> str | None:
    """Return the path of an executable on PATH, or None."""
    return shutil.which(tool)


def run_cmd(
    cmd: list[str],
    *,
    check: bool = True,
    capture_output: bool = True,
    text: bool = True,
    timeout: int | None = None,
    show: bool | None = None,
    **kwargs: Any,
) -> subprocess.CompletedProcess[str]:
    """Run a command with optional display.

    Args:
        cmd: Command and arguments as list
        check: Raise on non-zero exit code
        capture_output: Capture stdout/stderr
        text: Return text instead of bytes
        timeout: Timeout in seconds
        show: Override global show_commands setting
        **kwargs: Additional subprocess.run arguments

    Returns:
        CompletedProcess result
    """
    should_show = show if show is not None else _show_commands

    if should_show:
        cmd_str = " ".join(quote_arg(arg) for arg in cmd)
        console.print(f"[dim]$ {cmd_str}[/dim]")

    return subprocess.run(
        cmd,
        check=check,
        capture_output=capture_output,
        text=text,
        timeout=timeout,
        **kwargs,
    )


def run_tool(tool: str, args: list[str], *, timeout: int = 120) -> subprocess.CompletedProcess[str]:
    """Run an external tool without raising on a non-zero exit code.

    Args:
        tool: Executable name, looked up on PATH
        args: Arguments passed to the tool
        timeout: Timeout in seconds

    Returns:
        CompletedProcess result

    Raises:
        ValidationError: If the tool is not installed (TOOL_NOT_FOUND) or
            does not finish in time (TOOL_TIMEOUT)
    """
    from chartdoc.model.validation import ValidationError

    path = which(tool)
    if path is None:
        raise ValidationError("TOOL_NOT_FOUND", f"'{tool}' was not found on PATH")
    try:
        return run_cmd([tool, *args], check=False, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        raise ValidationError("TOOL_TIMEOUT", f"'{tool}' did not finish within {timeout}s") from e
