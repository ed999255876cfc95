"""Command catalog for chartdoc."""

from chartdoc.catalog.commands import (
    TOOLS,
    Subcommand,
    Tool,
    get_subcommand,
    get_tool,
    is_known_command,
)

__all__ = [
    "TOOLS",
    "Subcommand",
    "Tool",
    "get_subcommand",
    "get_tool",
    "is_known_command",
]
