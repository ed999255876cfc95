"""Utility functions for chartdoc."""

from chartdoc.utils.cmd import run_cmd, run_tool, set_show_commands

__all__ = [
    "run_cmd",
    "run_tool",
    "set_show_commands",
]
