"""
FILE: tasktrack/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

# Export all command handlers for easy importing
from .tasks import (
    add,
    ls,
    filter,
    done,
    rm,
    edit,
    show,
)
from .system import (
    version,
    help,
    repl,
    config,
)

__all__ = [
    "add",
    "ls",
    "filter",
    "done",
    "rm",
    "edit",
    "show",
    "version",
    "help",
    "repl",
    "config",
]
