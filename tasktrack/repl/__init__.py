"""
FILE: tasktrack/repl/__init__.py
PURPOSE: REPL package for interactive task management
EXPORTS:
  - main() (from repl.main)
  - run_repl() (from repl.main)
DEPENDENCIES:
  - prompt_toolkit (REPL interface)
  - rich (formatted output)
  - tasktrack.core.workflow (session-scoped workflow)
NOTES:
  - Entry point for interactive mode
  - Provides autocomplete and command history
"""

from .main import main, run_repl

__all__ = ["main", "run_repl"]
