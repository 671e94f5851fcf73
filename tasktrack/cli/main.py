"""
FILE: tasktrack/cli/main.py
PURPOSE: Typer-based CLI for one-shot task management commands
EXPORTS:
  - app (Typer application)
  - main() (entry point)
  - get_app_context(ctx) -> AppContext
  - version() - Show version
  - help() - Show command list and usage
  - repl() - Launch interactive REPL
  - config() - Show resolved datastore
  - add() - Create task
  - ls() - List in-progress tasks
  - filter() - List tasks matching criteria
  - done() - Complete task(s)
  - rm() - Delete task(s)
  - edit() - Update task fields
  - show() - View full task details
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output)
  - tasktrack.bootstrap (composition root)
  - tasktrack.core.workflow (SessionState, TaskWorkflow)
NOTES:
  - Each invocation is one workflow session
  - The store is built once per process, on first use, and closed on exit
  - Listing commands support --json and --raw flags
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
"""

import sys

# Fix Windows console encoding for Unicode characters
if sys.platform == "win32":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

import typer
from rich.console import Console
from rich.markup import escape

from ..bootstrap import AppContext, create_app
from ..core.exceptions import ConfigurationError

# Typer app setup
app = typer.Typer(
    name="tasktrack",
    help="Track tasks with owners, priorities and due dates",
    add_completion=False,
)

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)

# Version
__version__ = "0.1.0"


def get_app_context(ctx: typer.Context) -> AppContext:
    """
    Return the process-wide AppContext, building it on first use.

    Tests may pass a prebuilt context through CliRunner.invoke(obj=...).
    """
    root = ctx.find_root()
    if root.obj is None:
        try:
            root.obj = create_app()
        except ConfigurationError as e:
            error_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
            raise typer.Exit(1)
        root.call_on_close(root.obj.close)
    return root.obj


@app.callback(invoke_without_command=True)
def default_command(ctx: typer.Context):
    """
    Default callback - launches REPL when no command is specified.

    If a subcommand is invoked, this does nothing.
    """
    if ctx.invoked_subcommand is None:
        from ..repl import run_repl
        try:
            run_repl(get_app_context(ctx))
        except typer.Exit:
            raise
        except Exception as e:
            error_console.print(f"[red]Error starting REPL:[/red] {escape(str(e))}")
            raise typer.Exit(1)


# Import command modules to register commands with app
# Commands are decorated with @app.command() in their modules
from .commands import (  # noqa: E402
    # System commands
    version,
    help,
    repl,
    config,
    # Task commands
    add,
    ls,
    filter,
    done,
    rm,
    edit,
    show,
)


def main():
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
