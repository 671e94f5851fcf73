"""
FILE: tasktrack/repl/display.py
PURPOSE: Display functions for the listing and the edit form
EXPORTS:
  - display_listing() - Show the session's cached listing
  - display_buffer() - Show the edit form contents
DEPENDENCIES:
  - rich (formatted output)
  - tasktrack.formatting (TaskFormatter)
  - tasktrack.core.workflow (SessionState)
"""

from datetime import date

from rich.console import Console

from ..core.workflow import SessionState
from ..formatting import TaskFormatter


def display_listing(session: SessionState, console: Console, title: str, today: date) -> None:
    """
    Display the session listing in a table.

    Args:
        session: Session whose listing to show
        console: Rich console to print to
        title: Table title (e.g. "In progress" or the filter summary)
        today: Reference date for overdue highlighting
    """
    if not session.listing:
        console.print("[dim]No tasks found[/dim]")
        return

    console.print(TaskFormatter.create_table(session.listing, title=title, today=today))


def display_buffer(session: SessionState, console: Console) -> None:
    """Show the edit buffer with the pending due date in place of its own."""
    preview = session.edit_buffer.copy()
    preview.due_date = session.pending_due_date
    title = f"Editing #{preview.id}" if preview.id is not None else "New task"
    console.print(TaskFormatter.create_panel(preview, title=title))
