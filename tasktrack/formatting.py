"""
FILE: tasktrack/formatting.py
PURPOSE: Shared formatting and input parsing for CLI and REPL
EXPORTS:
  - TaskFormatter: Class for formatting tasks
  - parse_task_ids: Parse comma-separated task IDs
  - parse_due_date: Parse ISO dates and relative "+Nd" offsets
  - parse_priority / parse_status: Resolve enum input
DEPENDENCIES:
  - rich (tables and panels)
  - json (stdlib)
  - tasktrack.core.models (Task, Priority, Status)
  - tasktrack.core.exceptions (InvalidInputError)
NOTES:
  - Centralized formatting logic for consistency
  - Used by both CLI and REPL
  - Parsers raise InvalidInputError with a message ready to show
"""

import json
import re
from datetime import date, timedelta
from typing import List, Optional

from rich.panel import Panel
from rich.markup import escape
from rich.table import Table

from .core.models import Task, Priority, Status
from .core.exceptions import InvalidInputError

PRIORITY_STYLES = {
    Priority.HIGH: "bold red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "dim",
}

STATUS_STYLES = {
    Status.IN_PROGRESS: "cyan",
    Status.DONE: "green",
}

_RELATIVE_DATE = re.compile(r"^\+(\d+)d?$")


def _styled(value, styles) -> str:
    if value is None:
        return "-"
    style = styles.get(value, "white")
    return f"[{style}]{value.label}[/{style}]"


class TaskFormatter:
    """Centralized task display formatting."""

    @staticmethod
    def create_table(tasks: List[Task], title: str = "Tasks", today: Optional[date] = None) -> Table:
        """
        Create Rich table for tasks.

        Args:
            tasks: List of tasks to display
            title: Table title
            today: Reference date for highlighting overdue tasks

        Returns:
            Rich Table object ready for display
        """
        if today is None:
            today = date.today()

        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", width=6, no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Owner", style="blue")
        table.add_column("Priority", width=8)
        table.add_column("Due", no_wrap=True)
        table.add_column("Status", width=11)

        for task in tasks:
            if task.due_date is None:
                due = "-"
            elif task.due_date < today and not task.is_done:
                due = f"[red]{task.due_date.isoformat()}[/red]"
            else:
                due = task.due_date.isoformat()

            table.add_row(
                str(task.id),
                escape(task.title or ""),
                escape(task.owner or "-"),
                _styled(task.priority, PRIORITY_STYLES),
                due,
                _styled(task.status, STATUS_STYLES),
            )

        return table

    @staticmethod
    def create_panel(task: Task, title: str = "") -> Panel:
        """Full details of one task."""
        lines = [
            f"[bold]{escape(task.title or '(untitled)')}[/bold]",
            "",
            escape(task.description) if task.description else "[dim](no description)[/dim]",
            "",
            f"[dim]Owner:[/dim]    {escape(task.owner or '-')}",
            f"[dim]Priority:[/dim] {_styled(task.priority, PRIORITY_STYLES)}",
            f"[dim]Due:[/dim]      {task.due_date.isoformat() if task.due_date else '-'}",
            f"[dim]Status:[/dim]   {_styled(task.status, STATUS_STYLES)}",
        ]
        if not title:
            title = f"Task #{task.id}" if task.id is not None else "New task"
        return Panel("\n".join(lines), title=title, expand=False)

    @staticmethod
    def to_json_array(tasks: List[Task]) -> str:
        """Convert task list to JSON array string."""
        return json.dumps([t.to_dict() for t in tasks], indent=2)

    @staticmethod
    def to_raw_lines(tasks: List[Task]) -> List[str]:
        """
        Convert task list to plain text lines.

        Returns:
            One "id: [x] title (owner, priority, due)" line per task
        """
        lines = []
        for task in tasks:
            status_marker = "x" if task.is_done else " "
            priority = task.priority.value if task.priority else "-"
            due = task.due_date.isoformat() if task.due_date else "-"
            lines.append(f"{task.id}: [{status_marker}] {task.title} ({task.owner}, {priority}, {due})")
        return lines


def parse_task_ids(id_string: str) -> List[int]:
    """
    Parse comma-separated task IDs.

    Args:
        id_string: Comma-separated string of IDs (e.g., "1,2,3")

    Returns:
        List of integers

    Raises:
        InvalidInputError: If any ID is not a valid integer
    """
    ids = [part.strip() for part in id_string.split(",")]
    try:
        return [int(part) for part in ids if part]
    except ValueError:
        raise InvalidInputError(f"Invalid task ID list: {id_string}")


def parse_task_id(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise InvalidInputError(f"Invalid task ID: {text}")


def parse_due_date(text: str, today: Optional[date] = None) -> date:
    """
    Parse a due date typed by the user.

    Accepts:
        2026-10-31   ISO date
        +3d / +3     three days from today
        today, tomorrow

    Raises:
        InvalidInputError: If the text is not a recognised date
    """
    if today is None:
        today = date.today()

    value = text.strip().lower()
    if value == "today":
        return today
    if value == "tomorrow":
        return today + timedelta(days=1)

    match = _RELATIVE_DATE.match(value)
    if match:
        return today + timedelta(days=int(match.group(1)))

    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidInputError(
            f"Invalid date '{text}'. Use YYYY-MM-DD, +Nd, today or tomorrow"
        )


def parse_priority(text: str) -> Priority:
    try:
        return Priority.parse(text)
    except ValueError as e:
        raise InvalidInputError(str(e))


def parse_status(text: str) -> Status:
    try:
        return Status.parse(text)
    except ValueError as e:
        raise InvalidInputError(str(e))
