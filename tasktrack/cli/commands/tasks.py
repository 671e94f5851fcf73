"""
FILE: tasktrack/cli/commands/tasks.py
PURPOSE: Task management commands (add, ls, filter, done, rm, edit, show)
"""

from typing import List, Optional

import typer
from rich.markup import escape

from ..main import app, console, error_console, get_app_context
from ...core.exceptions import (
    TaskTrackError,
    TaskNotFoundError,
    InvalidInputError,
)
from ...core.models import Task
from ...core.workflow import FilterCriteria, SessionState
from ...formatting import (
    TaskFormatter,
    parse_due_date,
    parse_priority,
    parse_status,
    parse_task_ids,
)


def _print_tasks(tasks: List[Task], title: str, json_output: bool, raw: bool, today) -> None:
    if json_output:
        console.print_json(TaskFormatter.to_json_array(tasks))
    elif raw:
        for line in TaskFormatter.to_raw_lines(tasks):
            console.print(line, markup=False, highlight=False)
    else:
        if not tasks:
            console.print("[dim]No tasks found[/dim]")
            return
        console.print(TaskFormatter.create_table(tasks, title=title, today=today))
        console.print(f"\n[dim]Total: {len(tasks)} task(s)[/dim]")


def _print_messages(session: SessionState) -> None:
    for message in session.messages.drain():
        error_console.print(f"[red]Error:[/red] {message.text}")


@app.command()
def add(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Task title"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Task description"),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Person responsible"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="High, Medium or Low"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date: YYYY-MM-DD, +Nd, today, tomorrow"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a new task. New tasks always start in progress.

    Example:
        tasktrack add "Plan sprint" -d "Draft backlog" -o Ana -p High --due +4d
    """
    try:
        workflow = get_app_context(ctx).workflow
        session = SessionState()
        workflow.prepare_create(session)

        task = session.edit_buffer
        task.title = title
        task.description = description
        task.owner = owner
        task.priority = parse_priority(priority) if priority else None
        session.pending_due_date = parse_due_date(due, workflow.today()) if due else None

        if not workflow.submit_edit_buffer(session):
            _print_messages(session)
            raise typer.Exit(1)

        if json_output:
            console.print_json(task.to_json())
        elif raw:
            console.print(f"{task.id}: {task.title}", markup=False, highlight=False)
        else:
            console.print(f"[green]✓ Created task [bold]#{task.id}[/bold]:[/green] {escape(task.title)}")

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except TaskTrackError as e:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def ls(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List tasks that are still in progress.

    Example:
        tasktrack ls
        tasktrack ls --json
    """
    try:
        workflow = get_app_context(ctx).workflow
        session = SessionState()
        workflow.initialize(session)
        _print_tasks(session.listing, "In progress", json_output, raw, workflow.today())
    except TaskTrackError as e:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def filter(
    ctx: typer.Context,
    task_id: Optional[int] = typer.Option(None, "--id", help="Exact task ID"),
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Text in title or description"),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Owner (case-insensitive, exact)"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="High, Medium or Low"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="InProgress or Done"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List tasks matching every given criterion (done tasks included).

    Example:
        tasktrack filter --text sprint
        tasktrack filter --owner CARLOS
        tasktrack filter -p low -s inprogress
    """
    try:
        workflow = get_app_context(ctx).workflow
        session = SessionState()
        session.criteria = FilterCriteria(
            task_id=task_id,
            text=text,
            owner=owner,
            priority=parse_priority(priority) if priority else None,
            status=parse_status(status) if status else None,
        )
        workflow.apply_filter(session)

        title = session.criteria.describe() or "All tasks"
        _print_tasks(session.listing, title, json_output, raw, workflow.today())

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except TaskTrackError as e:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def done(
    ctx: typer.Context,
    task_ids: str = typer.Argument(..., help="Task ID(s) to complete (comma-separated)"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Mark one or more tasks as done.

    Completing a task that is already done, or doesn't exist, changes nothing.

    Example:
        tasktrack done 5
        tasktrack done 3,5,7
    """
    try:
        workflow = get_app_context(ctx).workflow
        session = SessionState()

        for task_id in parse_task_ids(task_ids):
            if workflow.complete(session, task_id):
                if raw:
                    console.print(f"Completed: {task_id}", markup=False, highlight=False)
                else:
                    console.print(f"[green]✓[/green] Completed task [bold]#{task_id}[/bold]")
            elif not raw:
                console.print(f"[dim]Task #{task_id}: nothing to complete[/dim]")

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except TaskTrackError as e:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def rm(
    ctx: typer.Context,
    task_ids: str = typer.Argument(..., help="Task ID(s) to delete (comma-separated)"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Delete one or more tasks. Unknown IDs are ignored.

    Example:
        tasktrack rm 5
        tasktrack rm 3,5,7
    """
    try:
        workflow = get_app_context(ctx).workflow
        session = SessionState()

        for task_id in parse_task_ids(task_ids):
            existing = workflow.find(task_id)
            workflow.remove(session, task_id)
            if existing is None:
                if not raw:
                    console.print(f"[dim]Task #{task_id}: nothing to delete[/dim]")
            elif raw:
                console.print(f"Deleted: {task_id}", markup=False, highlight=False)
            else:
                console.print(f"[green]✓[/green] Deleted: {escape(existing.title)}")

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except TaskTrackError as e:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def edit(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="Task ID"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="New owner"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="High, Medium or Low"),
    due: Optional[str] = typer.Option(None, "--due", help="New due date"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Change fields of an existing task. Omitted fields keep their value.

    The whole task is validated again, so a task whose due date has passed
    needs a new --due before other edits are accepted.

    Example:
        tasktrack edit 5 --title "Plan sprint 12" --due 2026-11-02
    """
    try:
        workflow = get_app_context(ctx).workflow
        session = SessionState()

        source = workflow.find(task_id)
        if source is None:
            raise TaskNotFoundError(task_id)

        workflow.prepare_edit(session, source)
        task = session.edit_buffer
        if title is not None:
            task.title = title
        if description is not None:
            task.description = description
        if owner is not None:
            task.owner = owner
        if priority is not None:
            task.priority = parse_priority(priority)
        if due is not None:
            session.pending_due_date = parse_due_date(due, workflow.today())

        if not workflow.submit_edit_buffer(session):
            _print_messages(session)
            raise typer.Exit(1)

        if json_output:
            console.print_json(task.to_json())
        else:
            console.print(f"[green]✓ Updated task [bold]#{task.id}[/bold]:[/green] {escape(task.title)}")

    except (TaskNotFoundError, InvalidInputError) as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except TaskTrackError as e:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def show(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="Task ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    View full task details.

    Example:
        tasktrack show 5
    """
    try:
        task = get_app_context(ctx).workflow.find(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)

        if json_output:
            console.print_json(task.to_json())
        else:
            console.print(TaskFormatter.create_panel(task))

    except TaskNotFoundError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except TaskTrackError as e:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
