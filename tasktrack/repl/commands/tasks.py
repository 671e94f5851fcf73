"""
FILE: tasktrack/repl/commands/tasks.py
PURPOSE: Listing and task action handlers for REPL
"""

from rich.markup import escape

from ..parser import ParseResult
from ..display import display_listing
from ...core.workflow import FilterCriteria
from ...core.exceptions import TaskNotFoundError
from ...formatting import (
    TaskFormatter,
    parse_due_date,
    parse_priority,
    parse_status,
    parse_task_id,
    parse_task_ids,
)


def _require_ids(result: ParseResult, repl, usage: str):
    if not result.args:
        repl.console.print("[red]Error:[/red] Task ID required")
        repl.console.print(f"[dim]Usage: {usage}[/dim]")
        return None
    return parse_task_ids(",".join(result.args))


def handle_ls_command(result: ParseResult, repl) -> None:
    """
    Handle 'ls' command - show in-progress tasks.

    Usage:
        ls
    """
    repl.workflow.list_default(repl.session)
    display_listing(repl.session, repl.console, "In progress", repl.workflow.today())


def handle_filter_command(result: ParseResult, repl) -> None:
    """
    Handle 'filter' command - query the store with the session criteria.

    With flags, the criteria are replaced by exactly the flags given.
    Without flags, the current criteria are re-applied.

    Usage:
        filter --text deploy
        filter --owner carlos --status done
        filter
    """
    if result.flags:
        task_id = result.flag_text("id")
        priority = result.flag_text("priority")
        status = result.flag_text("status")
        repl.session.criteria = FilterCriteria(
            task_id=parse_task_id(task_id) if task_id else None,
            text=result.flag_text("text"),
            owner=result.flag_text("owner"),
            priority=parse_priority(priority) if priority else None,
            status=parse_status(status) if status else None,
        )

    repl.workflow.apply_filter(repl.session)
    title = repl.session.criteria.describe() or "All tasks"
    display_listing(repl.session, repl.console, title, repl.workflow.today())


def handle_clear_command(result: ParseResult, repl) -> None:
    """
    Handle 'clear' command - drop the filter criteria and show the default listing.

    Usage:
        clear
    """
    repl.workflow.clear_filter(repl.session)
    repl.workflow.list_default(repl.session)
    repl.console.print("[dim]Filter cleared[/dim]")
    display_listing(repl.session, repl.console, "In progress", repl.workflow.today())


def handle_done_command(result: ParseResult, repl) -> None:
    """
    Handle 'done' command - complete one or more tasks.

    Usage:
        done 5
        done 3,5,7
    """
    task_ids = _require_ids(result, repl, "done <task_id(s)>")
    if task_ids is None:
        return

    for task_id in task_ids:
        if repl.workflow.complete(repl.session, task_id):
            repl.console.print(f"[green]✓[/green] Completed task [bold]#{task_id}[/bold]")
        else:
            repl.console.print(f"[dim]Task #{task_id}: nothing to complete[/dim]")


def handle_rm_command(result: ParseResult, repl) -> None:
    """
    Handle 'rm' command - delete one or more tasks.

    Usage:
        rm 5
        rm 3,5,7
    """
    task_ids = _require_ids(result, repl, "rm <task_id(s)>")
    if task_ids is None:
        return

    for task_id in task_ids:
        existing = repl.workflow.find(task_id)
        repl.workflow.remove(repl.session, task_id)
        if existing is None:
            repl.console.print(f"[dim]Task #{task_id}: nothing to delete[/dim]")
        else:
            repl.console.print(f"[green]✓[/green] Deleted: {escape(existing.title)}")


def handle_show_command(result: ParseResult, repl) -> None:
    """
    Handle 'show' command - full details of one task.

    Usage:
        show 5
    """
    if not result.args:
        repl.console.print("[red]Error:[/red] Task ID required")
        repl.console.print("[dim]Usage: show <task_id>[/dim]")
        return

    task_id = parse_task_id(result.args[0])
    task = repl.workflow.find(task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    repl.console.print(TaskFormatter.create_panel(task))


def handle_quick_command(result: ParseResult, repl) -> None:
    """
    Handle 'quick' command - create a task straight from the list, without the form.

    Fields are not validated here; a missing field is rejected by the store.

    Usage:
        quick "Plan sprint" --description "Draft backlog" --owner Ana --priority High --due +4d
    """
    if not result.args:
        repl.console.print("[red]Error:[/red] Task title required")
        repl.console.print("[dim]Usage: quick <title> --description D --owner O --priority P --due DATE[/dim]")
        return

    if result.trailing_args:
        stray = " ".join(result.trailing_args)
        repl.console.print(f"[red]Error:[/red] Unexpected words after flags: {escape(stray)}")
        repl.console.print('[dim]Quote multi-word values, e.g. --description "Draft backlog"[/dim]')
        return

    task = repl.session.active_task
    task.title = " ".join(result.args)
    task.description = result.flag_text("description")
    task.owner = result.flag_text("owner")
    priority = result.flag_text("priority")
    task.priority = parse_priority(priority) if priority else None
    due = result.flag_text("due")
    repl.session.pending_due_date = parse_due_date(due, repl.workflow.today()) if due else None

    created = repl.workflow.create(repl.session)
    repl.console.print(f"[green]✓ Created task [bold]#{created.id}[/bold]:[/green] {escape(created.title)}")
