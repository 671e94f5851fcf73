"""
FILE: tasktrack/repl/commands/form.py
PURPOSE: Edit form handlers for REPL (new, edit, set, due, buffer, save, cancel)
NOTES:
  - The form is the session's edit buffer plus its pending due date
  - Nothing is written until 'save'; validation messages are shown after
    the command and cleared for the next one
"""

from rich.markup import escape

from ..parser import ParseResult
from ..display import display_buffer, display_listing
from ...core.exceptions import TaskNotFoundError
from ...formatting import parse_due_date, parse_priority, parse_task_id

NO_DATE = ("none", "clear", "-")


def _require_form(repl) -> bool:
    if not repl.form_open:
        repl.console.print("[red]Error:[/red] No form open")
        repl.console.print("[dim]Start one with 'new' or 'edit <task_id>'[/dim]")
        return False
    return True


def handle_new_command(result: ParseResult, repl) -> None:
    """
    Handle 'new' command - open a blank form.

    Usage:
        new
    """
    repl.workflow.prepare_create(repl.session)
    repl.form_open = True
    display_buffer(repl.session, repl.console)
    repl.console.print("[dim]Fill it with 'set <field> <value>' and 'due <date>', then 'save'[/dim]")


def handle_edit_command(result: ParseResult, repl) -> None:
    """
    Handle 'edit' command - open the form on a copy of a stored task.

    Usage:
        edit 5
    """
    if not result.args:
        repl.console.print("[red]Error:[/red] Task ID required")
        repl.console.print("[dim]Usage: edit <task_id>[/dim]")
        return

    task_id = parse_task_id(result.args[0])
    source = repl.workflow.find(task_id)
    if source is None:
        raise TaskNotFoundError(task_id)

    repl.workflow.prepare_edit(repl.session, source)
    repl.form_open = True
    display_buffer(repl.session, repl.console)


def handle_set_command(result: ParseResult, repl) -> None:
    """
    Handle 'set' command - change one form field.

    Usage:
        set title Plan sprint
        set description "Draft the backlog"
        set owner Ana
        set priority high
        set due +4d
    """
    if not _require_form(repl):
        return

    if len(result.args) < 2:
        repl.console.print("[red]Error:[/red] Field and value required")
        repl.console.print("[dim]Usage: set <title|description|owner|priority|due> <value>[/dim]")
        return

    field_name = result.args[0].lower()
    value = " ".join(result.args[1:])
    buffer = repl.session.edit_buffer

    if field_name == "title":
        buffer.title = value
    elif field_name == "description":
        buffer.description = value
    elif field_name == "owner":
        buffer.owner = value
    elif field_name == "priority":
        buffer.priority = parse_priority(value)
    elif field_name == "due":
        _set_due(repl, value)
        return
    else:
        repl.console.print(f"[red]Error:[/red] Unknown field '{field_name}'")
        repl.console.print("[dim]Fields: title, description, owner, priority, due[/dim]")
        return

    repl.console.print(f"[dim]{field_name} set[/dim]")


def _set_due(repl, value: str) -> None:
    if value.strip().lower() in NO_DATE:
        repl.session.pending_due_date = None
        repl.console.print("[dim]due date cleared[/dim]")
        return
    repl.session.pending_due_date = parse_due_date(value, repl.workflow.today())
    repl.console.print(f"[dim]due {repl.session.pending_due_date.isoformat()}[/dim]")


def handle_due_command(result: ParseResult, repl) -> None:
    """
    Handle 'due' command - set or clear the form's due date.

    Usage:
        due 2026-11-02
        due +3d
        due none
    """
    if not _require_form(repl):
        return

    if not result.args:
        repl.console.print("[red]Error:[/red] Date required")
        repl.console.print("[dim]Usage: due <YYYY-MM-DD|+Nd|today|tomorrow|none>[/dim]")
        return

    _set_due(repl, " ".join(result.args))


def handle_buffer_command(result: ParseResult, repl) -> None:
    """
    Handle 'buffer' command - show the form as it would be saved.

    Usage:
        buffer
    """
    if not _require_form(repl):
        return
    display_buffer(repl.session, repl.console)


def handle_save_command(result: ParseResult, repl) -> None:
    """
    Handle 'save' command - validate and save the form.

    On failure the form stays open and each distinct problem is listed once.

    Usage:
        save
    """
    if not _require_form(repl):
        return

    buffer = repl.session.edit_buffer
    is_new = buffer.id is None

    if not repl.workflow.submit_edit_buffer(repl.session):
        return

    repl.form_open = False
    verb = "Created" if is_new else "Updated"
    repl.console.print(f"[green]✓ {verb} task [bold]#{buffer.id}[/bold]:[/green] {escape(buffer.title)}")
    display_listing(repl.session, repl.console, "In progress", repl.workflow.today())


def handle_cancel_command(result: ParseResult, repl) -> None:
    """
    Handle 'cancel' command - discard the form.

    Usage:
        cancel
    """
    if not _require_form(repl):
        return
    repl.workflow.prepare_create(repl.session)
    repl.form_open = False
    repl.console.print("[dim]Form discarded[/dim]")
