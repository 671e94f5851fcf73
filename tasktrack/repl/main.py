"""
FILE: tasktrack/repl/main.py
PURPOSE: Interactive REPL for task management with prompt-toolkit
EXPORTS:
  - ReplContext - Per-run state (app wiring + one workflow session)
  - execute_command(result, repl) -> bool
  - run_repl(app_context) - Main REPL loop
  - main() - Standalone entry point
DEPENDENCIES:
  - prompt_toolkit (REPL interface, history, completion)
  - rich (formatted output)
  - tasktrack.bootstrap (composition root for standalone runs)
  - tasktrack.core.workflow (SessionState)
  - tasktrack.repl.parser (command parsing)
  - tasktrack.repl.completer (autocomplete)
NOTES:
  - One SessionState lives for the whole REPL run: the edit form, the
    filter criteria and the current listing survive between commands
  - Messages collected during a command are shown, then drained, after it
  - Bottom toolbar shows the in-progress count and the active filter
  - Ctrl+D or "exit"/"quit" to exit
  - Non-TTY input falls back to plain input()
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.formatted_text.html import html_escape
from prompt_toolkit.history import InMemoryHistory
from rich.console import Console
from rich.markup import escape

from ..bootstrap import AppContext, create_app
from ..core.exceptions import TaskTrackError, ConfigurationError
from ..core.workflow import SessionState, TaskWorkflow
from .parser import parse_command, ParseResult
from .completer import create_completer

logger = logging.getLogger(__name__)


@dataclass
class ReplContext:
    """
    State for one REPL run.

    Attributes:
        app: Wired settings, store and workflow
        session: The workflow session shown at the prompt
        console: Rich console for output (swappable in tests)
        form_open: Whether the edit form was started with new/edit
    """
    app: AppContext
    session: SessionState = field(default_factory=SessionState)
    console: Console = field(default_factory=Console)
    form_open: bool = False

    @property
    def workflow(self) -> TaskWorkflow:
        return self.app.workflow

    def form_label(self) -> Optional[str]:
        if not self.form_open:
            return None
        task_id = self.session.edit_buffer.id
        return f"editing #{task_id}" if task_id is not None else "new"

    def get_prompt(self) -> str:
        """
        Generate prompt string based on current context.

        Returns:
            Prompt like "tasktrack> " or "tasktrack:[new]> "
        """
        label = self.form_label()
        if label:
            return f"tasktrack:[{label}]> "
        return "tasktrack> "

    def flush_messages(self) -> None:
        """Show collected messages and start a new display cycle."""
        for message in self.session.messages.drain():
            self.console.print(f"[red]Error:[/red] {escape(message.text)}")


def format_prompt(repl: ReplContext) -> HTML:
    """Formatted prompt text with the form state in color."""
    label = repl.form_label()
    if label:
        return HTML(f"<b>tasktrack:[<ansiyellow>{label}</ansiyellow>]&gt; </b>")
    return HTML("<b>tasktrack&gt; </b>")


def get_bottom_toolbar(repl: ReplContext) -> HTML:
    """Toolbar with the in-progress count and the active filter."""
    in_progress = sum(1 for t in repl.session.listing if not t.is_done)
    criteria = repl.session.criteria.describe() or "none"
    text = f"{len(repl.session.listing)} shown ({in_progress} in progress) | filter: {criteria}"
    return HTML(f"<style bg='#444444' fg='#ffffff'> {html_escape(text)} </style>")


# Import command handlers from command modules
from .commands import (  # noqa: E402
    # Task handlers
    handle_ls_command,
    handle_filter_command,
    handle_clear_command,
    handle_done_command,
    handle_rm_command,
    handle_show_command,
    handle_quick_command,
    # Form handlers
    handle_new_command,
    handle_edit_command,
    handle_set_command,
    handle_due_command,
    handle_buffer_command,
    handle_save_command,
    handle_cancel_command,
    # System handlers
    handle_help_command,
)

HANDLERS = {
    "ls": handle_ls_command,
    "filter": handle_filter_command,
    "clear": handle_clear_command,
    "done": handle_done_command,
    "rm": handle_rm_command,
    "show": handle_show_command,
    "quick": handle_quick_command,
    "new": handle_new_command,
    "edit": handle_edit_command,
    "set": handle_set_command,
    "due": handle_due_command,
    "buffer": handle_buffer_command,
    "save": handle_save_command,
    "cancel": handle_cancel_command,
    "help": handle_help_command,
}


def execute_command(result: ParseResult, repl: ReplContext) -> bool:
    """
    Execute a parsed command.

    Args:
        result: Parsed command from parser
        repl: Current REPL state

    Returns:
        True to continue REPL loop, False to exit
    """
    command = result.command

    if command == "exit":
        repl.console.print("[dim]Goodbye![/dim]")
        return False

    # Empty command (just Enter pressed)
    if not command:
        return True

    handler = HANDLERS.get(command)
    if handler is None:
        repl.console.print(f"[red]Unknown command:[/red] {command}")
        repl.console.print("[dim]Type 'help' for available commands[/dim]")
        repl.console.print()
        return True

    try:
        handler(result, repl)
    except TaskTrackError as e:
        repl.console.print(f"[red]Error:[/red] {escape(str(e))}")
    finally:
        repl.flush_messages()

    # Add whitespace after command output for readability
    repl.console.print()
    return True


def run_repl(app_context: AppContext, console: Optional[Console] = None) -> None:
    """
    Main REPL loop.

    Sets up prompt_toolkit session with:
    - Command history (in-memory, not persisted)
    - Autocomplete (commands, fields, flags, enum values)
    - Prompt showing whether the edit form is open

    Exits on:
    - Ctrl+D (EOFError)
    - "exit" or "quit" commands
    """
    repl = ReplContext(app=app_context, console=console or Console())
    repl.workflow.initialize(repl.session)

    has_tty = sys.stdin.isatty() and sys.stdout.isatty()
    session = None
    use_simple_input = not has_tty

    if has_tty:
        try:
            session = PromptSession(
                history=InMemoryHistory(),
                completer=create_completer(),
                complete_while_typing=True,
                bottom_toolbar=lambda: get_bottom_toolbar(repl),
            )
        except Exception as e:
            repl.console.print(f"[yellow]Warning:[/yellow] Running in simple input mode: {e}")
            use_simple_input = True

    repl.console.print("[bold cyan]tasktrack REPL[/bold cyan] - Type 'help' for commands, 'exit' to quit")
    if use_simple_input:
        repl.console.print("[dim](Running in simple mode - no autocomplete)[/dim]")
    repl.console.print()

    while True:
        try:
            if use_simple_input or session is None:
                user_input = input(repl.get_prompt())
            else:
                user_input = session.prompt(lambda: format_prompt(repl))

            if not execute_command(parse_command(user_input), repl):
                break

        except KeyboardInterrupt:
            repl.console.print("[dim]^C (Press Ctrl+D or type 'exit' to quit)[/dim]")
            continue
        except EOFError:
            repl.console.print()
            repl.console.print("[dim]Goodbye![/dim]")
            break
        except Exception as e:
            # Unexpected error - show but don't crash
            logger.exception("Unhandled REPL error")
            repl.console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")


def main() -> None:
    """
    Standalone entry point for REPL mode.

    Builds the application once, runs the loop, closes the store.
    """
    console = Console()
    try:
        app_context = create_app()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        sys.exit(1)

    try:
        run_repl(app_context, console)
    finally:
        app_context.close()


if __name__ == "__main__":
    main()
