"""
FILE: tasktrack/repl/commands/system.py
PURPOSE: System command handlers for REPL
"""

from ..parser import ParseResult


def handle_help_command(result: ParseResult, repl) -> None:
    """Handle 'help' command - show available commands."""
    console = repl.console
    console.print("\n[bold cyan]tasktrack REPL[/bold cyan]\n")

    console.print("[bold]Listing:[/bold]")
    console.print("  [green]ls[/green]                       Show tasks in progress")
    console.print("  [green]filter[/green] [dim]--id --text --owner --priority --status[/dim]")
    console.print("                           Query with criteria (no flags: re-run current)")
    console.print("  [green]clear[/green]                    Drop filter criteria")
    console.print("  [green]show[/green] <id>                Full task details")
    console.print("  [green]done[/green] <id(s)>             Mark task(s) as done")
    console.print("  [green]rm[/green] <id(s)>               Delete task(s)")
    console.print("  [green]quick[/green] <title> [dim]--description --owner --priority --due[/dim]")
    console.print("                           Create without the form (quote multi-word values)\n")

    console.print("[bold]Form:[/bold]")
    console.print("  [green]new[/green]                      Open a blank form")
    console.print("  [green]edit[/green] <id>                Open the form on a task")
    console.print("  [green]set[/green] <field> <value>      title, description, owner, priority, due")
    console.print("  [green]due[/green] <date>               YYYY-MM-DD, +Nd, today, tomorrow, none")
    console.print("  [green]buffer[/green]                   Show the form")
    console.print("  [green]save[/green]                     Validate and save")
    console.print("  [green]cancel[/green]                   Discard the form\n")

    console.print("[bold]Other:[/bold]")
    console.print("  [green]help[/green]                     Show this message")
    console.print("  [green]exit[/green] / [green]quit[/green]              Leave (or Ctrl+D)")
