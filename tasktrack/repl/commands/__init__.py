"""
FILE: tasktrack/repl/commands/__init__.py
PURPOSE: REPL command handler modules
"""

# Export all command handlers for easy importing
from .tasks import (
    handle_ls_command,
    handle_filter_command,
    handle_clear_command,
    handle_done_command,
    handle_rm_command,
    handle_show_command,
    handle_quick_command,
)
from .form import (
    handle_new_command,
    handle_edit_command,
    handle_set_command,
    handle_due_command,
    handle_buffer_command,
    handle_save_command,
    handle_cancel_command,
)
from .system import (
    handle_help_command,
)

__all__ = [
    "handle_ls_command",
    "handle_filter_command",
    "handle_clear_command",
    "handle_done_command",
    "handle_rm_command",
    "handle_show_command",
    "handle_quick_command",
    "handle_new_command",
    "handle_edit_command",
    "handle_set_command",
    "handle_due_command",
    "handle_buffer_command",
    "handle_save_command",
    "handle_cancel_command",
    "handle_help_command",
]
