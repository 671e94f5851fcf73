"""
FILE: tasktrack/repl/completer.py
PURPOSE: Autocomplete logic for REPL commands and arguments
EXPORTS:
  - TaskTrackCompleter (Completer for command/arg completion)
  - create_completer() -> TaskTrackCompleter
DEPENDENCIES:
  - prompt_toolkit.completion (Completer, Completion)
  - tasktrack.core.constants (reference lists)
NOTES:
  - Suggests command names when at start of line
  - Suggests form field names after "set"
  - Suggests priority/status values and owner names where they fit
  - Suggests flags after "filter" and "quick"
  - Suggests date shortcuts after "due" and "set due"
  - Case-insensitive matching
"""

from typing import Iterable, List

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from ..core.constants import PRIORITY_OPTIONS, STATUS_OPTIONS, OWNER_SUGGESTIONS


class TaskTrackCompleter(Completer):
    """
    Custom completer for the tasktrack REPL.

    Provides context-aware autocomplete:
    - Command names at start of input
    - Field names after "set"
    - Values after fields and flags that take enumerated input
    """

    # Available commands
    COMMANDS = [
        "ls", "filter", "clear", "done", "rm", "show", "quick",
        "new", "edit", "set", "due", "buffer", "save", "cancel",
        "help", "exit", "quit",
    ]

    # Fields editable with "set"
    FORM_FIELDS = ["title", "description", "owner", "priority", "due"]

    # Command-specific flags
    COMMAND_FLAGS = {
        "filter": ["--id", "--text", "--owner", "--priority", "--status"],
        "quick": ["--description", "--owner", "--priority", "--due"],
    }

    DATE_SHORTCUTS = ["today", "tomorrow", "+1d", "+3d", "+7d"]

    PRIORITY_VALUES = [p.value for p in PRIORITY_OPTIONS]
    STATUS_VALUES = [s.value for s in STATUS_OPTIONS]
    OWNER_VALUES = list(OWNER_SUGGESTIONS)

    # Values offered after a field name or flag
    VALUE_SOURCES = {
        "priority": PRIORITY_VALUES,
        "--priority": PRIORITY_VALUES,
        "--status": STATUS_VALUES,
        "owner": OWNER_VALUES,
        "--owner": OWNER_VALUES,
        "due": DATE_SHORTCUTS,
        "--due": DATE_SHORTCUTS,
    }

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on current input.

        Args:
            document: Current document with cursor position
            complete_event: Event that triggered completion

        Yields:
            Completion objects for matching suggestions
        """
        text = document.text_before_cursor
        words = text.split()

        # Trailing space means the user finished the last word
        if text.endswith(" ") or not words:
            current = ""
            previous = words
        else:
            current = words[-1]
            previous = words[:-1]

        if not previous:
            yield from self._matches(self.COMMANDS, current)
            return

        command = previous[0].lower()
        last = previous[-1].lower()

        if command == "set" and len(previous) == 1:
            yield from self._matches(self.FORM_FIELDS, current)
            return

        if command == "due" and len(previous) == 1:
            yield from self._matches(self.DATE_SHORTCUTS, current)
            return

        if last in self.VALUE_SOURCES and (command == "set" or last.startswith("--")):
            yield from self._matches(self.VALUE_SOURCES[last], current)
            return

        flags = self.COMMAND_FLAGS.get(command, [])
        if flags and (current.startswith("-") or not current):
            yield from self._matches(flags, current)

    @staticmethod
    def _matches(options: List[str], current: str) -> Iterable[Completion]:
        lowered = current.lower()
        for option in options:
            if option.lower().startswith(lowered):
                yield Completion(option, start_position=-len(current))


def create_completer() -> TaskTrackCompleter:
    """
    Create completer instance for REPL.

    Returns:
        Configured TaskTrackCompleter
    """
    return TaskTrackCompleter()
