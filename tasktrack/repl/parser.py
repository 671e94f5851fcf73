"""
FILE: tasktrack/repl/parser.py
PURPOSE: Parse user input into commands and arguments for REPL
EXPORTS:
  - ParseResult (dataclass for parsed commands)
  - parse_command(input_str) -> ParseResult
DEPENDENCIES:
  - shlex (for shell-like parsing with quotes)
  - dataclasses (for ParseResult)
NOTES:
  - Handles quoted strings: set title "Plan the sprint"
  - Supports --flag value, --flag=value and short -o value flags
  - A lone "-" or a negative-looking "+3d" is a value, never a flag
  - Case-insensitive command names, with aliases resolved here
"""

import shlex
from dataclasses import dataclass, field
from typing import Dict, List, Union

# Alternative spellings accepted at the prompt
COMMAND_ALIASES = {
    "list": "ls",
    "view": "show",
    "complete": "done",
    "delete": "rm",
    "del": "rm",
    "submit": "save",
    "form": "buffer",
    "quit": "exit",
    "?": "help",
}

# Short flags and the long names they stand for
SHORT_FLAGS = {
    "t": "text",
    "o": "owner",
    "p": "priority",
    "s": "status",
    "d": "description",
}


@dataclass
class ParseResult:
    """
    Result of parsing a REPL command.

    Attributes:
        command: The command name (e.g., "new", "set", "filter")
        args: Positional arguments (e.g., ["title", "Plan sprint"])
        flags: Flag arguments as dict (e.g., {"owner": "ana", "json": True})
        raw_input: Original input string
        trailing_args: Positional arguments that came after a flag (also in args)
    """
    command: str
    args: List[str] = field(default_factory=list)
    flags: Dict[str, Union[str, bool]] = field(default_factory=dict)
    raw_input: str = ""
    trailing_args: List[str] = field(default_factory=list)

    def flag_text(self, name: str) -> Union[str, None]:
        """Value of a flag that expects text; a bare boolean flag counts as missing."""
        value = self.flags.get(name)
        return value if isinstance(value, str) else None


def _flag_name(token: str) -> Union[str, None]:
    if token.startswith("--") and len(token) > 2:
        return token[2:]
    if token.startswith("-") and len(token) == 2 and token[1].isalpha():
        return SHORT_FLAGS.get(token[1], token[1])
    return None


def parse_command(input_str: str) -> ParseResult:
    """
    Parse REPL input into command, args, and flags.

    Examples:
        >>> parse_command('set title "Plan sprint"')
        ParseResult(command="set", args=["title", "Plan sprint"], flags={})

        >>> parse_command("filter --owner carlos -s done")
        ParseResult(command="filter", args=[], flags={"owner": "carlos", "status": "done"})

        >>> parse_command("filter --text=deploy")
        ParseResult(command="filter", args=[], flags={"text": "deploy"})

        >>> parse_command("done 3,5")
        ParseResult(command="done", args=["3,5"], flags={})

    Args:
        input_str: Raw user input from REPL prompt

    Returns:
        ParseResult with command, args, and flags extracted

    Notes:
        - Command is always the first token (case-insensitive)
        - Boolean flags don't need values (--json sets json=True)
        - Quoted strings are treated as single args
        - Empty input returns command="" with no args/flags
    """
    input_str = input_str.strip()
    if not input_str:
        return ParseResult(command="", args=[], flags={}, raw_input=input_str)

    try:
        tokens = shlex.split(input_str)
    except ValueError:
        # Unclosed quote: fall back to plain whitespace split
        tokens = input_str.split()

    if not tokens:
        return ParseResult(command="", args=[], flags={}, raw_input=input_str)

    command = tokens[0].lower()
    command = COMMAND_ALIASES.get(command, command)

    args = []
    trailing_args = []
    flags = {}
    i = 1

    while i < len(tokens):
        token = tokens[i]
        name = _flag_name(token)

        if name is None:
            args.append(token)
            if flags:
                trailing_args.append(token)
            i += 1
            continue

        if "=" in name:
            name, value = name.split("=", 1)
            flags[name] = value
            i += 1
        elif i + 1 < len(tokens) and _flag_name(tokens[i + 1]) is None:
            flags[name] = tokens[i + 1]
            i += 2
        else:
            flags[name] = True
            i += 1

    return ParseResult(
        command=command,
        args=args,
        flags=flags,
        raw_input=input_str,
        trailing_args=trailing_args,
    )
