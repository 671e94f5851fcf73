"""
FILE: tasktrack/core/validation.py
PURPOSE: Field-level validation rules for tasks
EXPORTS:
  - Violation (dataclass)
  - validate_task(task, today) -> List[Violation]
DEPENDENCIES:
  - dataclasses (stdlib)
  - datetime (stdlib)
  - tasktrack.core.models (Task)
  - tasktrack.core.constants (field limits)
NOTES:
  - Pure function: no store access, no UI message handling
  - One violation per failing rule, reported in field order
  - The due date rule uses `today` at the moment of the call, so a task whose
    due date lapsed after it was saved is only rejected when re-submitted
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from .models import Task
from .constants import TITLE_MAX_LENGTH, DESCRIPTION_MAX_LENGTH, OWNER_MAX_LENGTH


@dataclass(frozen=True)
class Violation:
    """A single failed rule: which field, and the message to show."""

    field: str
    message: str


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _check_text(
    violations: List[Violation],
    field: str,
    value: Optional[str],
    max_length: int,
    blank_message: str,
    length_message: str,
) -> None:
    if _is_blank(value):
        violations.append(Violation(field, blank_message))
    elif len(value) > max_length:
        violations.append(Violation(field, length_message))


def validate_task(task: Task, today: Optional[date] = None) -> List[Violation]:
    """
    Check every field rule against a task.

    Args:
        task: Task to check (typically the workflow's edit buffer)
        today: Reference date for the due date rule (defaults to date.today())

    Returns:
        List of violations, empty when the task is valid
    """
    if today is None:
        today = date.today()

    violations: List[Violation] = []

    _check_text(
        violations, "title", task.title, TITLE_MAX_LENGTH,
        "Enter the task title.",
        f"The title must be at most {TITLE_MAX_LENGTH} characters.",
    )
    _check_text(
        violations, "description", task.description, DESCRIPTION_MAX_LENGTH,
        "Enter the task description.",
        f"The description must be at most {DESCRIPTION_MAX_LENGTH} characters.",
    )
    _check_text(
        violations, "owner", task.owner, OWNER_MAX_LENGTH,
        "Enter the task owner.",
        f"The owner must be at most {OWNER_MAX_LENGTH} characters.",
    )

    if task.priority is None:
        violations.append(Violation("priority", "Select a priority."))

    if task.due_date is None:
        violations.append(Violation("due_date", "Enter the due date."))
    elif task.due_date < today:
        violations.append(Violation("due_date", "The due date cannot be in the past."))

    if task.status is None:
        violations.append(Violation("status", "Enter the task status."))

    return violations
