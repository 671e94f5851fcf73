"""
FILE: tasktrack/core/models.py
PURPOSE: Domain model for tasks
EXPORTS:
  - Priority (enum)
  - Status (enum)
  - Task (dataclass)
DEPENDENCIES:
  - dataclasses (stdlib)
  - datetime (stdlib)
  - enum (stdlib)
  - json (stdlib)
NOTES:
  - Task has from_row() for store row conversion and to_json() for output
  - Enum values are the strings persisted in the tasks table
  - Enum labels are what the UI shows
  - id is None until the store assigns one
"""

from dataclasses import dataclass, asdict, replace
from datetime import date
from enum import Enum
from typing import Optional
import json


class _LabeledEnum(str, Enum):
    """String enum whose members carry a display label."""

    def __new__(cls, value: str, label: str):
        member = str.__new__(cls, value)
        member._value_ = value
        member.label = label
        return member

    @classmethod
    def parse(cls, text: str):
        """
        Resolve user input to a member.

        Accepts the stored value ("InProgress"), the member name
        ("IN_PROGRESS") or the label ("In progress"), case-insensitively.
        Spaces, dashes and underscores are ignored.

        Raises:
            ValueError: If nothing matches
        """
        key = _normalize(text)
        for member in cls:
            if key in (_normalize(member.value), _normalize(member.name), _normalize(member.label)):
                return member
        options = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__.lower()} '{text}'. Must be one of: {options}")


def _normalize(text: str) -> str:
    return "".join(ch for ch in text.strip().lower() if ch not in " -_")


class Priority(_LabeledEnum):
    """Task priority levels."""

    HIGH = ("High", "High")
    MEDIUM = ("Medium", "Medium")
    LOW = ("Low", "Low")


class Status(_LabeledEnum):
    """Task lifecycle states. DONE is terminal."""

    IN_PROGRESS = ("InProgress", "In progress")
    DONE = ("Done", "Done")


@dataclass
class Task:
    """A tracked task with owner, priority and due date."""

    id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    owner: Optional[str] = None
    priority: Optional[Priority] = None
    due_date: Optional[date] = None
    status: Optional[Status] = None

    @classmethod
    def from_row(cls, row) -> "Task":
        """Convert a store row mapping to a Task object."""
        return cls(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            owner=row["owner"],
            priority=Priority(row["priority"]) if row["priority"] else None,
            due_date=row["due_date"],
            status=Status(row["status"]) if row["status"] else None,
        )

    def copy(self) -> "Task":
        """Return an independent copy with every field carried over."""
        return replace(self)

    @property
    def is_done(self) -> bool:
        return self.status is Status.DONE

    def to_dict(self) -> dict:
        """Plain dict with dates as ISO-8601 and enums as their stored values."""
        data = asdict(self)
        data["priority"] = self.priority.value if self.priority else None
        data["status"] = self.status.value if self.status else None
        data["due_date"] = self.due_date.isoformat() if self.due_date else None
        return data

    def to_json(self) -> str:
        """Serialize task to JSON string."""
        return json.dumps(self.to_dict(), indent=2)
