"""
FILE: tasktrack/core/workflow.py
PURPOSE: Session-scoped editing and filtering workflow over the task store
EXPORTS:
  - Message (dataclass)
  - MessageChannel (deduplicating user message list)
  - FilterCriteria (dataclass)
  - SessionState (dataclass)
  - TaskWorkflow (class)
      - initialize(session)
      - create(session) / update(session)
      - remove(session, task_id)
      - complete(session, task_id)
      - list_default(session)
      - apply_filter(session) / clear_filter(session)
      - prepare_create(session) / prepare_edit(session, source)
      - submit_edit_buffer(session) -> bool
      - find(task_id) -> Task | None
      - today() -> date
DEPENDENCIES:
  - tasktrack.core.repository (TaskStore)
  - tasktrack.core.models (Task, Status)
  - tasktrack.core.validation (validate_task)
NOTES:
  - SessionState is built by the hosting layer (REPL run, CLI invocation)
    and passed into every operation; the workflow keeps no session state
  - Active task and edit buffer are always independent copies, never
    records from the listing
  - Not-found ids on remove/complete are no-ops
  - Validation failures become user messages, not exceptions
  - The default listing is every IN_PROGRESS task, filtered in Python
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional

from .models import Task, Priority, Status
from .constants import DEFAULT_STATUS, DEFAULT_LISTING_STATUS
from .repository import TaskStore
from .validation import validate_task

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Message:
    """A user-visible message."""

    text: str


class MessageChannel:
    """
    Ordered user-visible messages for one display cycle.

    An exact duplicate text is ignored, so repeated failed submissions
    don't pile up the same warning. The UI calls drain() after showing
    the messages, which starts a new cycle.
    """

    def __init__(self) -> None:
        self._messages: List[Message] = []

    def add(self, text: str) -> bool:
        """Add a message unless the same text is already present. Returns True if added."""
        if any(m.text == text for m in self._messages):
            return False
        self._messages.append(Message(text))
        return True

    def texts(self) -> List[str]:
        return [m.text for m in self._messages]

    def drain(self) -> List[Message]:
        """Return all messages and clear the channel."""
        messages, self._messages = self._messages, []
        return messages

    def __len__(self) -> int:
        return len(self._messages)


@dataclass
class FilterCriteria:
    """Optional predicates for apply_filter. None means no constraint."""

    task_id: Optional[int] = None
    text: Optional[str] = None
    owner: Optional[str] = None
    priority: Optional[Priority] = None
    status: Optional[Status] = None

    def is_empty(self) -> bool:
        return (
            self.task_id is None
            and not (self.text or "").strip()
            and not (self.owner or "").strip()
            and self.priority is None
            and self.status is None
        )

    def describe(self) -> str:
        """Short human-readable summary, e.g. "owner=ana | status=Done"."""
        parts = []
        if self.task_id is not None:
            parts.append(f"id={self.task_id}")
        if self.text:
            parts.append(f"text={self.text}")
        if self.owner:
            parts.append(f"owner={self.owner}")
        if self.priority is not None:
            parts.append(f"priority={self.priority.value}")
        if self.status is not None:
            parts.append(f"status={self.status.value}")
        return " | ".join(parts)


@dataclass
class SessionState:
    """
    Everything one user session shows or edits.

    Attributes:
        active_task: Target of the primary list actions (create/update)
        edit_buffer: Target of the create/edit form
        listing: Cached query result shown to the UI
        criteria: Current filter criteria
        pending_due_date: Due date bound to the edit form, applied on submit
        messages: User-visible message channel
        initialized: Whether the first listing was loaded
    """

    active_task: Task = field(default_factory=Task)
    edit_buffer: Task = field(default_factory=Task)
    listing: List[Task] = field(default_factory=list)
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    pending_due_date: Optional[date] = None
    messages: MessageChannel = field(default_factory=MessageChannel)
    initialized: bool = False


class TaskWorkflow:
    """
    Mediates between a UI session and the task store.

    One instance can serve any number of sessions; the store is shared
    by reference and every operation gets the session passed in.
    """

    def __init__(self, store: TaskStore, clock: Callable[[], date] = date.today) -> None:
        self.store = store
        self._clock = clock

    def today(self) -> date:
        """Earliest due date the edit form should offer."""
        return self._clock()

    # --- Listing ---

    def initialize(self, session: SessionState) -> None:
        """Load the default listing on first activation only."""
        if session.initialized:
            return
        self.list_default(session)
        session.initialized = True

    def list_default(self, session: SessionState) -> None:
        """Show every in-progress task."""
        session.listing = [
            t for t in self.store.list_all() if t.status is DEFAULT_LISTING_STATUS
        ]

    def apply_filter(self, session: SessionState) -> None:
        """Replace the listing with store results for the current criteria."""
        c = session.criteria
        session.listing = self.store.filter(
            task_id=c.task_id,
            text_query=c.text,
            owner=c.owner,
            priority=c.priority,
            status=c.status,
        )
        logger.debug("Filter %r matched %d task(s)", c.describe(), len(session.listing))

    def clear_filter(self, session: SessionState) -> None:
        session.criteria = FilterCriteria()

    def find(self, task_id: int) -> Optional[Task]:
        return self.store.find_by_id(task_id)

    # --- Primary actions on the active task ---

    def create(self, session: SessionState) -> Task:
        """Save the active task as a new in-progress task."""
        task = session.active_task
        task.due_date = session.pending_due_date
        task.status = DEFAULT_STATUS
        self.store.save(task)
        self._reset_active(session)
        return task

    def update(self, session: SessionState) -> Task:
        """Write the active task back over its stored row."""
        task = session.active_task
        task.due_date = session.pending_due_date
        self.store.update(task)
        self._reset_active(session)
        return task

    def remove(self, session: SessionState, task_id: int) -> None:
        self.store.remove(task_id)
        self.list_default(session)

    def complete(self, session: SessionState, task_id: int) -> bool:
        """
        Mark a task as done.

        Returns:
            True if the task moved from IN_PROGRESS to DONE, False when it
            was missing or already done (both are silent no-ops)
        """
        task = self.store.find_by_id(task_id)
        changed = task is not None and task.status is Status.IN_PROGRESS
        if changed:
            task.status = Status.DONE
            self.store.update(task)
        self.list_default(session)
        return changed

    def _reset_active(self, session: SessionState) -> None:
        session.active_task = Task()
        session.pending_due_date = None
        self.list_default(session)

    # --- Edit form ---

    def prepare_create(self, session: SessionState) -> None:
        """Start a blank form for a new task."""
        session.edit_buffer = Task(status=DEFAULT_STATUS)
        session.pending_due_date = None

    def prepare_edit(self, session: SessionState, source: Task) -> None:
        """Load an independent copy of a task into the form."""
        session.edit_buffer = source.copy()
        session.pending_due_date = source.due_date

    def submit_edit_buffer(self, session: SessionState) -> bool:
        """
        Validate the form and save it.

        Returns:
            True when the task was saved; False when validation failed and
            the messages were added to the session instead

        Notes:
            - New tasks (no id) are always created in progress
            - The listing is only refreshed after a successful save
        """
        buffer = session.edit_buffer
        buffer.due_date = session.pending_due_date

        violations = validate_task(buffer, today=self.today())
        if violations:
            for violation in violations:
                session.messages.add(violation.message)
            logger.info(
                "Rejected task form: %s",
                ", ".join(v.field for v in violations),
            )
            return False

        if buffer.id is None:
            buffer.status = DEFAULT_STATUS
            self.store.save(buffer)
        else:
            self.store.update(buffer)

        session.edit_buffer = Task()
        session.pending_due_date = None
        self.list_default(session)
        return True
