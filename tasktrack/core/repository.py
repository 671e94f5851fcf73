"""
FILE: tasktrack/core/repository.py
PURPOSE: Database operations and connection management for tasks
EXPORTS:
  - tasks_table (SQLAlchemy Table)
  - TaskStore (class)
      - from_config(config, echo) -> TaskStore
      - from_environment(environ, data_dir, echo) -> TaskStore
      - save(task) -> Task
      - update(task) -> None
      - remove(task_id) -> None
      - find_by_id(task_id) -> Task | None
      - list_all() -> List[Task]
      - filter(task_id, text_query, owner, priority, status) -> List[Task]
      - count() -> int
      - close() -> None
DEPENDENCIES:
  - sqlalchemy (engine, Core expressions)
  - tasktrack.core.models (Task, Priority, Status)
  - tasktrack.core.datastore (DatastoreConfig, resolve_datastore)
  - tasktrack.core.exceptions (InvalidInputError, StoreError, ConfigurationError)
NOTES:
  - One engine per store, built once and passed around by reference
  - Each call acquires its own connection and releases it before returning
  - Mutations run inside engine.begin(): commit on success, rollback on error
  - Schema is created if missing at construction; existing data is never dropped
  - SQLite connections get a Unicode-aware lower() for case-insensitive filters
  - Not-found ids are no-ops for update/remove and None for find_by_id
  - Returns domain objects (Task), never raw rows
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Mapping, Optional

from sqlalchemy import (
    Column,
    Date,
    Enum,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    event,
    delete,
    func,
    insert,
    or_,
    select,
    update,
)
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from .models import Task, Priority, Status
from .constants import (
    TABLE_NAME,
    TITLE_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    OWNER_MAX_LENGTH,
)
from .datastore import DatastoreConfig, resolve_datastore
from .exceptions import InvalidInputError, StoreError, ConfigurationError

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def _enum_values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


metadata = MetaData()

tasks_table = Table(
    TABLE_NAME,
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(TITLE_MAX_LENGTH), nullable=False),
    Column("description", String(DESCRIPTION_MAX_LENGTH), nullable=False),
    Column("owner", String(OWNER_MAX_LENGTH), nullable=False),
    Column(
        "priority",
        Enum(
            Priority,
            name="task_priority",
            native_enum=False,
            create_constraint=True,
            values_callable=_enum_values,
        ),
        nullable=False,
    ),
    Column("due_date", Date, nullable=False),
    Column(
        "status",
        Enum(
            Status,
            name="task_status",
            native_enum=False,
            create_constraint=True,
            values_callable=_enum_values,
        ),
        nullable=False,
    ),
)


def _row_values(task: Task) -> dict:
    """Every persisted column except the surrogate key."""
    return {
        "title": task.title,
        "description": task.description,
        "owner": task.owner,
        "priority": task.priority,
        "due_date": task.due_date,
        "status": task.status,
    }


def _escape_like(text: str) -> str:
    """Escape LIKE wildcards so user text matches literally."""
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _clean(value: Optional[str]) -> Optional[str]:
    """Blank filter text imposes no constraint."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _unicode_lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else None


def _register_sqlite_functions(dbapi_conn, connection_record) -> None:
    # SQLite's built-in lower() only folds ASCII letters
    dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)


def _build_engine(config: DatastoreConfig, echo: bool = False) -> Engine:
    """Create the engine for a resolved datastore, preparing local SQLite files."""
    kwargs = {"echo": echo}

    if config.is_sqlite:
        database = config.url.database
        if database in (None, "", ":memory:"):
            # One shared connection, otherwise every call sees an empty database
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"] = {"check_same_thread": False}
        else:
            Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_engine(config.url, **kwargs)
    if config.is_sqlite:
        event.listen(engine, "connect", _register_sqlite_functions)
    return engine


class TaskStore:
    """
    Relational task store.

    Build one per process (from_environment or from_config) and hand the
    same instance to every workflow. Operations are synchronous and never
    hold a connection between calls.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        try:
            metadata.create_all(engine)
            total = self.count()
        except (SQLAlchemyError, StoreError) as e:
            raise ConfigurationError(
                f"Could not prepare datastore {engine.url.render_as_string(hide_password=True)}: {e}"
            ) from e
        logger.info(
            "TaskStore ready url=%s total=%s",
            engine.url.render_as_string(hide_password=True),
            total,
        )

    @classmethod
    def from_config(cls, config: DatastoreConfig, echo: bool = False) -> "TaskStore":
        """
        Build a store for an already-resolved datastore.

        Raises:
            ConfigurationError: If the engine or schema cannot be set up
        """
        try:
            engine = _build_engine(config, echo=echo)
        except (SQLAlchemyError, ImportError, OSError) as e:
            raise ConfigurationError(
                f"Could not create engine for {config.display_url()}: {e}"
            ) from e
        return cls(engine)

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        data_dir: Optional[Path] = None,
        echo: bool = False,
    ) -> "TaskStore":
        """Resolve the datastore from environment variables and build a store."""
        return cls.from_config(resolve_datastore(environ, data_dir), echo=echo)

    @property
    def url(self) -> str:
        return self._engine.url.render_as_string(hide_password=True)

    def close(self) -> None:
        """Release pooled connections at shutdown."""
        self._engine.dispose()

    # --- low-level helpers ---

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[Connection]:
        try:
            with self._engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.error("Rolled back %s: %s", operation, e)
            raise StoreError(operation, e) from e

    @contextmanager
    def _reading(self, operation: str) -> Iterator[Connection]:
        try:
            with self._engine.connect() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.error("Read %s failed: %s", operation, e)
            raise StoreError(operation, e) from e

    # --- mutations ---

    def save(self, task: Task) -> Task:
        """
        Insert a new task and assign its generated id.

        Args:
            task: Task with id None

        Returns:
            The same Task object, now carrying its id

        Raises:
            InvalidInputError: If the task already has an id
            StoreError: If the insert fails (transaction rolled back)
        """
        if task.id is not None:
            raise InvalidInputError(f"Task {task.id} is already saved; use update instead")

        with self._transaction("save") as conn:
            result = conn.execute(insert(tasks_table).values(**_row_values(task)))
            new_id = result.inserted_primary_key[0]

        task.id = new_id
        logger.debug("Saved task %s", new_id)
        return task

    def update(self, task: Task) -> None:
        """
        Overwrite every column of the stored row with the task's fields.

        Last write wins. An id that no longer exists is silently ignored.

        Raises:
            InvalidInputError: If the task has no id
            StoreError: If the update fails (transaction rolled back)
        """
        if task.id is None:
            raise InvalidInputError("Task has no id; use save instead")

        with self._transaction("update") as conn:
            result = conn.execute(
                update(tasks_table)
                .where(tasks_table.c.id == task.id)
                .values(**_row_values(task))
            )
            matched = result.rowcount

        if matched == 0:
            logger.debug("Update skipped, task %s not found", task.id)
        else:
            logger.debug("Updated task %s", task.id)

    def remove(self, task_id: int) -> None:
        """Delete a task by id. Removing an unknown id does nothing."""
        with self._transaction("remove") as conn:
            found = conn.execute(
                select(tasks_table.c.id).where(tasks_table.c.id == task_id)
            ).first()
            if found is not None:
                conn.execute(delete(tasks_table).where(tasks_table.c.id == task_id))

        if found is None:
            logger.debug("Remove skipped, task %s not found", task_id)
        else:
            logger.debug("Removed task %s", task_id)

    # --- queries ---

    def find_by_id(self, task_id: int) -> Optional[Task]:
        """
        Fetch single task by ID.

        Returns:
            Task object if found, None otherwise
        """
        with self._reading("find_by_id") as conn:
            row = conn.execute(
                select(tasks_table).where(tasks_table.c.id == task_id)
            ).mappings().first()

        return Task.from_row(row) if row else None

    def list_all(self) -> List[Task]:
        """Every stored task (ordered by id, not a guarantee callers should rely on)."""
        with self._reading("list_all") as conn:
            rows = conn.execute(
                select(tasks_table).order_by(tasks_table.c.id)
            ).mappings().all()

        return [Task.from_row(row) for row in rows]

    def filter(
        self,
        task_id: Optional[int] = None,
        text_query: Optional[str] = None,
        owner: Optional[str] = None,
        priority: Optional[Priority] = None,
        status: Optional[Status] = None,
    ) -> List[Task]:
        """
        List tasks matching every supplied criterion.

        Args:
            task_id: Exact id
            text_query: Case-insensitive substring of title OR description
            owner: Case-insensitive exact owner
            priority: Exact priority
            status: Exact status

        Returns:
            Matching tasks (empty list when nothing matches)

        Notes:
            - None or blank arguments add no condition at all
            - No arguments returns every task
        """
        c = tasks_table.c
        conditions = []

        if task_id is not None:
            conditions.append(c.id == task_id)

        text_query = _clean(text_query)
        if text_query:
            pattern = func.lower(f"%{_escape_like(text_query)}%")
            conditions.append(
                or_(
                    func.lower(c.title).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(c.description).like(pattern, escape=LIKE_ESCAPE),
                )
            )

        owner = _clean(owner)
        if owner:
            conditions.append(func.lower(c.owner) == func.lower(owner))

        if priority is not None:
            conditions.append(c.priority == priority)

        if status is not None:
            conditions.append(c.status == status)

        stmt = select(tasks_table).where(*conditions).order_by(c.id)

        with self._reading("filter") as conn:
            rows = conn.execute(stmt).mappings().all()

        return [Task.from_row(row) for row in rows]

    def count(self) -> int:
        """Number of stored tasks."""
        with self._reading("count") as conn:
            return conn.execute(select(func.count()).select_from(tasks_table)).scalar_one()
