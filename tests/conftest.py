"""Shared pytest configuration and fixtures for tests."""

import sys
import io
from datetime import date
from pathlib import Path

import pytest

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tasktrack.bootstrap import AppContext  # noqa: E402
from tasktrack.config import Settings  # noqa: E402
from tasktrack.core import datastore  # noqa: E402
from tasktrack.core.datastore import DatastoreConfig, local_default_url, SOURCE_LOCAL  # noqa: E402
from tasktrack.core.models import Task, Priority, Status  # noqa: E402
from tasktrack.core.repository import TaskStore  # noqa: E402
from tasktrack.core.workflow import TaskWorkflow  # noqa: E402

# Every test runs against this date so due-date rules are deterministic
TODAY = date(2026, 10, 17)

DATASTORE_ENV_VARS = (
    datastore.NATIVE_URL_VARS
    + datastore.CLOUD_URL_VARS
    + datastore.USER_VARS
    + datastore.PASSWORD_VARS
    + datastore.HOST_VARS
    + datastore.NAME_VARS
    + datastore.PORT_VARS
    + datastore.SSLMODE_VARS
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """No test ever sees a real database or the user's data directory."""
    for name in DATASTORE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for suffix in ("LOG_LEVEL", "LOG_FILE", "SQL_ECHO"):
        monkeypatch.delenv(f"TASKTRACK_{suffix}", raising=False)
    monkeypatch.setenv("TASKTRACK_HOME", str(tmp_path))


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def datastore_config(tmp_path):
    return DatastoreConfig(url=local_default_url(tmp_path), source=SOURCE_LOCAL)


@pytest.fixture
def store(datastore_config):
    """Fresh store on a temporary SQLite file."""
    task_store = TaskStore.from_config(datastore_config)
    yield task_store
    task_store.close()


@pytest.fixture
def workflow(store):
    return TaskWorkflow(store, clock=lambda: TODAY)


@pytest.fixture
def app_context(tmp_path, datastore_config, store, workflow):
    settings = Settings(
        data_dir=tmp_path,
        log_level="WARNING",
        log_file=tmp_path / "tasktrack.log",
        sql_echo=False,
    )
    return AppContext(settings=settings, datastore=datastore_config, store=store, workflow=workflow)


def make_task(
    title="Plan sprint",
    description="Draft the sprint backlog",
    owner="Ana",
    priority=Priority.HIGH,
    due_date=TODAY,
    status=Status.IN_PROGRESS,
    **overrides,
) -> Task:
    """Valid unsaved task; override any field by keyword."""
    return Task(
        title=title,
        description=description,
        owner=owner,
        priority=priority,
        due_date=due_date,
        status=status,
        **overrides,
    )
