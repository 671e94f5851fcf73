"""Tests for the one-shot CLI commands."""

import json

import pytest
from typer.testing import CliRunner

from tasktrack.cli.main import app
from tasktrack.core.models import Priority, Status

from conftest import make_task

runner = CliRunner()


@pytest.fixture
def invoke(app_context):
    """Run a CLI command against the test store."""
    def _invoke(*args):
        return runner.invoke(app, list(args), obj=app_context)
    return _invoke


def test_version(invoke):
    result = invoke("version")
    assert result.exit_code == 0
    assert "tasktrack v0.1.0" in result.output


def test_help_lists_commands(invoke):
    result = invoke("help")
    assert result.exit_code == 0
    for command in ("add", "filter", "done", "config"):
        assert command in result.output


def test_add_then_ls(invoke, store):
    result = invoke("add", "Plan sprint", "-d", "Draft backlog", "-o", "Ana", "-p", "high", "--due", "+4d")
    assert result.exit_code == 0
    assert "Created task #1" in result.output

    task = store.find_by_id(1)
    assert task.status is Status.IN_PROGRESS
    assert task.priority is Priority.HIGH

    result = invoke("ls", "--raw")
    assert result.exit_code == 0
    assert "1: [ ] Plan sprint (Ana, High, 2026-10-21)" in result.output


def test_add_json(invoke):
    result = invoke("add", "Plan sprint", "-d", "Draft backlog", "-o", "Ana", "-p", "Low", "--due", "today", "--json")
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["id"] == 1
    assert data["due_date"] == "2026-10-17"


def test_add_reports_validation_messages(invoke, store):
    result = invoke("add", "Plan sprint", "--due", "2020-01-01")

    assert result.exit_code == 1
    assert "Enter the task description." in result.output
    assert "Enter the task owner." in result.output
    assert "Select a priority." in result.output
    assert "The due date cannot be in the past." in result.output
    assert store.count() == 0


def test_add_rejects_bad_priority(invoke, store):
    result = invoke("add", "Plan sprint", "-p", "urgent")
    assert result.exit_code == 1
    assert "Invalid priority" in result.output
    assert store.count() == 0


def test_ls_empty(invoke):
    result = invoke("ls")
    assert result.exit_code == 0
    assert "No tasks found" in result.output


def test_filter_includes_done_tasks(invoke, store):
    store.save(make_task())
    store.save(make_task(title="Deploy", owner="carlos", status=Status.DONE))

    result = invoke("filter", "--owner", "CARLOS", "--json")
    assert result.exit_code == 0
    assert [t["title"] for t in json.loads(result.output)] == ["Deploy"]

    result = invoke("filter", "-s", "in progress", "--raw")
    assert "Plan sprint" in result.output
    assert "Deploy" not in result.output


def test_done_is_idempotent(invoke, store):
    task = store.save(make_task())

    result = invoke("done", str(task.id))
    assert result.exit_code == 0
    assert f"Completed task #{task.id}" in result.output
    assert store.find_by_id(task.id).status is Status.DONE

    result = invoke("done", str(task.id))
    assert result.exit_code == 0
    assert "nothing to complete" in result.output


def test_rm_multiple(invoke, store):
    first = store.save(make_task())
    second = store.save(make_task(title="Deploy"))

    result = invoke("rm", f"{first.id},{second.id},99")
    assert result.exit_code == 0
    assert "Deleted: Plan sprint" in result.output
    assert "Task #99: nothing to delete" in result.output
    assert store.count() == 0


def test_rm_bad_ids(invoke):
    result = invoke("rm", "1,x")
    assert result.exit_code == 1
    assert "Invalid task ID list" in result.output


def test_edit(invoke, store):
    task = store.save(make_task())

    result = invoke("edit", str(task.id), "--title", "Plan sprint 12", "-o", "Maria")
    assert result.exit_code == 0
    assert "Updated task" in result.output

    updated = store.find_by_id(task.id)
    assert updated.title == "Plan sprint 12"
    assert updated.owner == "Maria"
    assert updated.description == task.description


def test_edit_validation_failure_changes_nothing(invoke, store):
    task = store.save(make_task())

    result = invoke("edit", str(task.id), "--title", "   ")
    assert result.exit_code == 1
    assert "Enter the task title." in result.output
    assert store.find_by_id(task.id).title == "Plan sprint"


def test_edit_missing_task(invoke):
    result = invoke("edit", "42", "--title", "x")
    assert result.exit_code == 1
    assert "Task 42 not found" in result.output


def test_show(invoke, store):
    task = store.save(make_task())

    result = invoke("show", str(task.id), "--json")
    assert result.exit_code == 0
    assert json.loads(result.output)["title"] == "Plan sprint"

    result = invoke("show", "99")
    assert result.exit_code == 1
    assert "Task 99 not found" in result.output


def test_config_json(invoke, tmp_path):
    result = invoke("config", "--json")
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["source"] == "local-default"
    assert data["backend"] == "sqlite"
    assert data["data_dir"] == str(tmp_path)


def test_context_built_from_environment(tmp_path, monkeypatch):
    monkeypatch.setattr("tasktrack.bootstrap.setup_logging", lambda *args, **kwargs: None)
    monkeypatch.setenv("TASKTRACK_HOME", str(tmp_path / "home"))

    result = runner.invoke(app, ["config", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.output)["url"].endswith("tasktrack.db")
    assert (tmp_path / "home" / "tasktrack.db").exists()


def test_bad_configuration_exits(monkeypatch):
    monkeypatch.setattr("tasktrack.bootstrap.setup_logging", lambda *args, **kwargs: None)
    monkeypatch.setenv("TASKTRACK_SQLALCHEMY_URL", "postgresql+nosuchdriver://db.example.com/app")

    result = runner.invoke(app, ["ls"])
    assert result.exit_code == 1
    assert "Configuration error" in result.output
