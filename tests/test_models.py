"""Tests for the task model and its enums."""

import json
from datetime import date

import pytest

from tasktrack.core.models import Task, Priority, Status
from tasktrack.core.constants import PRIORITY_OPTIONS, STATUS_OPTIONS, OWNER_SUGGESTIONS

from conftest import make_task


def test_enum_values_and_labels():
    assert Priority.HIGH.value == "High"
    assert Status.IN_PROGRESS.value == "InProgress"
    assert Status.IN_PROGRESS.label == "In progress"
    assert Status.DONE.label == "Done"


@pytest.mark.parametrize("text,expected", [
    ("high", Priority.HIGH),
    ("MEDIUM", Priority.MEDIUM),
    (" Low ", Priority.LOW),
])
def test_priority_parse(text, expected):
    assert Priority.parse(text) is expected


@pytest.mark.parametrize("text", ["InProgress", "in progress", "in-progress", "IN_PROGRESS"])
def test_status_parse_accepts_value_name_and_label(text):
    assert Status.parse(text) is Status.IN_PROGRESS


def test_parse_rejects_unknown_value():
    with pytest.raises(ValueError, match="Must be one of"):
        Priority.parse("urgent")


def test_reference_lists():
    assert PRIORITY_OPTIONS == (Priority.HIGH, Priority.MEDIUM, Priority.LOW)
    assert STATUS_OPTIONS == (Status.IN_PROGRESS, Status.DONE)
    assert OWNER_SUGGESTIONS == ("João", "Maria", "Carlos", "Ana")


def test_new_task_has_no_id():
    task = Task()
    assert task.id is None
    assert task.status is None
    assert not task.is_done


def test_copy_is_independent():
    original = make_task(id=3)
    clone = original.copy()

    clone.title = "Something else"
    clone.status = Status.DONE

    assert clone == make_task(id=3, title="Something else", status=Status.DONE)
    assert original.title == "Plan sprint"
    assert original.status is Status.IN_PROGRESS


def test_from_row_converts_enums():
    row = {
        "id": 7,
        "title": "Deploy",
        "description": "Ship the release",
        "owner": "carlos",
        "priority": "Medium",
        "due_date": date(2026, 10, 24),
        "status": "Done",
    }
    task = Task.from_row(row)

    assert task.id == 7
    assert task.priority is Priority.MEDIUM
    assert task.status is Status.DONE
    assert task.is_done


def test_to_dict_and_json():
    task = make_task(id=1, due_date=date(2026, 10, 21))

    data = task.to_dict()
    assert data["due_date"] == "2026-10-21"
    assert data["priority"] == "High"
    assert data["status"] == "InProgress"

    assert json.loads(task.to_json()) == data
