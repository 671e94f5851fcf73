"""Tests for the session-scoped task workflow."""

from datetime import timedelta

from tasktrack.core.models import Priority, Status, Task
from tasktrack.core.workflow import (
    FilterCriteria,
    MessageChannel,
    SessionState,
)

from conftest import TODAY, make_task


def fill_buffer(session, **fields):
    buffer = session.edit_buffer
    buffer.title = fields.get("title", "Plan sprint")
    buffer.description = fields.get("description", "Draft the sprint backlog")
    buffer.owner = fields.get("owner", "Ana")
    buffer.priority = fields.get("priority", Priority.HIGH)
    session.pending_due_date = fields.get("due_date", TODAY + timedelta(days=4))


# --- messages and criteria ---

def test_message_channel_ignores_duplicates():
    channel = MessageChannel()
    assert channel.add("Enter the task title.")
    assert not channel.add("Enter the task title.")
    assert channel.add("Select a priority.")

    assert channel.texts() == ["Enter the task title.", "Select a priority."]
    assert len(channel.drain()) == 2
    assert len(channel) == 0


def test_filter_criteria_describe():
    assert FilterCriteria().is_empty()
    assert FilterCriteria(text="  ").is_empty()

    criteria = FilterCriteria(owner="ana", status=Status.DONE)
    assert not criteria.is_empty()
    assert criteria.describe() == "owner=ana | status=Done"


# --- listing ---

def test_initialize_only_loads_once(workflow, store):
    session = SessionState()
    store.save(make_task())
    workflow.initialize(session)
    assert len(session.listing) == 1

    store.save(make_task(title="Second"))
    workflow.initialize(session)
    assert len(session.listing) == 1
    assert session.initialized


def test_default_listing_hides_done_tasks(workflow, store):
    store.save(make_task())
    store.save(make_task(title="Finished", status=Status.DONE))

    session = SessionState()
    workflow.list_default(session)
    assert [t.title for t in session.listing] == ["Plan sprint"]


def test_empty_criteria_return_every_task(workflow, store):
    store.save(make_task())
    store.save(make_task(title="Finished", status=Status.DONE))

    session = SessionState()
    workflow.apply_filter(session)
    assert len(session.listing) == 2


def test_clear_filter(workflow):
    session = SessionState(criteria=FilterCriteria(owner="ana"))
    workflow.clear_filter(session)
    assert session.criteria.is_empty()


# --- primary actions ---

def test_create_from_active_task(workflow, store):
    session = SessionState()
    session.active_task = make_task(status=Status.DONE, due_date=None)
    session.pending_due_date = TODAY + timedelta(days=1)

    created = workflow.create(session)

    stored = store.find_by_id(created.id)
    assert stored.status is Status.IN_PROGRESS
    assert stored.due_date == TODAY + timedelta(days=1)
    assert session.active_task == Task()
    assert session.pending_due_date is None
    assert [t.id for t in session.listing] == [created.id]


def test_update_from_active_task(workflow, store):
    task = store.save(make_task())
    session = SessionState()
    session.active_task = task.copy()
    session.active_task.title = "Plan sprint 12"
    session.pending_due_date = task.due_date

    workflow.update(session)

    assert store.find_by_id(task.id).title == "Plan sprint 12"


def test_remove_refreshes_listing(workflow, store):
    task = store.save(make_task())
    session = SessionState()
    workflow.initialize(session)

    workflow.remove(session, task.id)
    assert session.listing == []
    workflow.remove(session, task.id)


def test_complete_is_idempotent(workflow, store):
    task = store.save(make_task())
    session = SessionState()

    assert workflow.complete(session, task.id)
    assert store.find_by_id(task.id).status is Status.DONE
    assert session.listing == []

    assert not workflow.complete(session, task.id)
    assert store.find_by_id(task.id).status is Status.DONE
    assert not workflow.complete(session, 999)


# --- edit form ---

def test_prepare_create_resets_form(workflow):
    session = SessionState()
    session.pending_due_date = TODAY
    workflow.prepare_create(session)

    assert session.edit_buffer == Task(status=Status.IN_PROGRESS)
    assert session.pending_due_date is None


def test_submit_new_task(workflow, store):
    session = SessionState()
    workflow.prepare_create(session)
    fill_buffer(session)
    session.edit_buffer.status = Status.DONE
    buffer = session.edit_buffer

    assert workflow.submit_edit_buffer(session)

    stored = store.find_by_id(buffer.id)
    assert stored.status is Status.IN_PROGRESS
    assert stored.due_date == TODAY + timedelta(days=4)
    assert session.edit_buffer == Task()
    assert session.pending_due_date is None
    assert len(session.messages) == 0
    assert [t.id for t in session.listing] == [buffer.id]


def test_submit_reports_each_problem_once(workflow, store):
    session = SessionState()
    workflow.prepare_create(session)
    fill_buffer(session, title="", description=" ")

    assert not workflow.submit_edit_buffer(session)
    assert not workflow.submit_edit_buffer(session)

    assert session.messages.texts() == ["Enter the task title.", "Enter the task description."]
    assert store.count() == 0

    # A new display cycle shows them again
    session.messages.drain()
    assert not workflow.submit_edit_buffer(session)
    assert len(session.messages) == 2


def test_submit_rejects_past_due_date(workflow, store):
    session = SessionState()
    workflow.prepare_create(session)
    fill_buffer(session, due_date=TODAY - timedelta(days=1))

    assert not workflow.submit_edit_buffer(session)
    assert session.messages.texts() == ["The due date cannot be in the past."]
    assert store.count() == 0


def test_failed_submit_keeps_listing(workflow, store):
    store.save(make_task())
    session = SessionState()
    workflow.initialize(session)
    store.save(make_task(title="Added elsewhere"))

    workflow.prepare_create(session)
    assert not workflow.submit_edit_buffer(session)
    assert len(session.listing) == 1


def test_prepare_edit_does_not_alias(workflow, store):
    task = store.save(make_task())
    session = SessionState()
    workflow.initialize(session)
    source = session.listing[0]

    workflow.prepare_edit(session, source)
    session.edit_buffer.title = "Changed in form"

    assert source.title == "Plan sprint"
    assert session.pending_due_date == task.due_date
    assert store.find_by_id(task.id).title == "Plan sprint"

    assert workflow.submit_edit_buffer(session)
    assert store.find_by_id(task.id).title == "Changed in form"
    assert store.count() == 1


def test_edit_keeps_done_status(workflow, store):
    task = store.save(make_task(status=Status.DONE))
    session = SessionState()
    workflow.prepare_edit(session, task)
    session.edit_buffer.owner = "Maria"

    assert workflow.submit_edit_buffer(session)
    assert store.find_by_id(task.id).status is Status.DONE


def test_sprint_and_deploy_scenario(workflow, store):
    session = SessionState()
    workflow.prepare_create(session)
    fill_buffer(session)
    assert workflow.submit_edit_buffer(session)

    store.save(make_task(
        title="Deploy",
        description="Ship the release",
        owner="carlos",
        priority=Priority.MEDIUM,
        due_date=TODAY + timedelta(days=7),
        status=Status.DONE,
    ))

    workflow.list_default(session)
    assert [t.title for t in session.listing] == ["Plan sprint"]

    session.criteria = FilterCriteria(owner="CARLOS")
    workflow.apply_filter(session)
    assert [t.title for t in session.listing] == ["Deploy"]


def test_today_uses_clock(workflow):
    assert workflow.today() == TODAY
