"""Tests for entity builders; no database needed."""

import pytest

from weekly_goals_api.builders import (
    backlog_item_from_task,
    note_copy_for_owner,
    task_from_backlog_item,
    task_from_follow_up,
    task_from_incomplete,
    task_from_new_task,
    task_from_recurring,
)
from weekly_goals_api.models import (
    BacklogItem,
    BacklogItemOwner,
    FollowUp,
    NewTaskSpec,
    Note,
    RecurringTask,
    Task,
    TaskOwner,
    TaskStatus,
)


def _content(**overrides):
    fields = {
        "category_id": 3,
        "title": "Write report",
        "content_markdown": "**bold**",
        "content_html": "<p><strong>bold</strong></p>",
    }
    fields.update(overrides)
    return fields


def _assert_content_copied(task: Task, source):
    assert task.category_id == source.category_id
    assert task.title == source.title
    assert task.content_markdown == source.content_markdown
    assert task.content_html == source.content_html


def test_task_from_recurring():
    template = RecurringTask(id=7, is_active=True, **_content())

    task = task_from_recurring(template, "2026-05")

    _assert_content_copied(task, template)
    assert task.week_id == "2026-05"
    assert task.is_recurring is True
    assert task.staleness_count == 0
    assert task.previous_version_id is None
    assert task.id is None


def test_task_from_incomplete_increments_staleness():
    source = Task(
        id=11,
        week_id="2026-04",
        staleness_count=2,
        is_recurring=True,
        status=TaskStatus.PENDING,
        **_content(),
    )

    task = task_from_incomplete(source, "2026-05")

    _assert_content_copied(task, source)
    assert task.week_id == "2026-05"
    assert task.staleness_count == 3
    assert task.previous_version_id == 11
    assert task.is_recurring is True
    # Source is left as it was
    assert source.week_id == "2026-04"
    assert source.staleness_count == 2


def test_task_from_follow_up_and_backlog_item():
    follow_up = FollowUp(id=1, source_task_id=4, **_content(title="Call back"))
    item = BacklogItem(id=2, priority=5, **_content(category_id=None))

    from_follow_up = task_from_follow_up(follow_up, "2026-05")
    from_backlog = task_from_backlog_item(item, "2026-05")

    _assert_content_copied(from_follow_up, follow_up)
    _assert_content_copied(from_backlog, item)
    for task in (from_follow_up, from_backlog):
        assert task.week_id == "2026-05"
        assert task.staleness_count == 0
        assert task.previous_version_id is None
        assert task.is_recurring is False


def test_task_from_new_task_renders_markdown():
    spec = NewTaskSpec(title="Plan trip", content_markdown="# Packing")

    task = task_from_new_task(spec, "2026-05")

    assert task.title == "Plan trip"
    assert task.category_id is None
    assert "<h1>Packing</h1>" in task.content_html


def test_task_from_new_task_without_content():
    task = task_from_new_task(NewTaskSpec(title="Plan trip"), "2026-05")

    assert task.content_markdown is None
    assert task.content_html is None


def test_backlog_item_from_task():
    task = Task(id=9, week_id="2026-05", **_content())

    item = backlog_item_from_task(task)

    assert item.title == task.title
    assert item.content_html == task.content_html
    assert item.priority == 0


@pytest.mark.parametrize(
    "owner, task_id, backlog_item_id",
    [(TaskOwner(5), 5, None), (BacklogItemOwner(8), None, 8)],
)
def test_note_copy_for_owner(owner, task_id, backlog_item_id):
    note = Note(id=1, task_id=99, content_markdown="hi", content_html="<p>hi</p>")

    copy = note_copy_for_owner(note, owner)

    assert copy.id is None
    assert copy.task_id == task_id
    assert copy.backlog_item_id == backlog_item_id
    assert copy.content_markdown == "hi"
    assert copy.content_html == "<p>hi</p>"
    assert copy.owner == owner


def test_note_for_owner_rejects_unknown_owner():
    with pytest.raises(TypeError):
        Note.for_owner(("task", 1), "hi", "<p>hi</p>")


def test_tags_carry_between_tasks_and_backlog():
    task = Task(id=9, week_id="2026-04", tags=["deep"], **_content())
    item = BacklogItem(id=2, tags=["later"], **_content())

    assert task_from_incomplete(task, "2026-05").tags == ["deep"]
    assert task_from_backlog_item(item, "2026-05").tags == ["later"]
    deferred = backlog_item_from_task(task)
    assert deferred.tags == ["deep"]
    deferred.tags.append("again")
    assert task.tags == ["deep"]
    assert task_from_recurring(RecurringTask(**_content()), "2026-05").tags == []
