"""Tests for entity services."""

from datetime import date

import pytest
from sqlmodel import Session, select

from weekly_goals_api.common.error_handlers import (
    DuplicateWeekError,
    ResourceNotFoundError,
    ValidationError,
)
from weekly_goals_api.models import (
    BacklogItem,
    BacklogItemCreate,
    BacklogItemOwner,
    BacklogItemUpdate,
    CategoryCreate,
    FollowUpCreate,
    Note,
    NoteCreate,
    NoteUpdate,
    RecurringTaskCreate,
    TagCreate,
    Task,
    TaskCreate,
    TaskOwner,
    TaskStatus,
    TaskUpdate,
    Week,
    WeekCreate,
)
from weekly_goals_api.services import (
    backlog_service,
    category_service,
    follow_up_service,
    note_service,
    recompute_week_stats,
    recurring_task_service,
    task_service,
    tag_service,
    week_service,
)


@pytest.fixture
def week(session: Session) -> Week:
    return week_service.create_week(
        session,
        WeekCreate(id="2026-05", start_date=date(2026, 1, 26), end_date=date(2026, 2, 1)),
    )


@pytest.fixture
def task(session: Session, week: Week) -> Task:
    return task_service.create_task(
        session, TaskCreate(week_id=week.id, title="Write tests", content_markdown="x")
    )


def test_create_week_rejects_duplicate_and_bad_range(session: Session, week: Week):
    with pytest.raises(DuplicateWeekError):
        week_service.create_week(
            session,
            WeekCreate(
                id=week.id, start_date=date(2026, 1, 26), end_date=date(2026, 2, 1)
            ),
        )

    with pytest.raises(ValidationError):
        week_service.create_week(
            session,
            WeekCreate(
                id="2026-06", start_date=date(2026, 2, 8), end_date=date(2026, 2, 2)
            ),
        )


def test_weeks_listed_most_recent_first(session: Session, week: Week):
    week_service.create_week(
        session,
        WeekCreate(id="2025-52", start_date=date(2025, 12, 22), end_date=date(2025, 12, 28)),
    )

    assert [w.id for w in week_service.get_weeks(session)] == ["2026-05", "2025-52"]


def test_suggest_next_week_follows_latest(session: Session, week: Week):
    suggestion = week_service.suggest_next_week(session)

    assert suggestion.week_id == "2026-06"
    assert suggestion.start_date == date(2026, 2, 2)
    assert suggestion.end_date == date(2026, 2, 8)


def test_suggest_next_week_with_no_weeks(session: Session):
    suggestion = week_service.suggest_next_week(session, today=date(2024, 6, 19))

    assert suggestion.week_id == "2024-25"
    assert suggestion.start_date == date(2024, 6, 17)


def test_create_task_requires_existing_week(session: Session):
    with pytest.raises(ResourceNotFoundError):
        task_service.create_task(session, TaskCreate(week_id="2030-01", title="Nope"))


def test_task_changes_recompute_week_stats(session: Session, week: Week, task: Task):
    second = task_service.create_task(session, TaskCreate(week_id=week.id, title="Two"))
    assert session.get(Week, week.id).total_tasks == 2

    toggled = task_service.toggle_status(session, task.id)
    assert toggled.status == TaskStatus.COMPLETED
    assert session.get(Week, week.id).completed_tasks == 1

    task_service.update_task(session, second.id, TaskUpdate(status=TaskStatus.COMPLETED))
    assert session.get(Week, week.id).completed_tasks == 2

    task_service.toggle_status(session, task.id)
    task_service.delete_task(session, second.id)
    refreshed = session.get(Week, week.id)
    assert refreshed.total_tasks == 1
    assert refreshed.completed_tasks == 0


def test_recompute_week_stats_counts_from_rows(session: Session, week: Week, task: Task):
    stored = session.get(Week, week.id)
    stored.total_tasks = 40
    stored.completed_tasks = 12
    session.add(stored)
    session.commit()

    recompute_week_stats(session, week.id)
    session.commit()

    assert session.get(Week, week.id).total_tasks == 1
    assert session.get(Week, week.id).completed_tasks == 0
    assert recompute_week_stats(session, "1999-01") is None


def test_update_task_rerenders_markdown(session: Session, task: Task):
    updated = task_service.update_task(
        session, task.id, TaskUpdate(content_markdown="**done**")
    )
    assert updated.content_html == "<p><strong>done</strong></p>"

    cleared = task_service.update_task(session, task.id, TaskUpdate(content_markdown=None))
    assert cleared.content_html is None


def test_move_to_backlog_keeps_notes(session: Session, week: Week, task: Task):
    note_service.create_note(session, NoteCreate(content_markdown="keep", task_id=task.id))
    task_id = task.id

    item = task_service.move_to_backlog(session, task_id)

    assert item.title == "Write tests"
    assert item.priority == 0
    assert session.get(Task, task_id) is None
    assert session.get(Week, week.id).total_tasks == 0
    notes = session.exec(select(Note)).all()
    assert len(notes) == 1
    assert notes[0].owner == BacklogItemOwner(item.id)


def test_move_to_week_consumes_backlog_item(session: Session, week: Week):
    item = backlog_service.create_backlog_item(
        session, BacklogItemCreate(title="Garden", priority=3)
    )
    note_service.create_note(
        session, NoteCreate(content_markdown="seeds", backlog_item_id=item.id)
    )
    item_id = item.id

    task = backlog_service.move_to_week(session, item_id, week.id)

    assert task.week_id == week.id
    assert session.get(BacklogItem, item_id) is None
    assert [n.owner for n in task_service.get_task_notes(session, task.id)] == [
        TaskOwner(task.id)
    ]
    assert session.get(Week, week.id).total_tasks == 1


def test_move_to_week_requires_existing_week(session: Session):
    item = backlog_service.create_backlog_item(session, BacklogItemCreate(title="Later"))

    with pytest.raises(ResourceNotFoundError):
        backlog_service.move_to_week(session, item.id, "2031-01")
    assert backlog_service.get_backlog_item(session, item.id).title == "Later"


def test_backlog_ordered_by_priority(session: Session):
    for title, priority in [("low", 1), ("high", 5), ("mid", 3)]:
        backlog_service.create_backlog_item(
            session, BacklogItemCreate(title=title, priority=priority)
        )

    titles = [i.title for i in backlog_service.get_backlog_items(session)]
    assert titles == ["high", "mid", "low"]

    first = backlog_service.get_backlog_items(session)[0]
    updated = backlog_service.update_backlog_item(
        session, first.id, BacklogItemUpdate(priority=0)
    )
    assert updated.priority == 0


@pytest.mark.parametrize(
    "task_id, backlog_item_id",
    [(None, None), (1, 1)],
)
def test_note_requires_exactly_one_owner(session: Session, task_id, backlog_item_id):
    with pytest.raises(ValidationError):
        note_service.create_note(
            session,
            NoteCreate(
                content_markdown="hi", task_id=task_id, backlog_item_id=backlog_item_id
            ),
        )


def test_note_owner_must_exist(session: Session):
    with pytest.raises(ResourceNotFoundError):
        note_service.create_note(session, NoteCreate(content_markdown="hi", task_id=77))


def test_note_update_rerenders(session: Session, task: Task):
    note = note_service.create_note(
        session, NoteCreate(content_markdown="a", task_id=task.id)
    )

    updated = note_service.update_note(session, note.id, NoteUpdate(content_markdown="# b"))

    assert updated.content_html == "<h1>b</h1>"
    assert note_service.get_notes(session, task_id=task.id)[0].id == note.id


def test_deleting_week_cascades_to_tasks_and_notes(session: Session, week: Week, task: Task):
    note_service.create_note(session, NoteCreate(content_markdown="n", task_id=task.id))

    week_service.delete_week(session, week.id)

    assert session.exec(select(Task)).first() is None
    assert session.exec(select(Note)).first() is None


def test_recurring_task_toggle_and_filter(session: Session):
    template = recurring_task_service.create_recurring_task(
        session, RecurringTaskCreate(title="Stretch")
    )

    toggled = recurring_task_service.toggle_active(session, template.id)

    assert toggled.is_active is False
    assert recurring_task_service.get_recurring_tasks(session, is_active=True) == []
    assert len(recurring_task_service.get_recurring_tasks(session)) == 1


def test_follow_up_requires_source_task(session: Session, task: Task):
    with pytest.raises(ResourceNotFoundError):
        follow_up_service.create_follow_up(
            session, FollowUpCreate(title="Ping", source_task_id=555)
        )

    follow_up = follow_up_service.create_follow_up(
        session, FollowUpCreate(title="Ping", source_task_id=task.id)
    )
    assert follow_up_service.get_follow_ups(session)[0].id == follow_up.id


def test_deleting_category_clears_references(session: Session, week: Week):
    category = category_service.create_category(session, CategoryCreate(name="Health"))
    task = task_service.create_task(
        session, TaskCreate(week_id=week.id, title="Run", category_id=category.id)
    )

    category_service.delete_category(session, category.id)
    session.expire_all()

    assert session.get(Task, task.id).category_id is None


def test_missing_entities_raise_not_found(session: Session):
    with pytest.raises(ResourceNotFoundError):
        week_service.get_week(session, "2026-01")
    with pytest.raises(ResourceNotFoundError):
        task_service.get_task(session, 1)
    with pytest.raises(ResourceNotFoundError):
        category_service.delete_category(session, 1)
    with pytest.raises(ResourceNotFoundError):
        note_service.update_note(session, 1, NoteUpdate(content_markdown="x"))


def test_tags_are_scoped_to_existing_categories(session: Session):
    work = category_service.create_category(session, CategoryCreate(name="Work"))
    home = category_service.create_category(session, CategoryCreate(name="Home"))
    tag_service.create_tag(session, TagCreate(name=" deep ", category_id=work.id))
    tag_service.create_tag(session, TagCreate(name="chores", category_id=home.id))

    assert [t.name for t in tag_service.get_tags(session)] == ["chores", "deep"]
    assert [t.name for t in tag_service.get_tags(session, work.id)] == ["deep"]

    with pytest.raises(ResourceNotFoundError):
        tag_service.create_tag(session, TagCreate(name="x", category_id=999))
    with pytest.raises(ValidationError):
        tag_service.create_tag(session, TagCreate(name="  ", category_id=work.id))

    category_service.delete_category(session, work.id)
    session.expire_all()

    assert [t.name for t in tag_service.get_tags(session)] == ["chores"]


def test_task_tags_follow_the_task_through_the_backlog(
    session: Session, week: Week
):
    task = task_service.create_task(
        session, TaskCreate(week_id=week.id, title="Tidy", tags=["home", "quick"])
    )

    item = task_service.move_to_backlog(session, task.id)
    assert item.tags == ["home", "quick"]

    moved = backlog_service.move_to_week(session, item.id, week.id)
    assert moved.tags == ["home", "quick"]

    cleared = task_service.update_task(session, moved.id, TaskUpdate(tags=None))
    assert cleared.tags == []


def test_category_is_loaded_with_content(session: Session, week: Week):
    category = category_service.create_category(session, CategoryCreate(name="Health"))
    task = task_service.create_task(
        session, TaskCreate(week_id=week.id, title="Run", category_id=category.id)
    )
    item = backlog_service.create_backlog_item(
        session, BacklogItemCreate(title="Swim", category_id=category.id)
    )

    assert task.category.name == "Health"
    assert item.category.id == category.id
