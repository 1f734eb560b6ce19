"""
Builders that construct new entities from a template plus overrides.

Each builder copies exactly the fields a conversion carries over and never
touches the session, so copy semantics can be tested without a database.
"""

from weekly_goals_api.models import (
    BacklogItem,
    FollowUp,
    NewTaskSpec,
    Note,
    NoteOwner,
    RecurringTask,
    Task,
)
from weekly_goals_api.rendering import render_optional


def task_from_recurring(template: RecurringTask, week_id: str) -> Task:
    """Instantiate a recurring template for a week"""
    return Task(
        week_id=week_id,
        category_id=template.category_id,
        title=template.title,
        content_markdown=template.content_markdown,
        content_html=template.content_html,
        is_recurring=True,
        staleness_count=0,
        previous_version_id=None,
    )


def task_from_incomplete(source: Task, week_id: str) -> Task:
    """Carry an unfinished task over into a later week"""
    return Task(
        week_id=week_id,
        category_id=source.category_id,
        title=source.title,
        content_markdown=source.content_markdown,
        content_html=source.content_html,
        is_recurring=source.is_recurring,
        staleness_count=source.staleness_count + 1,
        previous_version_id=source.id,
        tags=list(source.tags or []),
    )


def task_from_follow_up(follow_up: FollowUp, week_id: str) -> Task:
    return Task(
        week_id=week_id,
        category_id=follow_up.category_id,
        title=follow_up.title,
        content_markdown=follow_up.content_markdown,
        content_html=follow_up.content_html,
    )


def task_from_backlog_item(item: BacklogItem, week_id: str) -> Task:
    return Task(
        week_id=week_id,
        category_id=item.category_id,
        title=item.title,
        content_markdown=item.content_markdown,
        content_html=item.content_html,
        tags=list(item.tags or []),
    )


def task_from_new_task(spec: NewTaskSpec, week_id: str) -> Task:
    """Create a task from wizard input, rendering its markdown"""
    return Task(
        week_id=week_id,
        category_id=spec.category_id or None,
        title=spec.title,
        content_markdown=spec.content_markdown or None,
        content_html=render_optional(spec.content_markdown),
    )


def backlog_item_from_task(task: Task) -> BacklogItem:
    """Defer a task back to the backlog"""
    return BacklogItem(
        category_id=task.category_id,
        title=task.title,
        content_markdown=task.content_markdown,
        content_html=task.content_html,
        priority=0,
        tags=list(task.tags or []),
    )


def note_copy_for_owner(note: Note, owner: NoteOwner) -> Note:
    """New note row with the same content, attached to another owner"""
    return Note.for_owner(owner, note.content_markdown, note.content_html)
