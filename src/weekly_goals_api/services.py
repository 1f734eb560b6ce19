"""
Entity services built on the base service class
"""

import logging
from datetime import date, datetime, UTC

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, select

from weekly_goals_api import dates
from weekly_goals_api.base_service import BaseService
from weekly_goals_api.builders import (
    backlog_item_from_task,
    note_copy_for_owner,
    task_from_backlog_item,
)
from weekly_goals_api.common.error_handlers import (
    DuplicateWeekError,
    ResourceNotFoundError,
    ValidationError,
    require_text,
    safe_execute,
)
from weekly_goals_api.models import (
    BacklogItem,
    BacklogItemCreate,
    BacklogItemOwner,
    BacklogItemUpdate,
    Category,
    CategoryCreate,
    CategoryUpdate,
    FollowUp,
    FollowUpCreate,
    Note,
    NoteCreate,
    NoteOwner,
    NoteUpdate,
    RecurringTask,
    RecurringTaskCreate,
    RecurringTaskUpdate,
    Tag,
    TagCreate,
    Task,
    TaskCreate,
    TaskOwner,
    TaskStatus,
    TaskUpdate,
    Week,
    WeekCreate,
)
from weekly_goals_api.rendering import render_markdown, render_optional

logger = logging.getLogger(__name__)


def recompute_week_stats(session: Session, week_id: str) -> Week | None:
    """
    Recount a week's tasks and store the totals on the week row.

    Totals are always recounted from the tasks table rather than adjusted,
    so they cannot drift from the actual rows. Does not commit.
    """
    week = session.get(Week, week_id)
    if week is None:
        return None

    session.flush()
    total = session.exec(
        select(func.count()).select_from(Task).where(Task.week_id == week_id)
    ).one()
    completed = session.exec(
        select(func.count())
        .select_from(Task)
        .where(Task.week_id == week_id, Task.status == TaskStatus.COMPLETED)
    ).one()

    week.total_tasks = total
    week.completed_tasks = completed
    week.updated_at = datetime.now(UTC)
    session.add(week)
    session.flush()
    return week


def _notes_of(owner: NoteOwner):
    statement = select(Note).order_by(Note.id)
    if isinstance(owner, TaskOwner):
        return statement.where(Note.task_id == owner.task_id)
    return statement.where(Note.backlog_item_id == owner.backlog_item_id)


def copy_notes(session: Session, source: NoteOwner, target: NoteOwner) -> list[Note]:
    """Attach copies of every note of ``source`` to ``target``. Does not commit."""
    notes = session.exec(_notes_of(source)).all()
    copies = [note_copy_for_owner(note, target) for note in notes]
    for note in copies:
        session.add(note)
    session.flush()
    return copies


def delete_notes(session: Session, owner: NoteOwner) -> int:
    """Delete every note of ``owner``. Does not commit."""
    notes = session.exec(_notes_of(owner)).all()
    for note in notes:
        session.delete(note)
    session.flush()
    return len(notes)


def consume_backlog_item(session: Session, item: BacklogItem, week_id: str) -> Task:
    """
    Turn a backlog item into a task of the given week.

    Notes are copied onto the new task, then any notes still attached to the
    item are removed together with the item. Does not commit.
    """
    task = task_from_backlog_item(item, week_id)
    session.add(task)
    session.flush()

    copied = copy_notes(session, BacklogItemOwner(item.id), TaskOwner(task.id))
    delete_notes(session, BacklogItemOwner(item.id))
    session.delete(item)
    session.flush()

    logger.info(
        f"Backlog item {item.id} planned into week {week_id} as task {task.id} "
        f"({len(copied)} notes moved)"
    )
    return task


class WeekService(BaseService[Week, WeekCreate, WeekCreate]):
    """Week service using base service"""

    def __init__(self):
        super().__init__(Week)

    def _create_instance(self, data: WeekCreate, **kwargs) -> Week:
        return Week(id=data.id, start_date=data.start_date, end_date=data.end_date)

    def _default_order(self):
        return Week.id.desc()

    def get_weeks(self, session: Session) -> list[Week]:
        """Get all weeks, most recent first"""
        return self.get_all(session)

    def get_week(self, session: Session, week_id: str) -> Week:
        return self.get_by_id(session, week_id)

    def create_week(self, session: Session, week_data: WeekCreate) -> Week:
        """Create an empty week with explicit dates"""
        require_text(week_data.id, "id")
        if week_data.end_date < week_data.start_date:
            raise ValidationError("end_date must not be before start_date", "end_date")
        if self.find_by_id(session, week_data.id):
            raise DuplicateWeekError(week_data.id)

        def create_operation():
            week = self._create_instance(week_data)
            session.add(week)
            try:
                session.flush()
            except IntegrityError as e:
                raise DuplicateWeekError(week_data.id) from e
            return week

        return safe_execute(session, create_operation)

    def delete_week(self, session: Session, week_id: str) -> bool:
        """Delete a week; its tasks are removed by cascade"""
        return self.delete(session, week_id)

    def get_week_tasks(self, session: Session, week_id: str) -> list[Task]:
        """Get tasks of a week in display order"""
        statement = (
            select(Task)
            .where(Task.week_id == week_id)
            .order_by(Task.sort_order, Task.id)
        )
        return list(session.exec(statement).all())

    def get_latest_week(self, session: Session) -> Week | None:
        return session.exec(select(Week).order_by(Week.id.desc()).limit(1)).first()

    def suggest_next_week(
        self, session: Session, today: date | None = None
    ) -> dates.WeekSuggestion:
        """Suggest the next week after the most recent one"""
        latest = self.get_latest_week(session)
        if latest is None:
            return dates.suggest_next_week_dates(today=today)
        return dates.suggest_next_week_dates(latest.id, latest.end_date)


class TaskService(BaseService[Task, TaskCreate, TaskUpdate]):
    """Task service using base service"""

    def __init__(self, week_service: WeekService | None = None):
        super().__init__(Task)
        self.week_service = week_service or WeekService()

    def _create_instance(self, data: TaskCreate, **kwargs) -> Task:
        """Create a new task instance"""
        return Task(
            week_id=data.week_id,
            category_id=data.category_id or None,
            title=data.title,
            content_markdown=data.content_markdown or None,
            content_html=render_optional(data.content_markdown),
            is_recurring=data.is_recurring,
            sort_order=data.sort_order,
            tags=data.tags,
        )

    def get_tasks(self, session: Session, week_id: str | None = None) -> list[Task]:
        """Get all tasks, optionally restricted to one week"""
        return self.get_all(session, week_id=week_id)

    def get_task(self, session: Session, task_id: int) -> Task:
        return self.get_by_id(session, task_id)

    def create_task(self, session: Session, task_data: TaskCreate) -> Task:
        """Create a task in an existing week and refresh the week totals"""
        require_text(task_data.title, "title")
        self.week_service.get_week(session, task_data.week_id)

        def create_operation():
            task = self._create_instance(task_data)
            session.add(task)
            session.flush()
            recompute_week_stats(session, task.week_id)
            return task

        return safe_execute(session, create_operation)

    def update_task(self, session: Session, task_id: int, task_data: TaskUpdate) -> Task:
        """Update task; week totals are recounted when the status changes"""
        task = self.get_task(session, task_id)
        update_data = task_data.model_dump(exclude_unset=True)

        def update_operation():
            self._apply_update(task, update_data)
            task.updated_at = datetime.now(UTC)
            session.add(task)
            session.flush()
            if "status" in update_data:
                recompute_week_stats(session, task.week_id)
            return task

        return safe_execute(session, update_operation)

    def delete_task(self, session: Session, task_id: int) -> bool:
        """Delete task and recount its week"""
        task = self.get_task(session, task_id)
        week_id = task.week_id

        def delete_operation():
            session.delete(task)
            session.flush()
            recompute_week_stats(session, week_id)
            return True

        return safe_execute(session, delete_operation)

    def toggle_status(self, session: Session, task_id: int) -> Task:
        """Flip a task between pending and completed"""
        task = self.get_task(session, task_id)

        def toggle_operation():
            task.status = (
                TaskStatus.COMPLETED
                if task.status == TaskStatus.PENDING
                else TaskStatus.PENDING
            )
            task.updated_at = datetime.now(UTC)
            session.add(task)
            session.flush()
            recompute_week_stats(session, task.week_id)
            return task

        return safe_execute(session, toggle_operation)

    def move_to_backlog(self, session: Session, task_id: int) -> BacklogItem:
        """Move a task back to the backlog, keeping its notes"""
        task = self.get_task(session, task_id)
        week_id = task.week_id

        def move_operation():
            item = backlog_item_from_task(task)
            session.add(item)
            session.flush()
            copy_notes(session, TaskOwner(task.id), BacklogItemOwner(item.id))
            delete_notes(session, TaskOwner(task.id))
            session.delete(task)
            session.flush()
            recompute_week_stats(session, week_id)
            return item

        item = safe_execute(session, move_operation)
        logger.info(f"Task {task_id} moved to backlog as item {item.id}")
        return item

    def get_task_notes(self, session: Session, task_id: int) -> list[Note]:
        self.get_task(session, task_id)
        return note_service.get_notes(session, task_id=task_id)


class RecurringTaskService(
    BaseService[RecurringTask, RecurringTaskCreate, RecurringTaskUpdate]
):
    """Recurring task template service using base service"""

    resource_name = "Recurring task"

    def __init__(self):
        super().__init__(RecurringTask)

    def _create_instance(self, data: RecurringTaskCreate, **kwargs) -> RecurringTask:
        return RecurringTask(
            category_id=data.category_id or None,
            title=data.title,
            content_markdown=data.content_markdown or None,
            content_html=render_optional(data.content_markdown),
            is_active=data.is_active,
        )

    def get_recurring_tasks(
        self, session: Session, is_active: bool | None = None
    ) -> list[RecurringTask]:
        return self.get_all(session, is_active=is_active)

    def get_recurring_task(self, session: Session, task_id: int) -> RecurringTask:
        return self.get_by_id(session, task_id)

    def create_recurring_task(
        self, session: Session, task_data: RecurringTaskCreate
    ) -> RecurringTask:
        require_text(task_data.title, "title")
        return self.create(session, task_data)

    def update_recurring_task(
        self, session: Session, task_id: int, task_data: RecurringTaskUpdate
    ) -> RecurringTask:
        return self.update(session, task_id, task_data)

    def delete_recurring_task(self, session: Session, task_id: int) -> bool:
        return self.delete(session, task_id)

    def toggle_active(self, session: Session, task_id: int) -> RecurringTask:
        """Activate or deactivate a template"""
        template = self.get_recurring_task(session, task_id)

        def toggle_operation():
            template.is_active = not template.is_active
            template.updated_at = datetime.now(UTC)
            session.add(template)
            session.flush()
            return template

        return safe_execute(session, toggle_operation)


class FollowUpService(BaseService[FollowUp, FollowUpCreate, FollowUpCreate]):
    """Follow-up service using base service"""

    resource_name = "Follow-up"

    def __init__(self):
        super().__init__(FollowUp)

    def _create_instance(self, data: FollowUpCreate, **kwargs) -> FollowUp:
        return FollowUp(
            source_task_id=data.source_task_id,
            category_id=data.category_id or None,
            title=data.title,
            content_markdown=data.content_markdown or None,
            content_html=render_optional(data.content_markdown),
        )

    def get_follow_ups(self, session: Session) -> list[FollowUp]:
        return self.get_all(session)

    def get_follow_up(self, session: Session, follow_up_id: int) -> FollowUp:
        return self.get_by_id(session, follow_up_id)

    def create_follow_up(
        self, session: Session, follow_up_data: FollowUpCreate
    ) -> FollowUp:
        """Create a follow-up for an existing task"""
        require_text(follow_up_data.title, "title")
        if session.get(Task, follow_up_data.source_task_id) is None:
            raise ResourceNotFoundError("Task", follow_up_data.source_task_id)
        return self.create(session, follow_up_data)

    def delete_follow_up(self, session: Session, follow_up_id: int) -> bool:
        return self.delete(session, follow_up_id)


class BacklogService(BaseService[BacklogItem, BacklogItemCreate, BacklogItemUpdate]):
    """Backlog service using base service"""

    resource_name = "Backlog item"

    def __init__(self, week_service: WeekService | None = None):
        super().__init__(BacklogItem)
        self.week_service = week_service or WeekService()

    def _create_instance(self, data: BacklogItemCreate, **kwargs) -> BacklogItem:
        return BacklogItem(
            category_id=data.category_id or None,
            title=data.title,
            content_markdown=data.content_markdown or None,
            content_html=render_optional(data.content_markdown),
            priority=data.priority,
            tags=data.tags,
        )

    def _default_order(self):
        return BacklogItem.priority.desc()

    def get_backlog_items(self, session: Session) -> list[BacklogItem]:
        """Get backlog items, highest priority first"""
        return self.get_all(session)

    def get_backlog_item(self, session: Session, item_id: int) -> BacklogItem:
        return self.get_by_id(session, item_id)

    def create_backlog_item(
        self, session: Session, item_data: BacklogItemCreate
    ) -> BacklogItem:
        require_text(item_data.title, "title")
        return self.create(session, item_data)

    def update_backlog_item(
        self, session: Session, item_id: int, item_data: BacklogItemUpdate
    ) -> BacklogItem:
        return self.update(session, item_id, item_data)

    def delete_backlog_item(self, session: Session, item_id: int) -> bool:
        return self.delete(session, item_id)

    def move_to_week(self, session: Session, item_id: int, week_id: str) -> Task:
        """Plan a backlog item into an existing week"""
        require_text(week_id, "week_id")
        item = self.get_backlog_item(session, item_id)
        self.week_service.get_week(session, week_id)

        def move_operation():
            task = consume_backlog_item(session, item, week_id)
            recompute_week_stats(session, week_id)
            return task

        return safe_execute(session, move_operation)

    def get_backlog_item_notes(self, session: Session, item_id: int) -> list[Note]:
        self.get_backlog_item(session, item_id)
        return note_service.get_notes(session, backlog_item_id=item_id)


class CategoryService(BaseService[Category, CategoryCreate, CategoryUpdate]):
    """Category service using base service"""

    def __init__(self):
        super().__init__(Category)

    def _create_instance(self, data: CategoryCreate, **kwargs) -> Category:
        return Category(
            name=data.name,
            description=data.description or None,
            parent_id=data.parent_id or None,
        )

    def get_categories(self, session: Session) -> list[Category]:
        return self.get_all(session)

    def get_category(self, session: Session, category_id: int) -> Category:
        return self.get_by_id(session, category_id)

    def create_category(self, session: Session, category_data: CategoryCreate) -> Category:
        require_text(category_data.name, "name")
        return self.create(session, category_data)

    def update_category(
        self, session: Session, category_id: int, category_data: CategoryUpdate
    ) -> Category:
        return self.update(session, category_id, category_data)

    def delete_category(self, session: Session, category_id: int) -> bool:
        return self.delete(session, category_id)


class TagService(BaseService[Tag, TagCreate, TagCreate]):
    """Tag service using base service"""

    def __init__(self):
        super().__init__(Tag)

    def _create_instance(self, data: TagCreate, **kwargs) -> Tag:
        return Tag(name=data.name.strip(), category_id=data.category_id)

    def _default_order(self):
        return Tag.name.asc()

    def get_tags(self, session: Session, category_id: int | None = None) -> list[Tag]:
        """Get tags, optionally only those of one category"""
        return self.get_all(session, category_id=category_id)

    def create_tag(self, session: Session, tag_data: TagCreate) -> Tag:
        require_text(tag_data.name, "name")
        if session.get(Category, tag_data.category_id) is None:
            raise ResourceNotFoundError("Category", tag_data.category_id)
        return self.create(session, tag_data)

    def delete_tag(self, session: Session, tag_id: int) -> bool:
        return self.delete(session, tag_id)


class NoteService(BaseService[Note, NoteCreate, NoteUpdate]):
    """Note service using base service"""

    def __init__(self):
        super().__init__(Note)

    @staticmethod
    def owner_from_ids(
        task_id: int | None, backlog_item_id: int | None
    ) -> NoteOwner:
        """Resolve the single owner of a note from request ids"""
        if task_id and backlog_item_id:
            raise ValidationError(
                "A note belongs to either a task or a backlog item, not both"
            )
        if task_id:
            return TaskOwner(task_id)
        if backlog_item_id:
            return BacklogItemOwner(backlog_item_id)
        raise ValidationError("Either task_id or backlog_item_id is required")

    def _create_instance(self, data: NoteCreate, **kwargs) -> Note:
        return Note.for_owner(
            kwargs["owner"], data.content_markdown, render_markdown(data.content_markdown)
        )

    def _apply_update(self, entity: Note, update_data: dict) -> None:
        content = update_data.get("content_markdown")
        if content is not None:
            entity.content_markdown = content
            entity.content_html = render_markdown(content)

    def get_notes(
        self,
        session: Session,
        task_id: int | None = None,
        backlog_item_id: int | None = None,
    ) -> list[Note]:
        return self.get_all(session, task_id=task_id, backlog_item_id=backlog_item_id)

    def get_note(self, session: Session, note_id: int) -> Note:
        return self.get_by_id(session, note_id)

    def create_note(self, session: Session, note_data: NoteCreate) -> Note:
        """Create a note attached to an existing task or backlog item"""
        require_text(note_data.content_markdown, "content_markdown")
        owner = self.owner_from_ids(note_data.task_id, note_data.backlog_item_id)
        if isinstance(owner, TaskOwner):
            if session.get(Task, owner.task_id) is None:
                raise ResourceNotFoundError("Task", owner.task_id)
        elif session.get(BacklogItem, owner.backlog_item_id) is None:
            raise ResourceNotFoundError("Backlog item", owner.backlog_item_id)
        return self.create(session, note_data, owner=owner)

    def update_note(self, session: Session, note_id: int, note_data: NoteUpdate) -> Note:
        return self.update(session, note_id, note_data)

    def delete_note(self, session: Session, note_id: int) -> bool:
        return self.delete(session, note_id)


# Create service instances for use in routers
week_service = WeekService()
task_service = TaskService(week_service)
recurring_task_service = RecurringTaskService()
follow_up_service = FollowUpService()
backlog_service = BacklogService(week_service)
category_service = CategoryService()
tag_service = TagService()
note_service = NoteService()
