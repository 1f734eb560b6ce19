"""
New week generation.

Creates a week and fills it from the sources picked in the new week wizard:
active recurring templates, unfinished tasks of an earlier week, follow-ups,
backlog items and ad-hoc tasks. Consumed follow-ups and backlog items are
deleted, and the week totals are recounted at the end.

Selected ids that no longer exist (a template deactivated or a backlog item
planned elsewhere since the wizard loaded) are skipped, unless the service is
created with ``strict=True``.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import NamedTuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from weekly_goals_api import dates
from weekly_goals_api.builders import (
    task_from_follow_up,
    task_from_incomplete,
    task_from_new_task,
    task_from_recurring,
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
    FollowUp,
    NewTaskSpec,
    RecurringTask,
    Task,
    TaskStatus,
    Week,
    WeekGenerationRequest,
)
from weekly_goals_api.services import consume_backlog_item, recompute_week_stats

logger = logging.getLogger(__name__)


class WeekGenerationResult(NamedTuple):
    week: Week
    tasks: list[Task]


@dataclass
class GenerationSources:
    """Items available to the new week wizard"""

    recurring_tasks: list[RecurringTask]
    incomplete_tasks: list[Task]
    follow_ups: list[FollowUp]
    backlog_items: list[BacklogItem]


def _unique(ids: Iterable[int]) -> list[int]:
    """Drop repeated ids, keeping first-seen order"""
    return list(dict.fromkeys(ids))


def collect_generation_sources(
    session: Session, previous_week_id: str | None = None
) -> GenerationSources:
    """
    Load everything the wizard can pick from.

    Args:
        session: Database session
        previous_week_id: Week whose pending tasks are offered for carry-over

    Returns:
        GenerationSources with active templates, pending tasks of the previous
        week, all follow-ups and the backlog ordered by priority
    """
    recurring = session.exec(
        select(RecurringTask)
        .where(RecurringTask.is_active == True)  # noqa: E712
        .order_by(RecurringTask.id)
    ).all()

    incomplete: list[Task] = []
    if previous_week_id:
        incomplete = list(
            session.exec(
                select(Task)
                .where(
                    Task.week_id == previous_week_id,
                    Task.status == TaskStatus.PENDING,
                )
                .order_by(Task.sort_order, Task.id)
            ).all()
        )

    follow_ups = session.exec(select(FollowUp).order_by(FollowUp.id)).all()
    backlog = session.exec(
        select(BacklogItem).order_by(BacklogItem.priority.desc(), BacklogItem.id)
    ).all()

    return GenerationSources(
        recurring_tasks=list(recurring),
        incomplete_tasks=incomplete,
        follow_ups=list(follow_ups),
        backlog_items=list(backlog),
    )


class WeekGenerationService:
    """Builds a new week from wizard selections"""

    def __init__(self, strict: bool = False):
        self.strict = strict

    def _missing(self, resource_type: str, item_id: int) -> None:
        if self.strict:
            raise ResourceNotFoundError(resource_type, item_id)
        logger.info(f"Skipping {resource_type.lower()} {item_id}: no longer available")

    def _add_recurring_tasks(
        self, session: Session, week_id: str, selected_ids: list[int]
    ) -> list[Task]:
        if not selected_ids:
            return []

        templates = session.exec(
            select(RecurringTask)
            .where(RecurringTask.is_active == True)  # noqa: E712
            .order_by(RecurringTask.id)
        ).all()
        wanted = set(selected_ids)
        found = {template.id for template in templates}
        for missing_id in sorted(wanted - found):
            self._missing("Recurring task", missing_id)

        tasks = [
            task_from_recurring(template, week_id)
            for template in templates
            if template.id in wanted
        ]
        session.add_all(tasks)
        session.flush()
        return tasks

    def _carry_over_tasks(
        self, session: Session, week_id: str, selected_ids: list[int]
    ) -> list[Task]:
        tasks = []
        for task_id in selected_ids:
            source = session.get(Task, task_id)
            if source is None:
                self._missing("Task", task_id)
                continue
            # The source task stays untouched in its original week
            task = task_from_incomplete(source, week_id)
            session.add(task)
            tasks.append(task)
        session.flush()
        return tasks

    def _add_follow_ups(
        self, session: Session, week_id: str, selected_ids: list[int]
    ) -> list[Task]:
        tasks = []
        for follow_up_id in selected_ids:
            follow_up = session.get(FollowUp, follow_up_id)
            if follow_up is None:
                self._missing("Follow-up", follow_up_id)
                continue
            task = task_from_follow_up(follow_up, week_id)
            session.add(task)
            session.delete(follow_up)
            session.flush()
            tasks.append(task)
        return tasks

    def _add_backlog_items(
        self, session: Session, week_id: str, selected_ids: list[int]
    ) -> list[Task]:
        tasks = []
        for item_id in selected_ids:
            item = session.get(BacklogItem, item_id)
            if item is None:
                self._missing("Backlog item", item_id)
                continue
            tasks.append(consume_backlog_item(session, item, week_id))
        return tasks

    def _add_new_tasks(
        self, session: Session, week_id: str, specs: list[NewTaskSpec]
    ) -> list[Task]:
        tasks = [task_from_new_task(spec, week_id) for spec in specs]
        session.add_all(tasks)
        session.flush()
        return tasks

    def generate_week(
        self, session: Session, request: WeekGenerationRequest
    ) -> WeekGenerationResult:
        """
        Create the week and materialize tasks from every selected source.

        All writes happen in one transaction; a failure rolls everything back.

        Raises:
            ValidationError: Missing week id, unparsable week id, or ad-hoc
                task without a title
            DuplicateWeekError: The week already exists
            StorageError: The database failed while writing
        """
        week_id = require_text(request.week_id, "week_id")
        for spec in request.new_tasks:
            require_text(spec.title, "title")

        try:
            start_date = dates.week_start_date(week_id)
            end_date = dates.week_end_date(week_id)
        except (ValueError, OverflowError) as e:
            raise ValidationError(str(e), "week_id") from e

        if session.get(Week, week_id) is not None:
            raise DuplicateWeekError(week_id)

        def generate_operation():
            week = Week(
                id=week_id,
                start_date=start_date,
                end_date=end_date,
                total_tasks=0,
                completed_tasks=0,
            )
            session.add(week)
            try:
                session.flush()
            except IntegrityError as e:
                raise DuplicateWeekError(week_id) from e

            tasks: list[Task] = []
            tasks += self._add_recurring_tasks(
                session, week_id, _unique(request.recurring_task_ids)
            )
            tasks += self._carry_over_tasks(
                session, week_id, _unique(request.incomplete_task_ids)
            )
            tasks += self._add_follow_ups(
                session, week_id, _unique(request.follow_up_ids)
            )
            tasks += self._add_backlog_items(
                session, week_id, _unique(request.backlog_item_ids)
            )
            tasks += self._add_new_tasks(session, week_id, request.new_tasks)

            recompute_week_stats(session, week_id)
            return WeekGenerationResult(week, tasks)

        result = safe_execute(session, generate_operation)
        logger.info(f"✅ Generated week {week_id} with {len(result.tasks)} tasks")
        return result


week_generation_service = WeekGenerationService()
