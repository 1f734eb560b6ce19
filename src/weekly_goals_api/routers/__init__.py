# API routers package
from . import (
    backlog,
    categories,
    follow_ups,
    health,
    notes,
    recurring_tasks,
    tags,
    tasks,
    week_generation,
    weeks,
)

__all__ = [
    "backlog",
    "categories",
    "follow_ups",
    "health",
    "notes",
    "recurring_tasks",
    "tags",
    "tasks",
    "week_generation",
    "weeks",
]
