"""
Base service class with common CRUD operations
"""

from abc import ABC, abstractmethod
from datetime import datetime, UTC
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlmodel import Session, SQLModel, select

from weekly_goals_api.common.error_handlers import (
    ResourceNotFoundError,
    safe_execute,
)
from weekly_goals_api.rendering import render_optional

T = TypeVar("T", bound=SQLModel)
CreateT = TypeVar("CreateT", bound=BaseModel)
UpdateT = TypeVar("UpdateT", bound=BaseModel)


class BaseService(ABC, Generic[T, CreateT, UpdateT]):
    """Base service class with common CRUD operations"""

    resource_name: str = ""

    def __init__(self, model: type[T]):
        self.model = model
        self.resource_name = self.resource_name or model.__name__

    @abstractmethod
    def _create_instance(self, data: CreateT, **kwargs) -> T:
        """Create a new model instance. Must be implemented by subclasses."""
        pass

    def _default_order(self):
        """Default ordering for list queries. Override in subclasses if needed."""
        return self.model.id.asc()  # type: ignore[attr-defined]

    def _apply_update(self, entity: T, update_data: dict[str, Any]) -> None:
        """Copy update fields onto the entity, re-rendering markdown content"""
        for field, value in update_data.items():
            if field == "tags":
                value = list(value or [])
            if hasattr(entity, field):
                setattr(entity, field, value)
        if "content_markdown" in update_data and hasattr(entity, "content_html"):
            entity.content_html = render_optional(update_data["content_markdown"])

    def create(self, session: Session, data: CreateT, **kwargs) -> T:
        """Create a new entity"""

        def create_operation():
            instance = self._create_instance(data, **kwargs)
            session.add(instance)
            session.flush()  # Get ID without committing
            return instance

        return safe_execute(session, create_operation)

    def find_by_id(self, session: Session, entity_id: int | str) -> T | None:
        """Get entity by ID or None"""
        return session.get(self.model, entity_id)

    def get_by_id(self, session: Session, entity_id: int | str) -> T:
        """Get entity by ID, raising ResourceNotFoundError when missing"""
        result = self.find_by_id(session, entity_id)
        if not result:
            raise ResourceNotFoundError(self.resource_name, entity_id)
        return result

    def get_all(
        self,
        session: Session,
        skip: int = 0,
        limit: int | None = None,
        **filters,
    ) -> list[T]:
        """Get all entities with optional equality filters"""
        statement = select(self.model)

        for key, value in filters.items():
            if hasattr(self.model, key) and value is not None:
                statement = statement.where(getattr(self.model, key) == value)

        statement = statement.order_by(self._default_order()).offset(skip)
        if limit is not None:
            statement = statement.limit(limit)
        return list(session.exec(statement).all())

    def update(self, session: Session, entity_id: int | str, data: UpdateT) -> T:
        """Update entity"""
        # This will raise ResourceNotFoundError if not found
        entity = self.get_by_id(session, entity_id)

        def update_operation():
            self._apply_update(entity, data.model_dump(exclude_unset=True))

            if hasattr(entity, "updated_at"):
                entity.updated_at = datetime.now(UTC)

            session.add(entity)
            session.flush()
            return entity

        return safe_execute(session, update_operation)

    def delete(self, session: Session, entity_id: int | str) -> bool:
        """Delete entity"""
        # This will raise ResourceNotFoundError if not found
        entity = self.get_by_id(session, entity_id)

        def delete_operation():
            session.delete(entity)
            return True

        return safe_execute(session, delete_operation)
