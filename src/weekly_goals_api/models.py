from dataclasses import dataclass
from datetime import date, datetime, UTC
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_serializer
from sqlalchemy import JSON, CheckConstraint, UniqueConstraint
from sqlalchemy import Enum as SQLEnum
from sqlmodel import Column, Relationship, SQLModel
from sqlmodel import Field as SQLField

from weekly_goals_api.dates import format_week_range


class TaskStatus(str, Enum):
    """Task status enum"""

    PENDING = "pending"
    COMPLETED = "completed"


def _utcnow() -> datetime:
    return datetime.now(UTC)


# Note owner variants. A note belongs to exactly one task or backlog item.
@dataclass(frozen=True)
class TaskOwner:
    task_id: int


@dataclass(frozen=True)
class BacklogItemOwner:
    backlog_item_id: int


NoteOwner = TaskOwner | BacklogItemOwner


# Database Models (SQLModel)
class ApprovedUser(SQLModel, table=True):  # type: ignore[call-arg]
    """Email allow-list consulted by the auth dependency"""

    __tablename__ = "approved_users"

    id: int | None = SQLField(default=None, primary_key=True)
    email: str = SQLField(unique=True, index=True, max_length=255)
    created_at: datetime | None = SQLField(default_factory=_utcnow)


class CategoryBase(SQLModel):
    """Base category model"""

    name: str = SQLField(min_length=1, max_length=100)
    description: str | None = SQLField(default=None, max_length=1000)
    parent_id: int | None = SQLField(default=None)


class Category(CategoryBase, table=True):  # type: ignore[call-arg]
    """Category database model"""

    __tablename__ = "categories"

    id: int | None = SQLField(default=None, primary_key=True)
    created_at: datetime | None = SQLField(default_factory=_utcnow)


class TagBase(SQLModel):
    """Base tag model"""

    name: str = SQLField(min_length=1, max_length=100)
    category_id: int = SQLField(
        foreign_key="categories.id", ondelete="CASCADE", index=True
    )


class Tag(TagBase, table=True):  # type: ignore[call-arg]
    """Tag vocabulary entry, scoped to a category"""

    __tablename__ = "tags"

    id: int | None = SQLField(default=None, primary_key=True)
    created_at: datetime | None = SQLField(default_factory=_utcnow)


class WeekBase(SQLModel):
    """Base week model"""

    start_date: date
    end_date: date


class Week(WeekBase, table=True):  # type: ignore[call-arg]
    """Week database model, keyed by its ISO week id"""

    __tablename__ = "weeks"

    id: str = SQLField(primary_key=True, max_length=7)
    total_tasks: int = SQLField(default=0, ge=0)
    completed_tasks: int = SQLField(default=0, ge=0)
    created_at: datetime | None = SQLField(default_factory=_utcnow)
    updated_at: datetime | None = SQLField(default_factory=_utcnow)


class ContentMixin(SQLModel):
    """Markdown content shared by tasks, templates, follow-ups and backlog items"""

    category_id: int | None = SQLField(
        default=None, foreign_key="categories.id", ondelete="SET NULL"
    )
    title: str = SQLField(min_length=1, max_length=500)
    content_markdown: str | None = SQLField(default=None)
    content_html: str | None = SQLField(default=None)


class Task(ContentMixin, table=True):  # type: ignore[call-arg]
    """Task database model"""

    __tablename__ = "tasks"

    id: int | None = SQLField(default=None, primary_key=True)
    week_id: str = SQLField(foreign_key="weeks.id", ondelete="CASCADE", index=True)
    status: TaskStatus = SQLField(
        default=TaskStatus.PENDING,
        sa_column=Column(
            SQLEnum(TaskStatus, values_callable=lambda x: [e.value for e in x]),
            nullable=False,
        ),
    )
    skipped: bool = SQLField(default=False)
    is_recurring: bool = SQLField(default=False)
    staleness_count: int = SQLField(default=0, ge=0)
    sort_order: int = SQLField(default=0)
    tags: list[str] = SQLField(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    previous_version_id: int | None = SQLField(default=None)
    created_at: datetime | None = SQLField(default_factory=_utcnow)
    updated_at: datetime | None = SQLField(default_factory=_utcnow)

    category: Category | None = Relationship()


class RecurringTask(ContentMixin, table=True):  # type: ignore[call-arg]
    """Recurring task template, copied into a new task each generated week"""

    __tablename__ = "recurring_tasks"

    id: int | None = SQLField(default=None, primary_key=True)
    is_active: bool = SQLField(default=True)
    created_at: datetime | None = SQLField(default_factory=_utcnow)
    updated_at: datetime | None = SQLField(default_factory=_utcnow)

    category: Category | None = Relationship()


class FollowUp(ContentMixin, table=True):  # type: ignore[call-arg]
    """Follow-up raised from a task, consumed when planned into a week"""

    __tablename__ = "follow_ups"

    id: int | None = SQLField(default=None, primary_key=True)
    source_task_id: int = SQLField(foreign_key="tasks.id", ondelete="CASCADE")
    created_at: datetime | None = SQLField(default_factory=_utcnow)

    category: Category | None = Relationship()


class BacklogItem(ContentMixin, table=True):  # type: ignore[call-arg]
    """Deferred task candidate"""

    __tablename__ = "backlog_items"

    id: int | None = SQLField(default=None, primary_key=True)
    priority: int = SQLField(default=0)
    tags: list[str] = SQLField(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    created_at: datetime | None = SQLField(default_factory=_utcnow)
    updated_at: datetime | None = SQLField(default_factory=_utcnow)

    category: Category | None = Relationship()


class Note(SQLModel, table=True):  # type: ignore[call-arg]
    """Markdown note attached to exactly one task or backlog item"""

    __tablename__ = "notes"
    __table_args__ = (
        CheckConstraint(
            "(task_id IS NULL) <> (backlog_item_id IS NULL)",
            name="ck_notes_single_owner",
        ),
    )

    id: int | None = SQLField(default=None, primary_key=True)
    task_id: int | None = SQLField(
        default=None, foreign_key="tasks.id", ondelete="CASCADE", index=True
    )
    backlog_item_id: int | None = SQLField(
        default=None, foreign_key="backlog_items.id", ondelete="CASCADE", index=True
    )
    content_markdown: str
    content_html: str
    created_at: datetime | None = SQLField(default_factory=_utcnow)
    updated_at: datetime | None = SQLField(default_factory=_utcnow)

    @classmethod
    def for_owner(
        cls, owner: NoteOwner, content_markdown: str, content_html: str
    ) -> "Note":
        """Build a note attached to the given owner"""
        if isinstance(owner, TaskOwner):
            return cls(
                task_id=owner.task_id,
                content_markdown=content_markdown,
                content_html=content_html,
            )
        if isinstance(owner, BacklogItemOwner):
            return cls(
                backlog_item_id=owner.backlog_item_id,
                content_markdown=content_markdown,
                content_html=content_html,
            )
        raise TypeError(f"Unsupported note owner: {owner!r}")

    @property
    def owner(self) -> NoteOwner:
        if self.task_id is not None:
            return TaskOwner(self.task_id)
        return BacklogItemOwner(self.backlog_item_id)


class UserProfile(SQLModel, table=True):  # type: ignore[call-arg]
    """Per-user body measurements used by the weight tracker"""

    __tablename__ = "user_profiles"

    id: int | None = SQLField(default=None, primary_key=True)
    user_key: str = SQLField(unique=True, max_length=255)
    height_inches: Decimal | None = SQLField(
        default=None, max_digits=4, decimal_places=1
    )
    created_at: datetime | None = SQLField(default_factory=_utcnow)
    updated_at: datetime | None = SQLField(default_factory=_utcnow)


class WeightEntry(SQLModel, table=True):  # type: ignore[call-arg]
    """One body-weight measurement per user and day"""

    __tablename__ = "weight_entries"
    __table_args__ = (
        UniqueConstraint("user_key", "recorded_on", name="uq_weight_entries_day"),
    )

    id: UUID = SQLField(default_factory=uuid4, primary_key=True)
    user_key: str = SQLField(max_length=255, index=True)
    weight: Decimal = SQLField(max_digits=5, decimal_places=1)
    body_fat_percentage: Decimal | None = SQLField(
        default=None, max_digits=4, decimal_places=1
    )
    muscle_mass: Decimal | None = SQLField(
        default=None, max_digits=5, decimal_places=1
    )
    bmi: Decimal | None = SQLField(default=None, max_digits=4, decimal_places=1)
    recorded_on: date = SQLField(index=True)
    created_at: datetime | None = SQLField(default_factory=_utcnow)


# API Request/Response Models
class CategoryCreate(CategoryBase):
    """Category creation request"""

    pass


class CategoryUpdate(BaseModel):
    """Category update request"""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=1000)
    parent_id: int | None = None


class CategoryResponse(CategoryBase):
    """Category response model"""

    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TagCreate(TagBase):
    """Tag creation request"""

    pass


class TagResponse(TagBase):
    """Tag response model"""

    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WeekCreate(WeekBase):
    """Week creation request with explicit dates"""

    id: str = Field(..., min_length=1, max_length=7)


class WeekResponse(BaseModel):
    """Week response model"""

    id: str
    start_date: date
    end_date: date
    total_tasks: int
    completed_tasks: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def label(self) -> str:
        return format_week_range(self.start_date, self.end_date)


class WeekSuggestionResponse(BaseModel):
    """Suggested next week"""

    week_id: str
    start_date: date
    end_date: date

    @computed_field  # type: ignore[prop-decorator]
    @property
    def label(self) -> str:
        return format_week_range(self.start_date, self.end_date)


class ContentCreate(BaseModel):
    """Shared fields for creating markdown content entities"""

    title: str = Field(..., min_length=1, max_length=500)
    category_id: int | None = None
    content_markdown: str | None = None


class ContentUpdate(BaseModel):
    """Shared fields for updating markdown content entities"""

    title: str | None = Field(None, min_length=1, max_length=500)
    category_id: int | None = None
    content_markdown: str | None = None


class ContentResponse(BaseModel):
    """Shared fields of markdown content responses"""

    id: int
    title: str
    category_id: int | None
    content_markdown: str | None
    content_html: str | None
    category: CategoryResponse | None = None

    model_config = ConfigDict(from_attributes=True)


class TaskCreate(ContentCreate):
    """Task creation request"""

    week_id: str = Field(..., min_length=1, max_length=7)
    is_recurring: bool = False
    sort_order: int = 0
    tags: list[str] = Field(default_factory=list)


class TaskUpdate(ContentUpdate):
    """Task update request"""

    status: TaskStatus | None = None
    skipped: bool | None = None
    sort_order: int | None = None
    tags: list[str] | None = None


class TaskResponse(ContentResponse):
    """Task response model"""

    week_id: str
    status: TaskStatus
    skipped: bool
    is_recurring: bool
    staleness_count: int
    sort_order: int
    previous_version_id: int | None
    tags: list[str]
    created_at: datetime
    updated_at: datetime


class RecurringTaskCreate(ContentCreate):
    """Recurring task creation request"""

    is_active: bool = True


class RecurringTaskUpdate(ContentUpdate):
    """Recurring task update request"""

    is_active: bool | None = None


class RecurringTaskResponse(ContentResponse):
    """Recurring task response model"""

    is_active: bool
    created_at: datetime
    updated_at: datetime


class FollowUpCreate(ContentCreate):
    """Follow-up creation request"""

    source_task_id: int


class FollowUpResponse(ContentResponse):
    """Follow-up response model"""

    source_task_id: int
    created_at: datetime


class BacklogItemCreate(ContentCreate):
    """Backlog item creation request"""

    priority: int = 0
    tags: list[str] = Field(default_factory=list)


class BacklogItemUpdate(ContentUpdate):
    """Backlog item update request"""

    priority: int | None = None
    tags: list[str] | None = None


class BacklogItemResponse(ContentResponse):
    """Backlog item response model"""

    priority: int
    tags: list[str]
    created_at: datetime
    updated_at: datetime


class MoveToWeekRequest(BaseModel):
    """Request to plan a backlog item into a week"""

    week_id: str = Field(..., min_length=1, max_length=7)


class NoteCreate(BaseModel):
    """Note creation request; exactly one owner id must be set"""

    content_markdown: str = Field(..., min_length=1)
    task_id: int | None = None
    backlog_item_id: int | None = None


class NoteUpdate(BaseModel):
    """Note update request"""

    content_markdown: str | None = Field(None, min_length=1)


class NoteResponse(BaseModel):
    """Note response model"""

    id: int
    task_id: int | None
    backlog_item_id: int | None
    content_markdown: str
    content_html: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NewTaskSpec(BaseModel):
    """Ad-hoc task created directly by the new week wizard"""

    title: str = Field(..., max_length=500)
    category_id: int | None = None
    content_markdown: str | None = None


class WeekGenerationRequest(BaseModel):
    """Request to create a week from the selected sources"""

    week_id: str = Field(..., max_length=7)
    recurring_task_ids: list[int] = Field(default_factory=list)
    incomplete_task_ids: list[int] = Field(default_factory=list)
    follow_up_ids: list[int] = Field(default_factory=list)
    backlog_item_ids: list[int] = Field(default_factory=list)
    new_tasks: list[NewTaskSpec] = Field(default_factory=list)


class WeekGenerationResponse(BaseModel):
    """Created week and its tasks"""

    week: WeekResponse
    tasks: list[TaskResponse]


class GenerationSourcesResponse(BaseModel):
    """Items the new week wizard can choose from"""

    recurring_tasks: list[RecurringTaskResponse]
    incomplete_tasks: list[TaskResponse]
    follow_ups: list[FollowUpResponse]
    backlog_items: list[BacklogItemResponse]


class WeightEntryResponse(BaseModel):
    """Weight entry response model"""

    id: UUID
    user_key: str
    weight: Decimal
    body_fat_percentage: Decimal | None
    muscle_mass: Decimal | None
    bmi: Decimal | None
    recorded_on: date
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("weight", "body_fat_percentage", "muscle_mass", "bmi")
    def serialize_measurement(self, value: Decimal | None) -> float | None:
        """Convert Decimal to float for JSON serialization"""
        return float(value) if value is not None else None


class HealthDataPoint(BaseModel):
    """Single dated sample of a health metric"""

    date: str
    qty: float


class HealthMetric(BaseModel):
    """Named series exported by the health app"""

    name: str
    units: str | None = None
    data: list[HealthDataPoint] = Field(default_factory=list)


class HealthData(BaseModel):
    metrics: list[HealthMetric] | None = None


class HealthSyncPayload(BaseModel):
    """Health export webhook body"""

    data: HealthData | None = None


class HealthSyncResponse(BaseModel):
    """Outcome of a health data sync"""

    message: str
    inserted: int
    updated: int


class ErrorDetail(BaseModel):
    """Error detail model following API standardization"""

    code: str = Field(..., description="Error code for programmatic handling")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | None = Field(
        default=None, description="Additional error context"
    )


class ErrorResponse(BaseModel):
    """Standardized error response model"""

    error: ErrorDetail

    @classmethod
    def create(
        cls, code: str, message: str, details: dict[str, Any] | None = None
    ) -> "ErrorResponse":
        """Create a standardized error response"""
        return cls(error=ErrorDetail(code=code, message=message, details=details))
