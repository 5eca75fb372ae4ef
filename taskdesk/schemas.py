from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from .models import ProjectStatus, TaskStatus

PRIORITY_PATTERN = r"^P[0-3]$"


# --- contexts ---------------------------------------------------------------


class ContextBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    color: str | None = None
    icon: str | None = None


class ContextCreate(ContextBase):
    sort_order: int | None = None


class ContextUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=120)
    color: str | None = None
    icon: str | None = None
    sort_order: int | None = None


class ContextOut(ContextBase):
    model_config = ConfigDict(from_attributes=True)
    id: str
    sort_order: int
    created_at: datetime
    updated_at: datetime


# --- projects ---------------------------------------------------------------


class ProjectBase(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(..., min_length=1, max_length=280)
    description: str | None = None
    status: ProjectStatus = ProjectStatus.active
    context_id: str | None = None


class ProjectCreate(ProjectBase):
    sort_order: int | None = None


class ProjectUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=280)
    description: str | None = None
    status: ProjectStatus | None = None
    context_id: str | None = None
    sort_order: int | None = None


class ProjectOut(ProjectBase):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
    id: str
    sort_order: int
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None


# --- tasks ------------------------------------------------------------------


class TaskBase(BaseModel):
    # Serialize enums as their values (e.g., "inbox")
    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(..., min_length=1, max_length=280)
    notes: str | None = None
    status: TaskStatus = TaskStatus.inbox
    when_date: date | None = None
    deadline: date | None = None
    project_id: str | None = None
    context_id: str | None = None
    priority: str | None = Field(None, pattern=PRIORITY_PATTERN)


class TaskCreate(TaskBase):
    pass


class TaskUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=280)
    notes: str | None = None
    status: TaskStatus | None = None
    when_date: date | None = None
    deadline: date | None = None
    project_id: str | None = None
    context_id: str | None = None
    priority: str | None = Field(None, pattern=PRIORITY_PATTERN)
    sort_order: int | None = None


class TaskOut(TaskBase):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
    id: str
    sort_order: int
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None


# --- quick entry ------------------------------------------------------------


class RawTokens(BaseModel):
    """Token text exactly as typed, present even when it did not resolve."""

    context: str | None = None
    project: str | None = None
    when_date: str | None = None
    deadline: str | None = None


class ParsedTaskOut(BaseModel):
    title: str
    context_id: str | None = None
    project_id: str | None = None
    when_date: date | None = None
    deadline: date | None = None
    raw: RawTokens = Field(default_factory=RawTokens)


class IngestOut(BaseModel):
    task: TaskOut
    raw: RawTokens
