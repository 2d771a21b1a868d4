from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


class Category(str, Enum):
    WORK = "work"
    PERSONAL = "personal"
    SHOPPING = "shopping"
    HEALTH = "health"
    LEARNING = "learning"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


CategoryFilter = Literal["all", "work", "personal", "shopping", "health", "learning"]
StatusFilter = Literal["all", "active", "completed"]


def _clean_title(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("title must not be empty")
    return value


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Naive datetimes from clients are taken as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _clean_description(value: Optional[str]) -> Optional[str]:
    # Blank descriptions are stored as missing
    if value is None:
        return None
    return value.strip() or None


class Task(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    completed: bool = False
    category: Category
    priority: Optional[Priority] = None
    deadline: Optional[datetime] = None
    ai_generated: bool = False
    created_at: datetime
    updated_at: datetime

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _clean_title(value)

    @field_validator("deadline", "created_at", "updated_at")
    @classmethod
    def naive_is_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    category: Category = Category.PERSONAL
    priority: Optional[Priority] = Priority.MEDIUM
    deadline: Optional[datetime] = None
    ai_generated: bool = False

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        return _clean_title(value)

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, value: Optional[str]) -> Optional[str]:
        return _clean_description(value)

    @field_validator("deadline")
    @classmethod
    def naive_is_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None
    category: Optional[Category] = None
    priority: Optional[Priority] = None
    deadline: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _clean_title(value)

    @field_validator("deadline")
    @classmethod
    def naive_is_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class GenerateRequest(BaseModel):
    goal: str

    @field_validator("goal")
    @classmethod
    def goal_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("goal must not be empty")
        return value


class CategorizeRequest(BaseModel):
    title: str
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        return _clean_title(value)

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, value: Optional[str]) -> Optional[str]:
        return _clean_description(value)


class ApiKeyUpdate(BaseModel):
    api_key: Optional[str] = None


class ApiKeyStatus(BaseModel):
    configured: bool
    masked_key: Optional[str] = None


# Shapes expected back from the AI provider. Anything that does not validate
# is treated like a transport failure and replaced by a fallback.

class CategorizeResult(BaseModel):
    category: Category
    priority: Priority
    deadline_days: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("deadline_days", "deadlineDays", "deadline"),
    )


class GeneratedTaskSpec(BaseModel):
    title: str
    description: Optional[str] = None
    category: Category
    priority: Optional[Priority] = None
    deadline_days: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("deadline_days", "deadlineDays", "deadline"),
    )

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _clean_title(value)


class TaskStats(BaseModel):
    total: int
    completed: int
    active: int
    overdue: int
    due_today: int
    completion_rate: int  # percentage, 0-100
    categories: dict[str, int]
    priorities: dict[str, int]
    active_priorities: dict[str, int]


class GenerateResponse(BaseModel):
    tasks: list[Task]
    mode: Literal["ai", "offline"]
    message: str


class InsightsResponse(BaseModel):
    insights: Optional[str] = None
    next_actions: list[str] = []
