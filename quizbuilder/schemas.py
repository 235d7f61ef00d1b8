from pydantic import BaseModel, Field, field_validator
from typing import Any, List, Optional
from datetime import datetime
from enum import Enum

from quizbuilder.utils.time_utils import convert_to_local

MAX_IMAGES = 4


class ModuleType(str, Enum):
    MODULE = "module"
    EXAM = "exam"


class ImageLayout(str, Enum):
    GRID = "grid"
    CAROUSEL = "carousel"
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class FailureReason(str, Enum):
    NOT_FOUND = "not_found"
    LAST_ALTERNATIVE = "last_alternative"
    LAST_CORRECT_ALTERNATIVE = "last_correct_alternative"
    INVALID_OPERATION = "invalid_operation"
    CONSTRAINT_VIOLATION = "constraint_violation"
    STORE_ERROR = "store_error"


def _cap_images(urls: Optional[List[str]]) -> Optional[List[str]]:
    if not urls:
        return None
    return urls[:MAX_IMAGES]


def _required(value):
    if value is None:
        raise ValueError("may be omitted but not null")
    return value


class Row(BaseModel):
    id: str
    order: int
    created_at: Optional[datetime] = None

    @field_validator("created_at")
    @classmethod
    def localize(cls, value):
        return convert_to_local(value) if value else value


# Entities
class Alternative(Row):
    exercise_id: str
    content: str
    is_correct: bool
    explanation: Optional[str] = None
    image_url: Optional[str] = None
    image_urls: Optional[List[str]] = None


class Exercise(Row):
    module_id: str
    question: str
    image_url: Optional[str] = None
    image_urls: Optional[List[str]] = None
    video_url: Optional[str] = None
    image_display_size: str = "medium"
    image_layout: ImageLayout = ImageLayout.GRID
    weight: float = 1


class Module(Row):
    company_id: str
    title: str
    description: Optional[str] = None
    type: ModuleType = ModuleType.MODULE
    is_unlocked: bool = False


# Payloads
class AlternativeCreate(BaseModel):
    content: str
    is_correct: bool = False
    explanation: str = ""
    image_url: Optional[str] = None
    image_urls: Optional[List[str]] = None

    @field_validator("image_urls")
    @classmethod
    def cap_images(cls, value):
        return _cap_images(value)


class AlternativeUpdate(BaseModel):
    content: Optional[str] = None
    is_correct: Optional[bool] = None
    explanation: Optional[str] = None
    image_url: Optional[str] = None
    image_urls: Optional[List[str]] = None

    @field_validator("content")
    @classmethod
    def not_null(cls, value):
        return _required(value)

    @field_validator("image_urls")
    @classmethod
    def cap_images(cls, value):
        return _cap_images(value)


class ExerciseCreate(BaseModel):
    question: str
    image_url: str = ""
    weight: float = Field(default=1, gt=0)


class ExerciseUpdate(BaseModel):
    question: Optional[str] = None
    image_url: Optional[str] = None
    image_urls: Optional[List[str]] = None
    video_url: Optional[str] = None
    image_layout: Optional[ImageLayout] = None
    image_display_size: Optional[str] = None
    weight: Optional[float] = Field(default=None, gt=0)

    @field_validator("question", "image_layout", "image_display_size", "weight")
    @classmethod
    def not_null(cls, value):
        return _required(value)

    @field_validator("image_urls")
    @classmethod
    def cap_images(cls, value):
        return _cap_images(value)


class ModuleCreate(BaseModel):
    title: str
    description: str = ""
    type: ModuleType = ModuleType.MODULE


class ModuleUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def not_null(cls, value):
        return _required(value)


class ReorderRequest(BaseModel):
    new_index: int = Field(ge=0)


class OperationResult(BaseModel):
    """Tagged result of a façade operation; failures carry a reason code"""
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    reason: Optional[FailureReason] = None

    @classmethod
    def ok(cls, data=None):
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, reason: FailureReason, error: str):
        return cls(success=False, error=error, reason=reason)
