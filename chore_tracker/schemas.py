from pydantic import BaseModel, Field
from datetime import datetime, date
from enum import Enum
from typing import List, Literal, Optional

from chore_tracker.constants import DEFAULT_KID_COLOR, LIST_A

ListName = Literal["A", "B"]


class TaskType(str, Enum):
    chore = "chore"
    extra = "extra"


# Kid schemas
class KidBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(default=DEFAULT_KID_COLOR, min_length=1, max_length=32)
    current_list: ListName = LIST_A

class KidCreate(KidBase):
    pass

class KidUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, min_length=1, max_length=32)
    current_list: Optional[ListName] = None
    active: Optional[bool] = None

class KidResponse(KidBase):
    id: int
    points: int
    active: bool

    class Config:
        from_attributes = True


# Chore definition schemas
class ChoreCreate(BaseModel):
    list_name: ListName
    chore_name: str = Field(..., min_length=1, max_length=200)

class ChoreUpdate(BaseModel):
    list_name: Optional[ListName] = None
    chore_name: Optional[str] = Field(None, min_length=1, max_length=200)
    active: Optional[bool] = None

class ChoreResponse(BaseModel):
    id: int
    list_name: str
    chore_name: str
    active: bool

    class Config:
        from_attributes = True

class ChoreStatusResponse(ChoreResponse):
    completed: bool = False


# Extra task schemas
class ExtraTaskCreate(BaseModel):
    kid_id: int
    task_name: str = Field(..., min_length=1, max_length=200)

class ExtraTaskUpdate(BaseModel):
    task_name: Optional[str] = Field(None, min_length=1, max_length=200)
    active: Optional[bool] = None

class ExtraTaskResponse(BaseModel):
    id: int
    kid_id: int
    task_name: str
    active: bool

    class Config:
        from_attributes = True

class ExtraTaskStatusResponse(ExtraTaskResponse):
    completed: bool = False


# Completion ledger schemas
class CompletionResponse(BaseModel):
    id: int
    kid_id: int
    task_type: str
    task_id: int
    date: date
    completed_at: datetime

    class Config:
        from_attributes = True


# Progress schemas
class DailyProgressResponse(BaseModel):
    kid_id: int
    date: date
    chores_completed: bool
    extra_tasks_completed: bool
    points_earned_today: int

    class Config:
        from_attributes = True

class WeeklyProgressResponse(BaseModel):
    kid_id: int
    start_date: date
    end_date: date
    days: List[DailyProgressResponse]
    chore_days_completed: int
    extra_task_days_completed: int

class ToggleResponse(BaseModel):
    kid_id: int
    task_type: str
    task_id: int
    date: date
    completed: bool
    points_delta: int
    points: int
    progress: DailyProgressResponse


# Admin schemas
class AwardPointsRequest(BaseModel):
    kid_id: int
    points: int

class SwitchListsResponse(BaseModel):
    message: str
    kids: List[KidResponse]

class PinVerifyRequest(BaseModel):
    pin: str = Field(..., min_length=1, max_length=32)

class PinVerifyResponse(BaseModel):
    valid: bool


# Settings schemas
class SettingUpdate(BaseModel):
    value: str = Field(..., max_length=500)

class SettingResponse(BaseModel):
    key: str
    value: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
