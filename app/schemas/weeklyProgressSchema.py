import json
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from app.constants.constants import DelayReason


class TaskDelay(BaseModel):
    """A planned task and, when it slipped, why."""
    task: str
    is_completed: bool
    delay_reasons: Optional[List[DelayReason]] = None
    delay_reason_text: Optional[str] = None


class WeeklyProgressCreateRequest(BaseModel):
    """Request schema for recording a week of progress. Required fields are checked by the service."""
    milestone_id: Optional[str] = None
    week_start_date: Optional[date] = None
    week_end_date: Optional[date] = None
    completed_this_week: List[str] = Field(default_factory=list)
    planned_for_next_week: List[str] = Field(default_factory=list)
    task_delays: Optional[List[TaskDelay]] = None
    goals_achieved: Optional[bool] = None
    notes: Optional[str] = None


class WeeklyProgressUpdateRequest(BaseModel):
    """Request schema for updating a week of progress. Only supplied fields are applied."""
    week_start_date: Optional[date] = None
    week_end_date: Optional[date] = None
    completed_this_week: Optional[List[str]] = None
    planned_for_next_week: Optional[List[str]] = None
    task_delays: Optional[List[TaskDelay]] = None
    goals_achieved: Optional[bool] = None
    notes: Optional[str] = None


class WeeklyProgressResponse(BaseModel):
    progress_id: str
    milestone_id: str
    week_start_date: date
    week_end_date: date
    completed_this_week: List[str]
    planned_for_next_week: List[str]
    task_delays: Optional[List[TaskDelay]] = None
    goals_achieved: bool
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("completed_this_week", "planned_for_next_week", mode="before")
    @classmethod
    def decode_task_list(cls, value):
        if value is None or value == "":
            return []
        if isinstance(value, str):
            return json.loads(value)
        return value

    @field_validator("task_delays", mode="before")
    @classmethod
    def decode_task_delays(cls, value):
        if value is None or value == "":
            return None
        if isinstance(value, str):
            return json.loads(value)
        return value

    class Config:
        from_attributes = True


class CurrentWeekResponse(BaseModel):
    """The Sunday-to-Saturday reporting window containing today."""
    week_start_date: date
    week_end_date: date
