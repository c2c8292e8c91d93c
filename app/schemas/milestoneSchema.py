from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel

from app.constants.constants import MilestoneStatus


class MilestoneCreateRequest(BaseModel):
    """Request schema for creating a milestone. Required fields are checked by the service."""
    project_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[MilestoneStatus] = None
    is_current: Optional[bool] = None
    target_date: Optional[date] = None


class MilestoneUpdateRequest(BaseModel):
    """Request schema for updating a milestone. Only supplied fields are applied."""
    is_current: Optional[bool] = None
    status: Optional[MilestoneStatus] = None


class MilestoneResponse(BaseModel):
    milestone_id: str
    project_id: str
    title: str
    description: Optional[str] = None
    status: MilestoneStatus
    is_current: bool
    target_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
