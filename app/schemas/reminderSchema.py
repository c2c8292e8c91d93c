from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, field_validator

from app.constants.constants import ReminderStatus


class ReminderCreateRequest(BaseModel):
    """Request schema for scheduling a reminder. All fields are required; the service checks them."""
    project_id: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    recipient_email: Optional[str] = None
    reminder_date: Optional[datetime] = None

    @field_validator("reminder_date")
    @classmethod
    def to_naive_utc(cls, value):
        # Stored and compared as naive UTC.
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class ReminderUpdateRequest(BaseModel):
    status: Optional[ReminderStatus] = None


class ReminderSendRequest(BaseModel):
    reminder_id: Optional[str] = None


class ReminderResponse(BaseModel):
    reminder_id: str
    project_id: str
    subject: str
    message: str
    recipient_email: str
    reminder_date: datetime
    status: ReminderStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ReminderProjectSummary(BaseModel):
    project_id: str
    name: str


class ReminderListItemResponse(ReminderResponse):
    project: ReminderProjectSummary


class ReminderDispatchResult(BaseModel):
    """Outcome of one delivery attempt in a due-reminder sweep."""
    reminder_id: str
    status: ReminderStatus
    error: Optional[str] = None


class ReminderSweepResponse(BaseModel):
    message: str
    results: List[ReminderDispatchResult]
