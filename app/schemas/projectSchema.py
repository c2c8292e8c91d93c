from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from app.constants.constants import ProjectStatus
from app.schemas.milestoneSchema import MilestoneResponse
from app.schemas.weeklyProgressSchema import WeeklyProgressResponse


class ProjectCreateRequest(BaseModel):
    """Request schema for creating a project. Required fields are checked by the service."""
    name: Optional[str] = None
    description: Optional[str] = None
    major_goal: Optional[str] = None
    status: Optional[ProjectStatus] = None


class ProjectUpdateRequest(ProjectCreateRequest):
    """Request schema for replacing a project's editable fields."""


class ProjectResponse(BaseModel):
    project_id: str
    name: str
    description: Optional[str] = None
    major_goal: str
    status: ProjectStatus
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectListItemResponse(ProjectResponse):
    """A project with only its current milestone(s)."""
    current_milestones: List[MilestoneResponse] = Field(default_factory=list)


class MilestoneWithProgressResponse(MilestoneResponse):
    weekly_progress: List[WeeklyProgressResponse] = Field(default_factory=list)


class MilestoneStats(BaseModel):
    total: int
    completed: int
    percent_complete: int


class ProjectDetailResponse(ProjectResponse):
    """A project with all milestones, current first."""
    milestones: List[MilestoneWithProgressResponse] = Field(default_factory=list)
    stats: MilestoneStats
