"""Milestone router for the progress tracker."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import aget_db
from app.core.security import get_current_actor
from app.schemas.actorSchema import Actor
from app.schemas.milestoneSchema import MilestoneCreateRequest, MilestoneResponse, MilestoneUpdateRequest
from app.services.MilestoneService import MilestoneService

router = APIRouter(prefix="/milestones", tags=["milestones"])


@router.post("", response_model=MilestoneResponse, status_code=status.HTTP_201_CREATED)
async def create_milestone(
    milestone_data: MilestoneCreateRequest,
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(aget_db)
):
    """
    Create a milestone on a project.
    When it is created as current, the oldest current milestone is rotated
    out if the project already has the maximum number of current milestones.
    """
    service = MilestoneService(db, max_current=settings.MAX_CURRENT_MILESTONES)
    return await service.create(current_actor, milestone_data)


@router.patch("/{milestone_id}", response_model=MilestoneResponse)
async def update_milestone(
    milestone_id: str,
    milestone_data: MilestoneUpdateRequest,
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(aget_db)
):
    """Change a milestone's current flag and/or status."""
    service = MilestoneService(db, max_current=settings.MAX_CURRENT_MILESTONES)
    return await service.update(current_actor, milestone_id, milestone_data)
