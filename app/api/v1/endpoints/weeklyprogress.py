"""Weekly progress router for the progress tracker."""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import aget_db
from app.core.security import get_current_actor
from app.schemas.actorSchema import Actor
from app.schemas.weeklyProgressSchema import (
    CurrentWeekResponse,
    WeeklyProgressCreateRequest,
    WeeklyProgressResponse,
    WeeklyProgressUpdateRequest,
)
from app.services.WeeklyProgressService import WeeklyProgressService

router = APIRouter(prefix="/weekly-progress", tags=["weekly-progress"])


@router.get("/current-week", response_model=CurrentWeekResponse)
async def get_current_week(
    current_actor: Actor = Depends(get_current_actor),
):
    """The Sunday-Saturday window a new weekly report covers by default."""
    return WeeklyProgressService.current_week()


@router.get("/milestone/{milestone_id}", response_model=List[WeeklyProgressResponse])
async def list_milestone_progress(
    milestone_id: str,
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(aget_db)
):
    """All weekly progress of a milestone, latest week first."""
    return await WeeklyProgressService(db).list_for_milestone(current_actor, milestone_id)


@router.post("", response_model=WeeklyProgressResponse, status_code=status.HTTP_201_CREATED)
async def create_weekly_progress(
    progress_data: WeeklyProgressCreateRequest,
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(aget_db)
):
    """Record a week of progress against a milestone."""
    return await WeeklyProgressService(db).create(current_actor, progress_data)


@router.patch("/{progress_id}", response_model=WeeklyProgressResponse)
async def update_weekly_progress(
    progress_id: str,
    progress_data: WeeklyProgressUpdateRequest,
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(aget_db)
):
    """Overwrite the supplied fields of a weekly progress entry."""
    return await WeeklyProgressService(db).update(current_actor, progress_id, progress_data)
