"""Weekly progress orchestration, always resolved through milestone -> project."""

import json
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFound, ValidationError
from app.models.weeklyprogress import WeeklyProgress
from app.schemas.actorSchema import Actor
from app.schemas.weeklyProgressSchema import (
    CurrentWeekResponse,
    TaskDelay,
    WeeklyProgressCreateRequest,
    WeeklyProgressUpdateRequest,
)
from app.services.MilestoneService import MilestoneService
from app.utils.weeks import get_week_range

logger = logging.getLogger(__name__)


def dump_tasks(tasks: Optional[List[str]]) -> str:
    return json.dumps(list(tasks or []))


def dump_task_delays(delays: Optional[List[TaskDelay]]) -> Optional[str]:
    if delays is None:
        return None
    return json.dumps([d.model_dump(mode="json") for d in delays])


class WeeklyProgressService:
    """
    Weekly progress operations.

    Start and end dates are stored as given: neither ``start <= end`` nor
    overlap with other weeks of the same milestone is checked.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.milestones = MilestoneService(db)

    @staticmethod
    def current_week(today: Optional[date] = None) -> CurrentWeekResponse:
        start, end = get_week_range(today)
        return CurrentWeekResponse(week_start_date=start, week_end_date=end)

    async def create(self, actor: Actor, data: WeeklyProgressCreateRequest) -> WeeklyProgress:
        if not data.milestone_id or not data.week_start_date or not data.week_end_date:
            raise ValidationError("Milestone ID, week start, and week end dates are required")

        await self.milestones.get_accessible(actor, data.milestone_id, "record progress on")

        progress = WeeklyProgress(
            milestone_id=data.milestone_id,
            week_start_date=data.week_start_date,
            week_end_date=data.week_end_date,
            completed_this_week=dump_tasks(data.completed_this_week),
            planned_for_next_week=dump_tasks(data.planned_for_next_week),
            task_delays=dump_task_delays(data.task_delays),
            goals_achieved=bool(data.goals_achieved),
            notes=data.notes or None,
        )
        self.db.add(progress)
        await self.db.commit()
        await self.db.refresh(progress)

        logger.info(
            f"✅ Weekly progress {progress.progress_id} for week of {data.week_start_date} "
            f"recorded on milestone {data.milestone_id} by {actor.email}"
        )
        return progress

    async def update(self, actor: Actor, progress_id: str, data: WeeklyProgressUpdateRequest) -> WeeklyProgress:
        result = await self.db.execute(
            select(WeeklyProgress).where(WeeklyProgress.progress_id == progress_id)
        )
        progress = result.scalar_one_or_none()
        if not progress:
            raise NotFound("Weekly progress not found")

        await self.milestones.get_accessible(actor, progress.milestone_id, "edit progress for")

        update_data = data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if field in ("completed_this_week", "planned_for_next_week"):
                value = dump_tasks(value)
            elif field == "task_delays":
                value = dump_task_delays(data.task_delays)
            elif field in ("week_start_date", "week_end_date", "goals_achieved") and value is None:
                # Non-nullable columns: an explicit null leaves them as they are.
                continue
            setattr(progress, field, value)

        await self.db.commit()
        await self.db.refresh(progress)

        logger.info(f"✏️ Weekly progress {progress_id} updated by {actor.email}")
        return progress

    async def list_for_milestone(self, actor: Actor, milestone_id: str) -> List[WeeklyProgress]:
        await self.milestones.get_accessible(actor, milestone_id, "view progress for")
        result = await self.db.execute(
            select(WeeklyProgress)
            .where(WeeklyProgress.milestone_id == milestone_id)
            .order_by(WeeklyProgress.week_start_date.desc())
        )
        return list(result.scalars().all())
