"""Milestone orchestration: creation and partial updates with current-milestone rotation."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.constants import MAX_CURRENT_MILESTONES, MilestoneStatus
from app.core.exceptions import NotFound, ValidationError
from app.models.milestones import Milestone
from app.schemas.actorSchema import Actor
from app.schemas.milestoneSchema import MilestoneCreateRequest, MilestoneUpdateRequest
from app.services.CurrentMilestoneRotator import CurrentMilestoneRotator
from app.services.ProjectService import ProjectService

logger = logging.getLogger(__name__)


class MilestoneService:
    """Milestone operations, gated by the owning project's access check."""

    def __init__(self, db: AsyncSession, max_current: int = MAX_CURRENT_MILESTONES):
        self.db = db
        self.projects = ProjectService(db)
        self.rotator = CurrentMilestoneRotator(db, max_current=max_current)

    async def get_accessible(self, actor: Actor, milestone_id: str, action: str = "access") -> Milestone:
        """Resolve a milestone and check the actor may touch its project."""
        result = await self.db.execute(
            select(Milestone).where(Milestone.milestone_id == milestone_id)
        )
        milestone = result.scalar_one_or_none()
        if not milestone:
            raise NotFound("Milestone not found")
        await self.projects.get_accessible(actor, milestone.project_id, action)
        return milestone

    async def create(self, actor: Actor, data: MilestoneCreateRequest) -> Milestone:
        if not data.project_id or not data.title or not data.title.strip():
            raise ValidationError("Project ID and title are required")

        await self.projects.get_accessible(actor, data.project_id, "add milestones to")

        # Make room before the new milestone exists so it never counts against the limit.
        if data.is_current:
            await self.rotator.promote(data.project_id, None)

        milestone = Milestone(
            project_id=data.project_id,
            title=data.title,
            description=data.description or None,
            status=data.status or MilestoneStatus.pending,
            is_current=bool(data.is_current),
            target_date=data.target_date,
        )
        self.db.add(milestone)
        await self.db.commit()
        await self.db.refresh(milestone)

        logger.info(
            f"✅ Milestone {milestone.milestone_id} created on project {data.project_id} "
            f"by {actor.email} (current={milestone.is_current})"
        )
        return milestone

    async def update(self, actor: Actor, milestone_id: str, data: MilestoneUpdateRequest) -> Milestone:
        milestone = await self.get_accessible(actor, milestone_id, "edit milestones of")

        if data.is_current is True and not milestone.is_current:
            await self.rotator.promote(milestone.project_id, milestone.milestone_id)
            milestone.is_current = True
        elif data.is_current is False:
            milestone.is_current = False

        if data.status is not None:
            milestone.status = data.status

        await self.db.commit()
        await self.db.refresh(milestone)

        logger.info(f"✏️ Milestone {milestone_id} updated by {actor.email}")
        return milestone
