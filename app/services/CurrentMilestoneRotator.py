"""Keeps the number of current milestones per project bounded."""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.constants import MAX_CURRENT_MILESTONES
from app.models.milestones import Milestone

logger = logging.getLogger(__name__)


class CurrentMilestoneRotator:
    """
    Bounded rotation of the "current" flag.

    A project may have up to ``max_current`` current milestones at once.
    Promoting another one demotes the oldest current milestone (by
    ``created_at``) to make room. Demoting never rotates anything.
    """

    def __init__(self, db: AsyncSession, max_current: int = MAX_CURRENT_MILESTONES):
        if max_current < 1:
            raise ValueError("max_current must be at least 1")
        self.db = db
        self.max_current = max_current

    async def current_milestones(
        self,
        project_id: str,
        exclude_milestone_id: Optional[str] = None,
    ) -> List[Milestone]:
        """Current milestones of a project, oldest first."""
        query = select(Milestone).where(
            Milestone.project_id == project_id,
            Milestone.is_current == True,
        )
        if exclude_milestone_id is not None:
            query = query.where(Milestone.milestone_id != exclude_milestone_id)
        query = query.order_by(Milestone.created_at.asc(), Milestone.milestone_id.asc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def promote(self, project_id: str, target_milestone_id: Optional[str] = None) -> List[Milestone]:
        """
        Make room for ``target_milestone_id`` among the current milestones.

        Pass ``None`` when the target is about to be created. The caller sets
        ``is_current`` on the target itself; this only demotes others and
        flushes. Returns the demoted milestones.

        With a consistent store this demotes at most one milestone. If
        concurrent promotions left more than the cap behind, the oldest
        surplus ones are demoted as well so the cap holds again.
        """
        others = await self.current_milestones(project_id, exclude_milestone_id=target_milestone_id)
        surplus = len(others) - (self.max_current - 1)
        if surplus <= 0:
            return []

        if surplus > 1:
            logger.warning(
                f"⚠️ Project {project_id} had {len(others)} other current milestones, "
                f"demoting {surplus} to restore the limit of {self.max_current}"
            )

        demoted = others[:surplus]
        for milestone in demoted:
            milestone.is_current = False
            logger.info(f"🔄 Milestone {milestone.milestone_id} rotated out of current for project {project_id}")

        await self.db.flush()
        return demoted
