"""Ordered, re-runnable deletion of a project and everything hanging off it."""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DeletionFailed
from app.models.emailreminder import EmailReminder
from app.models.milestones import Milestone
from app.models.project import Project
from app.models.weeklyprogress import WeeklyProgress

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeletionStep:
    name: str
    run: Callable[[str], Awaitable[int]]


class CascadeDeletionPlanner:
    """
    Deletes a project in four committed steps:

    1. email reminders of the project
    2. weekly progress of the project's milestones
    3. the milestones
    4. the project itself

    Each step is committed before the next starts. A failing step raises
    ``DeletionFailed`` naming the step; earlier steps stay deleted. Every step
    deletes by reference, so running the plan again on a partially deleted
    project finishes the job without errors.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def plan(self) -> List[DeletionStep]:
        return [
            DeletionStep("email_reminders", self._delete_reminders),
            DeletionStep("weekly_progress", self._delete_weekly_progress),
            DeletionStep("milestones", self._delete_milestones),
            DeletionStep("project", self._delete_project),
        ]

    async def plan_and_execute(self, project_id: str) -> None:
        logger.info(f"🗑️ Deleting project {project_id} and its dependents")
        for step in self.plan():
            try:
                removed = await step.run(project_id)
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.error(f"❌ Cascade delete of project {project_id} failed at step '{step.name}': {e}")
                raise DeletionFailed(
                    f"Failed to delete project: step '{step.name}' failed: {e}",
                    step=step.name,
                ) from e
            logger.info(f"✅ Step '{step.name}' removed {removed} record(s)")
        logger.info(f"✅ Project {project_id} deleted successfully")

    async def _delete_reminders(self, project_id: str) -> int:
        result = await self.db.execute(
            delete(EmailReminder).where(EmailReminder.project_id == project_id)
        )
        return result.rowcount

    async def _delete_weekly_progress(self, project_id: str) -> int:
        milestone_ids = (
            await self.db.execute(
                select(Milestone.milestone_id).where(Milestone.project_id == project_id)
            )
        ).scalars().all()
        if not milestone_ids:
            return 0
        result = await self.db.execute(
            delete(WeeklyProgress).where(WeeklyProgress.milestone_id.in_(milestone_ids))
        )
        return result.rowcount

    async def _delete_milestones(self, project_id: str) -> int:
        result = await self.db.execute(
            delete(Milestone).where(Milestone.project_id == project_id)
        )
        return result.rowcount

    async def _delete_project(self, project_id: str) -> int:
        result = await self.db.execute(
            delete(Project).where(Project.project_id == project_id)
        )
        return result.rowcount
