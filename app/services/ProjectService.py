"""Project orchestration: create, read, list, update and cascade delete."""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.constants import MilestoneStatus, ProjectStatus
from app.core.exceptions import AccessDenied, NotFound, ValidationError
from app.models.milestones import Milestone
from app.models.project import Project
from app.models.weeklyprogress import WeeklyProgress
from app.schemas.actorSchema import Actor
from app.schemas.milestoneSchema import MilestoneResponse
from app.schemas.projectSchema import (
    MilestoneStats,
    MilestoneWithProgressResponse,
    ProjectCreateRequest,
    ProjectDetailResponse,
    ProjectListItemResponse,
    ProjectResponse,
    ProjectUpdateRequest,
)
from app.schemas.weeklyProgressSchema import WeeklyProgressResponse
from app.services.CascadeDeletionPlanner import CascadeDeletionPlanner
from app.utils.check_project_access import ensure_access, scope_to_actor

logger = logging.getLogger(__name__)


def _require_text(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def order_milestones(milestones: List[Milestone]) -> List[Milestone]:
    """
    Current milestones first, then by target date (earliest first, undated
    last), then newest first.
    """
    newest_first = sorted(milestones, key=lambda m: m.created_at, reverse=True)
    return sorted(
        newest_first,
        key=lambda m: (not m.is_current, m.target_date is None, m.target_date or date.min),
    )


def milestone_stats(milestones: List[Milestone]) -> MilestoneStats:
    total = len(milestones)
    completed = sum(1 for m in milestones if m.status == MilestoneStatus.completed)
    percent = round(completed / total * 100) if total else 0
    return MilestoneStats(total=total, completed=completed, percent_complete=percent)


class ProjectService:
    """Project operations, each gated by the ownership predicate."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_project(self, project_id: str) -> Project:
        result = await self.db.execute(
            select(Project).where(Project.project_id == project_id)
        )
        project = result.scalar_one_or_none()
        if not project:
            raise NotFound("Project not found")
        return project

    async def get_accessible(self, actor: Actor, project_id: str, action: str = "access") -> Project:
        """Resolve a project and check the actor may touch it."""
        project = await self._get_project(project_id)
        try:
            ensure_access(actor, project, action)
        except AccessDenied:
            logger.warning(f"🚫 {actor.email} ({actor.role.value}) denied {action} on project {project_id}")
            raise
        return project

    async def create(self, actor: Actor, data: ProjectCreateRequest) -> Project:
        if not _require_text(data.name) or not _require_text(data.major_goal):
            raise ValidationError("Name and major goal are required")

        project = Project(
            name=data.name,
            description=data.description or None,
            major_goal=data.major_goal,
            status=data.status or ProjectStatus.active,
            created_by=actor.email,
        )
        self.db.add(project)
        await self.db.commit()
        await self.db.refresh(project)

        logger.info(f"✅ Project {project.project_id} created by {actor.email}")
        return project

    async def get(self, actor: Actor, project_id: str) -> ProjectDetailResponse:
        project = await self.get_accessible(actor, project_id, "view")

        milestones = list(
            (await self.db.execute(
                select(Milestone).where(Milestone.project_id == project_id)
            )).scalars().all()
        )
        progress_by_milestone = {m.milestone_id: [] for m in milestones}
        if milestones:
            progress_rows = (await self.db.execute(
                select(WeeklyProgress)
                .where(WeeklyProgress.milestone_id.in_(list(progress_by_milestone)))
                .order_by(WeeklyProgress.week_start_date.desc())
            )).scalars().all()
            for row in progress_rows:
                progress_by_milestone[row.milestone_id].append(row)

        ordered = [
            MilestoneWithProgressResponse(
                **MilestoneResponse.model_validate(m).model_dump(),
                weekly_progress=[
                    WeeklyProgressResponse.model_validate(p)
                    for p in progress_by_milestone[m.milestone_id]
                ],
            )
            for m in order_milestones(milestones)
        ]

        return ProjectDetailResponse(
            **ProjectResponse.model_validate(project).model_dump(),
            milestones=ordered,
            stats=milestone_stats(milestones),
        )

    async def list(self, actor: Actor) -> List[ProjectListItemResponse]:
        query = scope_to_actor(select(Project), actor).order_by(Project.created_at.desc())
        projects = (await self.db.execute(query)).scalars().all()
        if not projects:
            return []

        current_rows = (await self.db.execute(
            select(Milestone)
            .where(
                Milestone.project_id.in_([p.project_id for p in projects]),
                Milestone.is_current == True,
            )
            .order_by(Milestone.created_at.asc())
        )).scalars().all()
        current_by_project = {}
        for milestone in current_rows:
            current_by_project.setdefault(milestone.project_id, []).append(milestone)

        return [
            ProjectListItemResponse(
                **ProjectResponse.model_validate(p).model_dump(),
                current_milestones=[
                    MilestoneResponse.model_validate(m)
                    for m in current_by_project.get(p.project_id, [])
                ],
            )
            for p in projects
        ]

    async def update(self, actor: Actor, project_id: str, data: ProjectUpdateRequest) -> Project:
        project = await self.get_accessible(actor, project_id, "edit")

        if not _require_text(data.name) or not _require_text(data.major_goal):
            raise ValidationError("Name and major goal are required")

        project.name = data.name
        project.description = data.description or None
        project.major_goal = data.major_goal
        project.status = data.status or ProjectStatus.active

        await self.db.commit()
        await self.db.refresh(project)

        logger.info(f"✏️ Project {project_id} updated by {actor.email}")
        return project

    async def delete(self, actor: Actor, project_id: str) -> None:
        await self.get_accessible(actor, project_id, "delete")
        await CascadeDeletionPlanner(self.db).plan_and_execute(project_id)
        logger.info(f"🗑️ Project {project_id} deleted by {actor.email}")
