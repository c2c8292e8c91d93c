"""Project router for the progress tracker."""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import aget_db
from app.core.security import get_current_actor
from app.schemas.actorSchema import Actor
from app.schemas.projectSchema import (
    ProjectCreateRequest,
    ProjectDetailResponse,
    ProjectListItemResponse,
    ProjectResponse,
    ProjectUpdateRequest,
)
from app.services.ProjectService import ProjectService

router = APIRouter(
    prefix="/projects",
    tags=["projects"]
)


@router.get("", response_model=List[ProjectListItemResponse])
async def list_projects(
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(aget_db)
):
    """
    List projects, newest first, each with its current milestone(s).
    Managers see every project; everyone else only the projects they created.
    """
    return await ProjectService(db).list(current_actor)


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreateRequest,
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(aget_db)
):
    """Create a project owned by the current actor."""
    return await ProjectService(db).create(current_actor, project_data)


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(
    project_id: str,
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(aget_db)
):
    """Get a project with all of its milestones (current first) and their weekly progress."""
    return await ProjectService(db).get(current_actor, project_id)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    project_data: ProjectUpdateRequest,
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(aget_db)
):
    """Replace a project's name, description, major goal and status."""
    return await ProjectService(db).update(current_actor, project_id, project_data)


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(aget_db)
):
    """Delete a project together with its reminders, milestones and weekly progress."""
    await ProjectService(db).delete(current_actor, project_id)
    return {"message": "Project deleted successfully"}
