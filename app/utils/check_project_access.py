from sqlalchemy import Select

from app.constants.constants import ActorRole
from app.core.exceptions import AccessDenied
from app.models.project import Project
from app.schemas.actorSchema import Actor


def check_manager_role(actor: Actor) -> bool:
    """Check if the actor may see and change every project."""
    return actor.role == ActorRole.manager


def can_access(actor: Actor, project: Project) -> bool:
    """
    Decide whether the actor may read or write a project-owned resource.

    Managers always may. Everyone else only when they created the project;
    legacy projects without a recorded creator are manager-only.
    """
    if check_manager_role(actor):
        return True
    return project.created_by is not None and project.created_by == actor.email


def ensure_access(actor: Actor, project: Project, action: str = "access") -> None:
    """Raise AccessDenied unless can_access holds."""
    if not can_access(actor, project):
        raise AccessDenied(f"Access denied. You can only {action} your own projects.")


def scope_to_actor(query: Select, actor: Actor) -> Select:
    """
    Restrict a query over projects to the ones the actor may list.

    Managers get the unfiltered collection, everyone else only the projects
    they created. The query must already select from or join ``projects``.
    """
    if check_manager_role(actor):
        return query
    return query.where(Project.created_by == actor.email)
