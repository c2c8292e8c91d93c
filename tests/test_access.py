import pytest
from sqlalchemy import select

from app.core.exceptions import AccessDenied
from app.models.project import Project
from app.utils.check_project_access import can_access, check_manager_role, ensure_access, scope_to_actor


def make_project(created_by):
    return Project(name="Mobile app", major_goal="Launch", created_by=created_by)


def test_manager_can_access_any_project(manager):
    assert check_manager_role(manager)
    assert can_access(manager, make_project("someone@softechinc.ai"))
    assert can_access(manager, make_project(None))


def test_creator_can_access_own_project(owner):
    assert can_access(owner, make_project(owner.email))


def test_other_user_is_denied(owner, stranger):
    project = make_project(owner.email)
    assert not can_access(stranger, project)
    with pytest.raises(AccessDenied) as exc:
        ensure_access(stranger, project, "edit")
    assert "edit your own projects" in exc.value.message
    assert exc.value.status_code == 403


def test_legacy_project_without_creator_is_manager_only(owner):
    assert not can_access(owner, make_project(None))


def test_scope_to_actor_filters_only_non_managers(owner, manager):
    base = select(Project)
    assert scope_to_actor(base, manager) is base
    scoped = str(scope_to_actor(base, owner))
    assert "WHERE projects.created_by" in scoped
