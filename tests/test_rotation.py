import pytest
from sqlalchemy import func, select

from app.core.exceptions import AccessDenied
from app.models.milestones import Milestone
from app.schemas.milestoneSchema import MilestoneCreateRequest, MilestoneUpdateRequest
from app.services.CurrentMilestoneRotator import CurrentMilestoneRotator
from app.services.MilestoneService import MilestoneService

from conftest import add_milestone, add_project


async def current_titles(db, project):
    result = await db.execute(
        select(Milestone.title)
        .where(Milestone.project_id == project.project_id, Milestone.is_current == True)
        .order_by(Milestone.title)
    )
    return list(result.scalars().all())


async def test_promoting_third_milestone_demotes_the_oldest(db, owner):
    project = await add_project(db)
    await add_milestone(db, project, "M1", minutes=1, is_current=True)
    await add_milestone(db, project, "M2", minutes=2, is_current=True)
    m3 = await add_milestone(db, project, "M3", minutes=3)

    updated = await MilestoneService(db).update(owner, m3.milestone_id, MilestoneUpdateRequest(is_current=True))

    assert updated.is_current is True
    assert await current_titles(db, project) == ["M2", "M3"]


async def test_promoting_an_already_current_milestone_changes_nothing(db, owner):
    project = await add_project(db)
    await add_milestone(db, project, "M1", minutes=1, is_current=True)
    m2 = await add_milestone(db, project, "M2", minutes=2, is_current=True)

    await MilestoneService(db).update(owner, m2.milestone_id, MilestoneUpdateRequest(is_current=True))

    assert await current_titles(db, project) == ["M1", "M2"]


async def test_demoting_never_rotates(db, owner):
    project = await add_project(db)
    m1 = await add_milestone(db, project, "M1", minutes=1, is_current=True)
    await add_milestone(db, project, "M2", minutes=2, is_current=True)
    await add_milestone(db, project, "M3", minutes=3)

    await MilestoneService(db).update(owner, m1.milestone_id, MilestoneUpdateRequest(is_current=False))

    assert await current_titles(db, project) == ["M2"]


async def test_status_only_update_keeps_current_flag(db, owner):
    project = await add_project(db)
    m1 = await add_milestone(db, project, "M1", minutes=1, is_current=True)

    updated = await MilestoneService(db).update(owner, m1.milestone_id, MilestoneUpdateRequest(status="completed"))

    assert updated.is_current is True
    assert updated.status.value == "completed"


async def test_creating_a_current_milestone_rotates_the_oldest_out(db, owner):
    project = await add_project(db)
    await add_milestone(db, project, "M1", minutes=1, is_current=True)
    await add_milestone(db, project, "M2", minutes=2, is_current=True)

    created = await MilestoneService(db).create(
        owner,
        MilestoneCreateRequest(project_id=project.project_id, title="M3", is_current=True),
    )

    assert created.is_current is True
    assert await current_titles(db, project) == ["M2", "M3"]


async def test_equal_created_at_breaks_ties_on_milestone_id(db):
    project = await add_project(db)
    await add_milestone(db, project, "first", minutes=1, is_current=True, milestone_id="aaaa")
    await add_milestone(db, project, "second", minutes=1, is_current=True, milestone_id="bbbb")

    demoted = await CurrentMilestoneRotator(db).promote(project.project_id, None)

    assert [m.milestone_id for m in demoted] == ["aaaa"]


async def test_surplus_current_milestones_are_all_demoted(db):
    project = await add_project(db)
    for minute in range(1, 4):
        await add_milestone(db, project, f"M{minute}", minutes=minute, is_current=True)
    m4 = await add_milestone(db, project, "M4", minutes=4)

    demoted = await CurrentMilestoneRotator(db).promote(project.project_id, m4.milestone_id)
    m4.is_current = True
    await db.commit()

    assert [m.title for m in demoted] == ["M1", "M2"]
    assert await current_titles(db, project) == ["M3", "M4"]


async def test_rotation_respects_a_configured_limit(db, owner):
    project = await add_project(db)
    await add_milestone(db, project, "M1", minutes=1, is_current=True)
    m2 = await add_milestone(db, project, "M2", minutes=2)

    await MilestoneService(db, max_current=1).update(owner, m2.milestone_id, MilestoneUpdateRequest(is_current=True))

    assert await current_titles(db, project) == ["M2"]


def test_rotator_rejects_a_limit_below_one():
    with pytest.raises(ValueError):
        CurrentMilestoneRotator(None, max_current=0)


async def test_stranger_cannot_create_milestones(db, stranger):
    project = await add_project(db)

    with pytest.raises(AccessDenied):
        await MilestoneService(db).create(
            stranger,
            MilestoneCreateRequest(project_id=project.project_id, title="Sneaky", is_current=True),
        )

    count = await db.scalar(select(func.count()).select_from(Milestone))
    assert count == 0


async def test_reasserting_current_does_not_rotate_an_overfull_project(db, owner):
    project = await add_project(db)
    for minute in range(1, 4):
        await add_milestone(db, project, f"M{minute}", minutes=minute, is_current=True)
    m3 = (await db.execute(select(Milestone).where(Milestone.title == "M3"))).scalar_one()

    await MilestoneService(db).update(owner, m3.milestone_id, MilestoneUpdateRequest(is_current=True))

    assert await current_titles(db, project) == ["M1", "M2", "M3"]
