from datetime import datetime, timedelta
from typing import Optional

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.constants.constants import ActorRole, MilestoneStatus, ReminderStatus
from app.core.exceptions import MailDeliveryError
from app.models.base import Base
from app.models.emailreminder import EmailReminder
from app.models.milestones import Milestone
from app.models.project import Project
from app.models.weeklyprogress import WeeklyProgress
from app.schemas.actorSchema import Actor

BASE_TIME = datetime(2024, 1, 1, 9, 0, 0)


class FakeMailer:
    """Records deliveries; fails for the recipients it is told to."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.sent = []

    async def send_mail(self, to_email, subject, html=None, text=None):
        if to_email in self.failing:
            raise MailDeliveryError(f"Mailbox {to_email} rejected the message")
        self.sent.append({"to": to_email, "subject": subject, "html": html, "text": text})


@pytest.fixture
async def db():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
    async with factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def owner():
    return Actor(email="owner@softechinc.ai", role=ActorRole.user)


@pytest.fixture
def stranger():
    return Actor(email="stranger@softechinc.ai", role=ActorRole.user)


@pytest.fixture
def manager():
    return Actor(email="manager@softechinc.ai", role=ActorRole.manager)


@pytest.fixture
def mailer():
    return FakeMailer()


async def add_project(db, created_by: Optional[str] = "owner@softechinc.ai", name="Website revamp", minutes=0):
    project = Project(
        name=name,
        major_goal="Ship the new site",
        created_by=created_by,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        updated_at=BASE_TIME + timedelta(minutes=minutes),
    )
    db.add(project)
    await db.commit()
    return project


async def add_milestone(
    db,
    project,
    title,
    minutes,
    is_current=False,
    target_date=None,
    status=MilestoneStatus.pending,
    milestone_id=None,
):
    milestone = Milestone(
        project_id=project.project_id,
        title=title,
        is_current=is_current,
        target_date=target_date,
        status=status,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        updated_at=BASE_TIME + timedelta(minutes=minutes),
    )
    if milestone_id:
        milestone.milestone_id = milestone_id
    db.add(milestone)
    await db.commit()
    return milestone


async def add_progress(db, milestone, week_start, week_end):
    progress = WeeklyProgress(
        milestone_id=milestone.milestone_id,
        week_start_date=week_start,
        week_end_date=week_end,
    )
    db.add(progress)
    await db.commit()
    return progress


async def add_reminder(db, project, recipient, reminder_date, status=ReminderStatus.scheduled, subject="Status update due"):
    reminder = EmailReminder(
        project_id=project.project_id,
        subject=subject,
        message="Please send your weekly update.\nThanks!",
        recipient_email=recipient,
        reminder_date=reminder_date,
        status=status,
    )
    db.add(reminder)
    await db.commit()
    return reminder.reminder_id
