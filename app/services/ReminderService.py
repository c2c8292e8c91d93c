"""Email reminder orchestration: scheduling, manual sends and the due-reminder sweep."""

import logging
from datetime import datetime
from typing import List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.constants import ReminderStatus
from app.core.exceptions import AlreadySent, DeliveryFailed, MailDeliveryError, NotFound, ValidationError
from app.models.emailreminder import EmailReminder
from app.models.project import Project
from app.schemas.actorSchema import Actor
from app.schemas.reminderSchema import (
    ReminderCreateRequest,
    ReminderDispatchResult,
    ReminderListItemResponse,
    ReminderProjectSummary,
    ReminderResponse,
    ReminderUpdateRequest,
)
from app.services.ProjectService import ProjectService
from app.services.ReminderEmailNotifications import ReminderMailer, render_reminder_email
from app.utils.check_project_access import scope_to_actor

logger = logging.getLogger(__name__)


class ReminderService:
    """Reminder operations. Everything except the due sweep is gated by project ownership."""

    def __init__(
        self,
        db: AsyncSession,
        mailer: ReminderMailer,
        company_name: str,
        app_url: str,
    ):
        self.db = db
        self.mailer = mailer
        self.company_name = company_name
        self.app_url = app_url
        self.projects = ProjectService(db)

    async def _get_reminder(self, reminder_id: str) -> EmailReminder:
        result = await self.db.execute(
            select(EmailReminder).where(EmailReminder.reminder_id == reminder_id)
        )
        reminder = result.scalar_one_or_none()
        if not reminder:
            raise NotFound("Reminder not found")
        return reminder

    async def _deliver(self, subject: str, message: str, recipient_email: str, project_name: str) -> None:
        html, text = render_reminder_email(
            subject=subject,
            message=message,
            project_name=project_name,
            company_name=self.company_name,
            app_url=self.app_url,
        )
        await self.mailer.send_mail(
            to_email=recipient_email,
            subject=subject,
            html=html,
            text=text,
        )

    async def list(self, actor: Actor) -> List[ReminderListItemResponse]:
        query = scope_to_actor(
            select(EmailReminder, Project)
            .join(Project, EmailReminder.project_id == Project.project_id),
            actor,
        ).order_by(EmailReminder.reminder_date.asc())
        rows = (await self.db.execute(query)).all()
        return [
            ReminderListItemResponse(
                **ReminderResponse.model_validate(reminder).model_dump(),
                project=ReminderProjectSummary(project_id=project.project_id, name=project.name),
            )
            for reminder, project in rows
        ]

    async def create(self, actor: Actor, data: ReminderCreateRequest) -> EmailReminder:
        required = [data.project_id, data.subject, data.message, data.recipient_email]
        if any(not value or not value.strip() for value in required) or data.reminder_date is None:
            raise ValidationError("All fields are required")

        await self.projects.get_accessible(actor, data.project_id, "schedule reminders for")

        reminder = EmailReminder(
            project_id=data.project_id,
            subject=data.subject,
            message=data.message,
            recipient_email=data.recipient_email,
            reminder_date=data.reminder_date,
            status=ReminderStatus.scheduled,
        )
        self.db.add(reminder)
        await self.db.commit()
        await self.db.refresh(reminder)

        logger.info(
            f"⏰ Reminder {reminder.reminder_id} scheduled for {reminder.reminder_date} "
            f"on project {data.project_id} by {actor.email}"
        )
        return reminder

    async def update(self, actor: Actor, reminder_id: str, data: ReminderUpdateRequest) -> EmailReminder:
        reminder = await self._get_reminder(reminder_id)
        await self.projects.get_accessible(actor, reminder.project_id, "edit reminders for")

        if data.status is not None:
            reminder.status = data.status

        await self.db.commit()
        await self.db.refresh(reminder)

        logger.info(f"✏️ Reminder {reminder_id} updated by {actor.email}")
        return reminder

    async def delete(self, actor: Actor, reminder_id: str) -> None:
        reminder = await self._get_reminder(reminder_id)
        await self.projects.get_accessible(actor, reminder.project_id, "delete reminders for")

        await self.db.delete(reminder)
        await self.db.commit()

        logger.info(f"🗑️ Reminder {reminder_id} deleted by {actor.email}")

    async def send(self, actor: Actor, reminder_id: str) -> EmailReminder:
        """
        Deliver one reminder now.

        A delivery failure raises ``DeliveryFailed`` and leaves the status as
        it was, so the send can be retried.
        """
        if not reminder_id:
            raise ValidationError("Reminder ID is required")

        reminder = await self._get_reminder(reminder_id)
        project = await self.projects.get_accessible(actor, reminder.project_id, "send reminders for")

        if reminder.status == ReminderStatus.sent:
            raise AlreadySent("Reminder already sent")

        try:
            await self._deliver(reminder.subject, reminder.message, reminder.recipient_email, project.name)
        except MailDeliveryError as e:
            logger.error(f"❌ Failed to send reminder {reminder_id} to {reminder.recipient_email}: {e}")
            raise DeliveryFailed(f"Failed to send email: {e}") from e

        reminder.status = ReminderStatus.sent
        await self.db.commit()
        await self.db.refresh(reminder)

        logger.info(f"📧 Reminder {reminder_id} sent to {reminder.recipient_email} by {actor.email}")
        return reminder

    async def process_due(self, now: datetime) -> List[ReminderDispatchResult]:
        """
        Deliver every scheduled reminder whose date has passed.

        Reminders are attempted one by one in date order. A failed delivery
        or a failed status write is recorded in the results, rolled back and
        leaves that reminder scheduled; it never stops the remaining ones.
        """
        rows = (await self.db.execute(
            select(
                EmailReminder.reminder_id,
                EmailReminder.subject,
                EmailReminder.message,
                EmailReminder.recipient_email,
                Project.name,
            )
            .join(Project, EmailReminder.project_id == Project.project_id)
            .where(
                EmailReminder.status == ReminderStatus.scheduled,
                EmailReminder.reminder_date <= now,
            )
            .order_by(EmailReminder.reminder_date.asc(), EmailReminder.created_at.asc())
        )).all()

        logger.info(f"📊 Found {len(rows)} due reminder(s)")

        results = []
        for reminder_id, subject, message, recipient_email, project_name in rows:
            try:
                await self._deliver(subject, message, recipient_email, project_name)
                await self.db.execute(
                    update(EmailReminder)
                    .where(EmailReminder.reminder_id == reminder_id)
                    .values(status=ReminderStatus.sent)
                    .execution_options(synchronize_session=False)
                )
                await self.db.commit()
            except Exception as e:
                await self.db.rollback()
                logger.error(f"❌ Error sending reminder {reminder_id}: {e}")
                results.append(ReminderDispatchResult(
                    reminder_id=reminder_id,
                    status=ReminderStatus.error,
                    error=str(e),
                ))
                continue

            results.append(ReminderDispatchResult(
                reminder_id=reminder_id,
                status=ReminderStatus.sent,
            ))

        sent = sum(1 for r in results if r.status == ReminderStatus.sent)
        logger.info(f"✅ Processed {len(results)} reminder(s): {sent} sent, {len(results) - sent} failed")
        return results
