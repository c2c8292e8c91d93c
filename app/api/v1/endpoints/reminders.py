"""Email reminder router for the progress tracker."""

from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import aget_db
from app.core.security import get_current_actor
from app.schemas.actorSchema import Actor
from app.schemas.reminderSchema import (
    ReminderCreateRequest,
    ReminderListItemResponse,
    ReminderResponse,
    ReminderSendRequest,
    ReminderSweepResponse,
    ReminderUpdateRequest,
)
from app.services.MicrosoftGraphMailClient import MicrosoftGraphMailClient
from app.services.ReminderEmailNotifications import ReminderMailer
from app.services.ReminderService import ReminderService

# Initialize Microsoft Graph mail client
mail_client = MicrosoftGraphMailClient(
    tenant_id=settings.MICROSOFT_TENANT_ID,
    client_id=settings.MICROSOFT_CLIENT_ID,
    client_secret=settings.MICROSOFT_CLIENT_SECRET,
    sender=settings.MAIL_SENDER,
    sender_name=settings.COMPANY_NAME,
)

router = APIRouter(
    prefix="/reminders",
    tags=["reminders"]
)


def get_mailer() -> ReminderMailer:
    return mail_client


def get_reminder_service(
    db: AsyncSession = Depends(aget_db),
    mailer: ReminderMailer = Depends(get_mailer),
) -> ReminderService:
    return ReminderService(
        db,
        mailer,
        company_name=settings.COMPANY_NAME,
        app_url=settings.APP_URL,
    )


@router.get("", response_model=List[ReminderListItemResponse])
async def list_reminders(
    current_actor: Actor = Depends(get_current_actor),
    service: ReminderService = Depends(get_reminder_service)
):
    """List reminders by date with their project, limited to the actor's projects unless manager."""
    return await service.list(current_actor)


@router.post("", response_model=ReminderResponse, status_code=status.HTTP_201_CREATED)
async def create_reminder(
    reminder_data: ReminderCreateRequest,
    current_actor: Actor = Depends(get_current_actor),
    service: ReminderService = Depends(get_reminder_service)
):
    """Schedule an email reminder for a project."""
    return await service.create(current_actor, reminder_data)


@router.post("/send")
async def send_reminder(
    send_data: ReminderSendRequest,
    current_actor: Actor = Depends(get_current_actor),
    service: ReminderService = Depends(get_reminder_service)
):
    """Send a reminder now. Fails if it was already sent."""
    await service.send(current_actor, send_data.reminder_id)
    return {"message": "Reminder sent successfully"}


@router.get("/send", response_model=ReminderSweepResponse)
async def process_due_reminders(
    service: ReminderService = Depends(get_reminder_service)
):
    """
    Deliver every scheduled reminder that is due (for cron jobs).
    Individual failures are reported in the results and do not stop the sweep.
    """
    results = await service.process_due(datetime.utcnow())
    return ReminderSweepResponse(
        message=f"Processed {len(results)} reminders",
        results=results,
    )


@router.patch("/{reminder_id}", response_model=ReminderResponse)
async def update_reminder(
    reminder_id: str,
    reminder_data: ReminderUpdateRequest,
    current_actor: Actor = Depends(get_current_actor),
    service: ReminderService = Depends(get_reminder_service)
):
    """Change a reminder's status."""
    return await service.update(current_actor, reminder_id, reminder_data)


@router.delete("/{reminder_id}")
async def delete_reminder(
    reminder_id: str,
    current_actor: Actor = Depends(get_current_actor),
    service: ReminderService = Depends(get_reminder_service)
):
    """Delete a reminder."""
    await service.delete(current_actor, reminder_id)
    return {"message": "Reminder deleted"}
