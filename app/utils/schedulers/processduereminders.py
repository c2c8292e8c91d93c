"""Due email reminder scheduler for the progress tracker."""

import asyncio
import logging
from datetime import datetime
from typing import List

from app.core.config import Settings
from app.core.database import session_manager
from app.schemas.reminderSchema import ReminderDispatchResult
from app.services.ReminderEmailNotifications import ReminderMailer
from app.services.ReminderService import ReminderService

logger = logging.getLogger(__name__)


async def process_due_reminders(mailer: ReminderMailer, settings: Settings) -> List[ReminderDispatchResult]:
    """Run one sweep over the due reminders in a fresh session."""
    async with session_manager.get_session() as db:
        service = ReminderService(
            db,
            mailer,
            company_name=settings.COMPANY_NAME,
            app_url=settings.APP_URL,
        )
        return await service.process_due(datetime.utcnow())


async def due_reminder_scheduler(mailer: ReminderMailer, settings: Settings):
    """
    Background task that sweeps due reminders every
    REMINDER_SCHEDULER_INTERVAL_SECONDS. Each sweep is independent; an error
    is logged and the loop carries on at the next tick.
    """
    interval = settings.REMINDER_SCHEDULER_INTERVAL_SECONDS
    logger.info(f"⏰ Due reminder scheduler running every {interval}s")

    while True:
        try:
            results = await process_due_reminders(mailer, settings)
            if results:
                failed = [r for r in results if r.error]
                logger.info(f"📊 Reminder sweep: {len(results) - len(failed)} sent, {len(failed)} failed")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"❌ SCHEDULER ERROR: {e}")

        await asyncio.sleep(interval)
