"""One-off sweep of due email reminders, for running from cron instead of the in-app scheduler."""

import sys
import os
import asyncio

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from app.core.config import settings
from app.core.database import session_manager
from app.services.MicrosoftGraphMailClient import MicrosoftGraphMailClient
from app.utils.schedulers.processduereminders import process_due_reminders


async def send_due_reminders() -> int:
    """Deliver every due reminder once. Returns the number of failed deliveries."""
    mail_client = MicrosoftGraphMailClient(
        tenant_id=settings.MICROSOFT_TENANT_ID,
        client_id=settings.MICROSOFT_CLIENT_ID,
        client_secret=settings.MICROSOFT_CLIENT_SECRET,
        sender=settings.MAIL_SENDER,
        sender_name=settings.COMPANY_NAME,
    )

    await session_manager.init()
    try:
        results = await process_due_reminders(mail_client, settings)
    finally:
        await session_manager.close()

    failed = [r for r in results if r.error]
    print(f"\n{'='*80}")
    print("📊 REMINDER SUMMARY")
    print(f"{'='*80}")
    print(f"✅ Sent: {len(results) - len(failed)}")
    for result in failed:
        print(f"❌ {result.reminder_id}: {result.error}")
    print(f"📧 Total: {len(results)}")
    print(f"{'='*80}\n")
    return len(failed)


if __name__ == "__main__":
    print("\n🚀 Sending due reminders...\n")
    failures = asyncio.run(send_due_reminders())
    sys.exit(1 if failures else 0)
