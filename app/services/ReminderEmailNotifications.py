"""Reminder email content and the mail capability the reminder service depends on."""

from html import escape
from typing import Optional, Protocol, Tuple


class ReminderMailer(Protocol):
    """Anything that can deliver one email; raises MailDeliveryError on failure."""

    async def send_mail(
        self,
        to_email: str,
        subject: str,
        html: Optional[str] = None,
        text: Optional[str] = None,
    ) -> None:
        ...


def render_reminder_email(
    subject: str,
    message: str,
    project_name: str,
    company_name: str,
    app_url: str,
) -> Tuple[str, str]:
    """
    Build the HTML and plain-text bodies of a reminder email.

    Returns:
        (html, text)
    """
    html_message = "<br>".join(escape(line) for line in message.split("\n"))

    html_content = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #2563eb;">{escape(subject)}</h2>
        <p><strong>Project:</strong> {escape(project_name)}</p>
        <div style="background-color: #f3f4f6; padding: 20px; border-radius: 8px; margin: 20px 0;">
            {html_message}
        </div>
        <p style="color: #6b7280; font-size: 12px;">This is an automated reminder from <a href="{escape(app_url)}" style="color: #2563eb; text-decoration: none;">{escape(company_name)}</a>.</p>
    </div>
    """

    text_content = (
        f"{subject}\n\n"
        f"Project: {project_name}\n\n"
        f"{message}\n\n"
        "---\n"
        f"This is an automated reminder from {company_name} ({app_url})."
    )

    return html_content, text_content
