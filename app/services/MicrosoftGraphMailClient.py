"""Microsoft Graph client used to deliver reminder emails."""

import logging
from datetime import datetime, timedelta
from typing import Optional

import httpx

from app.core.exceptions import MailDeliveryError

logger = logging.getLogger(__name__)


class MicrosoftGraphMailClient:
    """
    Sends mail from a single authorized mailbox of the M365 tenant.

    Uses the client-credentials flow (application permission ``Mail.Send``).
    The access token is cached until five minutes before it expires.
    """

    BASE_URL = "https://graph.microsoft.com/v1.0"
    TOKEN_URL = "https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0/token"

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        sender: str,
        sender_name: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.sender = sender
        self.sender_name = sender_name
        self.timeout = timeout
        self._transport = transport
        self._access_token = None
        self._token_expiry = None

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _get_access_token(self, force_refresh: bool = False) -> str:
        """Get access token for application (not user-delegated)."""
        if not force_refresh and self._access_token and self._token_expiry:
            if datetime.utcnow() < self._token_expiry - timedelta(minutes=5):
                return self._access_token

        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "scope": "https://graph.microsoft.com/.default",
            "grant_type": "client_credentials"
        }

        async with self._client() as client:
            response = await client.post(self.TOKEN_URL.format(tenant_id=self.tenant_id), data=data)

        if response.status_code != 200:
            raise MailDeliveryError(f"Failed to get access token: {response.text}")

        token_data = response.json()
        self._access_token = token_data["access_token"]
        expires_in = token_data.get("expires_in", 3600)
        self._token_expiry = datetime.utcnow() + timedelta(seconds=expires_in)

        logger.info(f"✅ [Mail] New access token obtained, expires in {expires_in}s")
        return self._access_token

    def clear_token_cache(self):
        """Force clear the token cache to get fresh permissions."""
        self._access_token = None
        self._token_expiry = None

    def _build_message(self, to_email: str, subject: str, html: Optional[str], text: Optional[str]) -> dict:
        # Graph carries a single body; prefer HTML and fall back to plain text.
        if html:
            body = {"contentType": "HTML", "content": html}
        else:
            body = {"contentType": "Text", "content": text or ""}

        sender = {"address": self.sender}
        if self.sender_name:
            sender["name"] = self.sender_name

        return {
            "message": {
                "subject": subject,
                "body": body,
                "from": {"emailAddress": sender},
                "toRecipients": [{"emailAddress": {"address": to_email}}],
            },
            "saveToSentItems": "true"
        }

    async def send_mail(
        self,
        to_email: str,
        subject: str,
        html: Optional[str] = None,
        text: Optional[str] = None,
        retry_with_refresh: bool = True,
    ) -> None:
        """
        Send one email.

        Args:
            to_email: Recipient address
            subject: Email subject
            html: HTML body
            text: Plain-text body, used when no HTML is given
            retry_with_refresh: If True, retry once with a fresh token on 403

        Raises:
            MailDeliveryError: when the token cannot be obtained, the request
                fails, or Graph answers with anything but 200/202.
        """
        token = await self._get_access_token()

        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json"
        }
        url = f"{self.BASE_URL}/users/{self.sender}/sendMail"

        try:
            async with self._client() as client:
                response = await client.post(
                    url,
                    headers=headers,
                    json=self._build_message(to_email, subject, html, text),
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ [Mail] Transport error sending to {to_email}: {e}")
            raise MailDeliveryError(f"Failed to send email: {e}") from e

        if response.status_code == 403 and retry_with_refresh:
            logger.warning("⚠️ [Mail] Email send got 403, refreshing token and retrying...")
            self.clear_token_cache()
            return await self.send_mail(to_email, subject, html, text, retry_with_refresh=False)

        if response.status_code not in (200, 202):
            logger.error(f"❌ [Mail] Failed to send email: {response.status_code} - {response.text}")
            if response.status_code == 403:
                raise MailDeliveryError(
                    "Access denied when sending email. Please ensure: "
                    "1) The app has 'Mail.Send' application permission with admin consent. "
                    f"2) The sender mailbox '{self.sender}' exists in your M365 tenant."
                )
            raise MailDeliveryError(f"Failed to send email: {response.text}")

        logger.info(f"✅ [Mail] Email sent to {to_email}")
