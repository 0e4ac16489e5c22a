"""Report delivery through the Brevo transactional email API."""

import asyncio
import logging
from typing import List, Optional, Sequence
from urllib.parse import quote

import httpx

from ..config import EmailConfig
from ..models import Article
from .models import DispatchResult, RecipientResult
from .report import format_report, report_subject

logger = logging.getLogger(__name__)


def mailto_link(recipients: Sequence[str], subject: str, body: str) -> str:
    """Client-side compose link carrying the report."""
    return f"mailto:{','.join(recipients)}?subject={quote(subject)}&body={quote(body)}"


class BrevoMailer:
    """Send single emails through Brevo's SMTP API."""

    def __init__(
        self,
        api_key: str,
        sender_name: str,
        sender_email: str,
        api_url: str = "https://api.brevo.com/v3/smtp/email",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.sender_name = sender_name
        self.sender_email = sender_email
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

    async def send(self, client: httpx.AsyncClient, recipient: str, subject: str, text: str) -> RecipientResult:
        """Send one message, reporting failure instead of raising."""
        payload = {
            "sender": {"name": self.sender_name, "email": self.sender_email},
            "to": [{"email": recipient}],
            "replyTo": {"email": self.sender_email, "name": self.sender_name},
            "subject": subject,
            "textContent": text,
        }
        try:
            response = await client.post(self.api_url, json=payload)
            response.raise_for_status()
            data = response.json() if response.content else {}
            return RecipientResult(
                recipient=recipient,
                success=True,
                message_id=data.get("messageId") if isinstance(data, dict) else None,
            )
        except httpx.HTTPStatusError as e:
            error = f"HTTP {e.response.status_code}"
        except httpx.TimeoutException:
            error = "Request timed out"
        except httpx.HTTPError as e:
            error = f"HTTP error: {e}"
        except ValueError as e:
            error = f"Malformed response: {e}"

        logger.warning("Email to %s failed: %s", recipient, error)
        return RecipientResult(recipient=recipient, success=False, error=error)

    async def send_all(self, recipients: Sequence[str], subject: str, text: str) -> List[RecipientResult]:
        """Send the same message to every recipient concurrently."""
        async with httpx.AsyncClient(
            timeout=self.timeout,
            headers={"api-key": self.api_key, "accept": "application/json"},
            transport=self.transport,
        ) as client:
            tasks = [self.send(client, recipient, subject, text) for recipient in recipients]
            return list(await asyncio.gather(*tasks))


class EmailDispatcher:
    """Render a report and deliver it to the configured recipients."""

    def __init__(
        self,
        config: EmailConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize email dispatcher.

        Args:
            config: Email config with the API key already resolved
            transport: Optional httpx transport (tests)
        """
        self.config = config
        self.transport = transport

    async def dispatch(
        self,
        articles: Sequence[Article],
        recipients: Optional[Sequence[str]] = None,
    ) -> DispatchResult:
        """
        Send the report for ``articles``.

        Returns a ``manual`` result with a mailto link when no API key is
        configured; never raises.
        """
        articles = list(articles)
        recipients = list(recipients if recipients is not None else self.config.recipients)
        subject = report_subject(articles)

        if not articles:
            return DispatchResult(status="failed", subject=subject, message="No articles to send")
        if not recipients:
            return DispatchResult(
                status="failed",
                subject=subject,
                articles_count=len(articles),
                message="No recipients configured",
            )

        text = format_report(articles)

        if not self.config.api_key:
            logger.info("No email API key configured, returning compose link")
            return DispatchResult(
                status="manual",
                subject=subject,
                articles_count=len(articles),
                message=(
                    f"No API key configured; set {self.config.api_key_env or 'an API key'}"
                    " or use the compose link to send manually"
                ),
                mailto_link=mailto_link(recipients, subject, text),
            )

        mailer = BrevoMailer(
            api_key=self.config.api_key,
            sender_name=self.config.sender_name,
            sender_email=self.config.sender_email,
            api_url=self.config.api_url,
            timeout=self.config.timeout,
            transport=self.transport,
        )
        results = await mailer.send_all(recipients, subject, text)

        sent = sum(1 for r in results if r.success)
        if sent == len(results):
            status = "sent"
        elif sent:
            status = "partial"
        else:
            status = "failed"

        logger.info("Report email %s: %d/%d recipients", status, sent, len(results))
        return DispatchResult(
            status=status,
            subject=subject,
            articles_count=len(articles),
            recipients=results,
            message=f"Sent to {sent} of {len(results)} recipients ({len(articles)} articles)",
        )

    def dispatch_sync(
        self,
        articles: Sequence[Article],
        recipients: Optional[Sequence[str]] = None,
    ) -> DispatchResult:
        """Synchronous wrapper for dispatch."""
        return asyncio.run(self.dispatch(articles, recipients))
