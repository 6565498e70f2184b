"""
UYNM Backend — Notification Dispatcher
========================================

What:  Turns a structured form submission into an admin notification email and
       hands it to the mail transport, best-effort.
How:   notify(kind, data) renders `templates/email/<kind>.html` with Jinja2
       (autoescaped), derives a plain-text body, sends through the injected
       MailTransport and returns a NotificationOutcome. It never raises: every
       failure becomes `delivered=False` plus a reason, logged at ERROR.
Who:   Scheduled by the contact, member and newsletter routers through FastAPI
       BackgroundTasks, after the response has been produced.
When:  Once per successful submission. No retry, no queue: a failed send is
       logged, counted and dropped.

Outcomes:
    {"delivered": true,  "reference": "<message-id>", "reason": null}
    {"delivered": false, "reference": null, "reason": "not_configured"}
    {"delivered": false, "reference": null, "reason": "<transport error>"}
"""

import logging
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import BaseModel

from uynm_api.services.mail_transport import MailTransport, OutgoingMail

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"

_TAG_RE = re.compile(r"<[^>]*>")
_BLANK_LINES_RE = re.compile(r"\n\s*\n+")


class NotificationKind(str, Enum):
    CONTACT = "contact"
    MEMBER = "member"
    NEWSLETTER = "newsletter"


class NotificationOutcome(BaseModel):
    delivered: bool
    reference: Optional[str] = None
    reason: Optional[str] = None


def html_to_text(html: str) -> str:
    """Plain-text alternative: tags stripped, runs of blank lines collapsed."""
    text = _TAG_RE.sub("", html)
    lines = [line.strip() for line in text.splitlines()]
    return _BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()


def _single_line(value: Any) -> str:
    return " ".join(str(value or "").split())


class NotificationDispatcher:
    """
    Renders and sends admin notifications.

    Attributes:
        stats: outcome counters since startup ({"delivered", "failed", "skipped"}),
               reported by GET /api/health.
    """

    def __init__(
        self,
        transport: MailTransport,
        recipient: Optional[str],
        sender_address: str,
        sender_name: str = "UYNM Website",
        templates: Optional[Environment] = None,
    ):
        self.transport = transport
        self.recipient = recipient
        self.sender_address = sender_address
        self.sender_name = sender_name
        self.templates = templates or Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(["html"]),
        )
        self.stats: Dict[str, int] = {"delivered": 0, "failed": 0, "skipped": 0}

    def render(self, kind: NotificationKind, data: Dict[str, Any]) -> OutgoingMail:
        html = self.templates.get_template(f"{kind.value}.html").render(**data)
        return OutgoingMail(
            sender_name=self.sender_name,
            sender_address=self.sender_address,
            recipient=self.recipient or self.sender_address,
            subject=self._subject(kind, data),
            html=html,
            text=html_to_text(html),
        )

    @staticmethod
    def _subject(kind: NotificationKind, data: Dict[str, Any]) -> str:
        if kind is NotificationKind.CONTACT:
            return f"[UYNM Contact] {_single_line(data.get('subject'))}"
        if kind is NotificationKind.MEMBER:
            return (
                f"[UYNM] New {_single_line(data.get('involvement_track'))} Registration: "
                f"{_single_line(data.get('full_name'))}"
            )
        return f"[UYNM Newsletter] New Subscription: {_single_line(data.get('email'))}"

    def _skip(self, reason: str) -> NotificationOutcome:
        self.stats["skipped"] += 1
        return NotificationOutcome(delivered=False, reason=reason)

    async def notify(self, kind: str, data: Dict[str, Any]) -> NotificationOutcome:
        """
        Render and deliver one notification. Never raises.

        Args:
            kind: "contact", "member" or "newsletter"
            data: Submission fields (snake_case) used by the template
        """
        try:
            kind = NotificationKind(kind)
        except ValueError:
            logger.error("Unknown notification kind %r; nothing sent", kind)
            return self._skip("unknown_kind")

        if not self.transport.configured:
            logger.info("Email not configured. Skipping %s notification.", kind.value)
            return self._skip("not_configured")

        try:
            mail = self.render(kind, data)
            reference = await self.transport.send(mail)
        except Exception as e:
            self.stats["failed"] += 1
            logger.error(
                "Email notification failed (%s): %s: %s",
                kind.value,
                type(e).__name__,
                str(e),
            )
            return NotificationOutcome(delivered=False, reason=str(e) or type(e).__name__)

        self.stats["delivered"] += 1
        logger.info("Email notification sent (%s): %s", kind.value, reference)
        return NotificationOutcome(delivered=True, reference=reference)
