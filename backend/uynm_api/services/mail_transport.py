"""
UYNM Backend — Mail Transport
===============================

What:  The outbound mail collaborator: an abstract `MailTransport` and the SMTP
       relay implementation backed by aiosmtplib.
How:   The notification dispatcher renders an `OutgoingMail` and calls
       `transport.send()`. The SMTP transport opens one connection per message
       with the configured timeout; it neither retries nor queues.
Who:   Constructed in create_app() from settings; tests inject recording or
       failing transports.

TLS selection:
    port 465 → implicit TLS
    other    → STARTTLS when the server offers it (aiosmtplib default)
"""

import logging
from abc import ABC, abstractmethod
from email.message import EmailMessage
from email.utils import formataddr, make_msgid

import aiosmtplib
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class OutgoingMail(BaseModel):
    sender_name: str
    sender_address: str
    recipient: str
    subject: str
    html: str
    text: str

    def to_email_message(self) -> EmailMessage:
        message = EmailMessage()
        message["From"] = formataddr((self.sender_name, self.sender_address))
        message["To"] = self.recipient
        message["Subject"] = self.subject
        domain = self.sender_address.rpartition("@")[2] or None
        message["Message-ID"] = make_msgid(domain=domain)
        message.set_content(self.text)
        message.add_alternative(self.html, subtype="html")
        return message


class MailTransport(ABC):
    """Delivers one rendered message. Raises on any delivery failure."""

    @property
    @abstractmethod
    def configured(self) -> bool:
        """False when credentials are missing; the dispatcher then skips sending."""

    @abstractmethod
    async def send(self, mail: OutgoingMail) -> str:
        """Deliver `mail` and return its message id."""


class SmtpMailTransport(MailTransport):

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.username and self.password)

    async def send(self, mail: OutgoingMail) -> str:
        message = mail.to_email_message()
        await aiosmtplib.send(
            message,
            hostname=self.host,
            port=self.port,
            username=self.username,
            password=self.password,
            use_tls=self.port == 465,
            timeout=self.timeout,
        )
        message_id = message["Message-ID"]
        logger.debug("SMTP relay %s:%d accepted %s", self.host, self.port, message_id)
        return message_id
