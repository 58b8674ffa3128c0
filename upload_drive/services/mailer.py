"""
Outgoing mail.
SMTP with a STARTTLS upgrade, as used for Gmail app passwords on port 587.
"""
import smtplib
from email.message import EmailMessage
from typing import List, Optional

import structlog
from pydantic import BaseModel, Field

from ..config import settings


logger = structlog.get_logger(__name__)


class MailAttachment(BaseModel):
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class OutgoingMail(BaseModel):
    to: List[str] = Field(default_factory=list)
    cc: List[str] = Field(default_factory=list)
    subject: str
    text: str
    attachments: List[MailAttachment] = Field(default_factory=list)


class MailTransport:
    def send_mail(self, mail: OutgoingMail) -> None:
        raise NotImplementedError


def build_message(mail: OutgoingMail, sender: str) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = sender
    if mail.to:
        msg["To"] = ", ".join(mail.to)
    if mail.cc:
        msg["Cc"] = ", ".join(mail.cc)
    msg["Subject"] = mail.subject
    msg.set_content(mail.text)
    for att in mail.attachments:
        maintype, _, subtype = att.content_type.partition("/")
        msg.add_attachment(
            att.content,
            maintype=maintype,
            subtype=subtype or "octet-stream",
            filename=att.filename,
        )
    return msg


class SmtpMailTransport(MailTransport):
    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
    ) -> None:
        self.username = username or settings.mail_user
        self.password = password or settings.mail_password
        if not self.username or not self.password:
            raise RuntimeError("ENV mancanti per email")
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port

    def send_mail(self, mail: OutgoingMail) -> None:
        if not mail.to and not mail.cc:
            raise ValueError("Nessun destinatario email")
        msg = build_message(mail, sender=self.username)
        with smtplib.SMTP(self.host, self.port) as s:
            s.starttls()
            s.login(self.username, self.password)
            s.send_message(msg)
        logger.info("notification_sent", subject=mail.subject, to=mail.to, cc=mail.cc,
                    attachments=[a.filename for a in mail.attachments])
