import pytest

from upload_drive.config import settings
from upload_drive.services import mailer as mailer_module
from upload_drive.services.mailer import (
    MailAttachment,
    OutgoingMail,
    SmtpMailTransport,
    build_message,
)


class FakeSMTP:
    instances = []

    def __init__(self, host, port):
        self.host = host
        self.port = port
        self.actions = []
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.actions.append("quit")
        return False

    def starttls(self):
        self.actions.append("starttls")

    def login(self, user, password):
        self.actions.append(("login", user, password))

    def send_message(self, msg):
        self.actions.append("send")
        self.messages.append(msg)


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(mailer_module.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def sample_mail(**overrides):
    data = dict(
        to=["a@example.org", "b@example.org"],
        cc=["c@example.org"],
        subject="CHECKLIST – MIS_OSIMO",
        text="Documento: CHECKLIST\n",
        attachments=[MailAttachment(filename="c.pdf", content=b"%PDF\x00\x01", content_type="application/pdf")],
    )
    data.update(overrides)
    return OutgoingMail(**data)


def test_missing_credentials(monkeypatch):
    monkeypatch.setattr(settings, "mail_user", None)
    monkeypatch.setattr(settings, "mail_password", None)
    with pytest.raises(RuntimeError, match="ENV mancanti per email"):
        SmtpMailTransport()


def test_defaults_to_gmail_starttls_port(monkeypatch):
    monkeypatch.setattr(settings, "mail_user", "bot@example.org")
    monkeypatch.setattr(settings, "mail_password", "pwd")
    transport = SmtpMailTransport()
    assert (transport.host, transport.port) == ("smtp.gmail.com", 587)


def test_send_uses_starttls_then_login(fake_smtp):
    transport = SmtpMailTransport("bot@example.org", "pwd", host="mail.test", port=587)
    transport.send_mail(sample_mail())

    [smtp] = fake_smtp.instances
    assert (smtp.host, smtp.port) == ("mail.test", 587)
    assert smtp.actions == ["starttls", ("login", "bot@example.org", "pwd"), "send", "quit"]
    msg = smtp.messages[0]
    assert msg["From"] == "bot@example.org"
    assert msg["To"] == "a@example.org, b@example.org"
    assert msg["Cc"] == "c@example.org"


def test_send_without_recipients_fails(fake_smtp):
    transport = SmtpMailTransport("bot@example.org", "pwd")
    with pytest.raises(ValueError, match="Nessun destinatario"):
        transport.send_mail(sample_mail(to=[], cc=[]))
    assert fake_smtp.instances == []


def test_build_message_attaches_pdf():
    msg = build_message(sample_mail(cc=[]), sender="bot@example.org")

    assert msg["Subject"] == "CHECKLIST – MIS_OSIMO"
    assert msg["Cc"] is None
    assert msg.get_body(preferencelist=("plain",)).get_content() == "Documento: CHECKLIST\n"
    [att] = list(msg.iter_attachments())
    assert att.get_filename() == "c.pdf"
    assert att.get_content_type() == "application/pdf"
    assert att.get_content() == b"%PDF\x00\x01"
