import smtplib

from app.config import get_settings
from app.services.email_sender import EmailSender, html_to_text
from app.services.email_templates import (
    build_confirmation_email,
    build_confirmation_link,
    build_new_password_email,
)


class FakeSMTP:
    instances: list["FakeSMTP"] = []

    def __init__(self, host, port):
        self.host = host
        self.port = port
        self.messages = []
        self.logged_in_as = None
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        self.logged_in_as = user

    def send_message(self, msg):
        self.messages.append(msg)


def _settings(**overrides):
    return get_settings().model_copy(update=overrides)


def test_send_skips_when_smtp_is_not_configured(monkeypatch):
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    FakeSMTP.instances.clear()

    sent = EmailSender(_settings(smtp_host=None)).send("a@x.com", "Subject", "<p>Hi</p>")

    assert sent is False
    assert FakeSMTP.instances == []


def test_send_delivers_multipart_message(monkeypatch):
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    FakeSMTP.instances.clear()
    sender = EmailSender(_settings(smtp_host="smtp.example.com", smtp_user="mailer", smtp_password="pw"))

    sent = sender.send("a@x.com", "Confirm your email address", "<p>Hello</p>")

    assert sent is True
    [server] = FakeSMTP.instances
    assert (server.host, server.port) == ("smtp.example.com", 587)
    assert server.logged_in_as == "mailer"
    [msg] = server.messages
    assert msg["To"] == "a@x.com"
    assert msg["Subject"] == "Confirm your email address"
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]


def test_send_reports_transport_failure(monkeypatch):
    class BrokenSMTP(FakeSMTP):
        def send_message(self, msg):
            raise smtplib.SMTPException("relay refused")

    monkeypatch.setattr(smtplib, "SMTP", BrokenSMTP)

    sent = EmailSender(_settings(smtp_host="smtp.example.com")).send("a@x.com", "Subject", "<p>Hi</p>")

    assert sent is False


def test_confirmation_email_contains_link_and_lifetime():
    link = build_confirmation_link("http://localhost:8000/api/v1/auth/confirm", "abc-123")

    html = build_confirmation_email(link, 15)

    assert link == "http://localhost:8000/api/v1/auth/confirm?token=abc-123"
    assert f'href="{link}"' in html
    assert "15 minutes" in html


def test_new_password_email_escapes_password():
    html = build_new_password_email("a<b&c")

    assert "a&lt;b&amp;c" in html
    assert "a<b&c" not in html


def test_html_to_text_strips_tags():
    assert html_to_text("<p>Hello</p><p>World<br>again</p>") == "Hello\n\nWorld\nagain"
