import smtplib

import pytest

from app.core.config import settings
from app.services import email


class FakeSMTP:
    instances = []

    def __init__(self, host, port, fail_login=False):
        self.host = host
        self.port = port
        self.fail_login = fail_login
        self.sent = []
        self.closed = False
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        return False

    def starttls(self):
        pass

    def login(self, username, password):
        if self.fail_login:
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    def sendmail(self, sender, to, message):
        self.sent.append((sender, to))


@pytest.fixture(autouse=True)
def reset_instances():
    FakeSMTP.instances = []


def test_sends_over_ssl(monkeypatch):
    monkeypatch.setattr(settings, "MAIL_SSL", True)
    monkeypatch.setattr(email.smtplib, "SMTP_SSL", FakeSMTP)

    assert email.send_email("asha@example.com", "Hello", "<p>Hi</p>") is True

    server = FakeSMTP.instances[0]
    assert server.sent == [(settings.MAIL_FROM, "asha@example.com")]
    assert server.closed is True


def test_connection_is_closed_when_login_fails(monkeypatch):
    monkeypatch.setattr(settings, "MAIL_SSL", False)
    monkeypatch.setattr(email.smtplib, "SMTP", lambda host, port: FakeSMTP(host, port, fail_login=True))

    assert email.send_email("asha@example.com", "Hello", "<p>Hi</p>") is False

    server = FakeSMTP.instances[0]
    assert server.sent == []
    assert server.closed is True


def test_reset_mail_links_to_the_site(monkeypatch):
    captured = {}

    def fake_send(to_email, subject, body):
        captured.update(to=to_email, body=body)
        return True

    monkeypatch.setattr(email, "send_email", fake_send)

    email.send_password_reset_email("asha@example.com", "Asha", "tok123")

    assert captured["to"] == "asha@example.com"
    assert "/reset-password?token=tok123" in captured["body"]
