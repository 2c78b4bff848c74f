"""Tests for outbound email — background delivery, SMTP session, templates."""

import logging

import pytest

import tasklist.infrastructure.mailer as mailer_module
from tasklist.infrastructure.mailer import (
    ConsoleMailer,
    SmtpMailer,
    activation_email,
    password_recovery_email,
)

from tests.services.recording_mailer import RecordingMailer


class _FakeSMTP:
    instances: list["_FakeSMTP"] = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.calls: list[str] = []
        self.messages = []
        _FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, username, password):
        self.calls.append(f"login:{username}")

    def send_message(self, msg):
        self.calls.append("send")
        self.messages.append(msg)


@pytest.fixture
def fake_smtp(monkeypatch):
    _FakeSMTP.instances = []
    monkeypatch.setattr(mailer_module.smtplib, "SMTP", _FakeSMTP)
    return _FakeSMTP


async def test_background_send_delivers_after_drain():
    mailer = RecordingMailer()
    mailer.send_in_background(activation_email("a@x.com", "alice", "http://t/a"))
    await mailer.drain()
    assert [e.to for e in mailer.sent] == ["a@x.com"]


async def test_background_failure_is_logged_not_raised(caplog):
    mailer = RecordingMailer(fail=True)
    with caplog.at_level(logging.ERROR, logger="tasklist.infrastructure.mailer"):
        mailer.send_in_background(activation_email("a@x.com", "alice", "http://t/a"))
        await mailer.drain()
    assert mailer.sent == []
    assert any("Email sending failed" in r.getMessage() for r in caplog.records)


async def test_drain_with_nothing_pending_returns():
    await RecordingMailer().drain()


async def test_foreground_send_propagates_failure():
    with pytest.raises(ConnectionError):
        await RecordingMailer(fail=True).send(
            activation_email("a@x.com", "alice", "http://t/a"),
        )


async def test_smtp_mailer_uses_starttls_and_login(fake_smtp):
    mailer = SmtpMailer("smtp.x.com", 587, "bot", "secret", "no-reply@x.com")
    await mailer.send(password_recovery_email("a@x.com", "alice", "tok123"))

    (server,) = fake_smtp.instances
    assert (server.host, server.port) == ("smtp.x.com", 587)
    assert server.calls == ["starttls", "login:bot", "send"]
    msg = server.messages[0]
    assert msg["From"] == "no-reply@x.com"
    assert msg["To"] == "a@x.com"
    assert msg["Subject"] == "Password recovery"
    assert msg.get_body(preferencelist=("plain",)).get_content().count("tok123") == 1
    assert "<code>tok123</code>" in msg.get_body(preferencelist=("html",)).get_content()


async def test_console_mailer_logs_instead_of_sending(caplog, fake_smtp):
    with caplog.at_level(logging.INFO, logger="tasklist.infrastructure.mailer"):
        await ConsoleMailer("no-reply@x.com").send(
            activation_email("a@x.com", "alice", "http://t/activate/abc"),
        )
    assert fake_smtp.instances == []
    assert any("http://t/activate/abc" in r.getMessage() for r in caplog.records)


def test_activation_email_links_to_url():
    email = activation_email("a@x.com", "alice", "http://t/activate/abc")
    assert email.subject == "Account activation"
    assert "http://t/activate/abc" in email.text
    assert 'href="http://t/activate/abc"' in email.html


def test_templates_escape_username_in_html():
    email = activation_email("a@x.com", "<b>eve</b>", "http://t/a")
    assert "&lt;b&gt;eve&lt;/b&gt;" in email.html
    assert "<b>eve</b>" in email.text
