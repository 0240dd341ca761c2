from __future__ import annotations

from datetime import datetime

import pytest
import requests

from participant_system.blacklist.model import BlacklistRecord
from participant_system.mail.blacklist_mailer import BAN_SUBJECT, LIFT_SUBJECT, BlacklistMailer
from participant_system.mail.sender import EmailDeliveryError, EmailMessage, ResendEmailSender

RECORD = BlacklistRecord(
    blacklist_id=5,
    participant_id="user-x",
    program_id=10,
    reason="3 absences",
    banned_at=datetime(2026, 3, 10, 9, 0),
    banned_until=datetime(2026, 9, 10, 9, 0),
    banned_by="admin-1",
    active=True,
)


class FakeResponse:
    def __init__(self, status_code: int, text: str = ""):
        self.status_code = status_code
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class FakeSession:
    def __init__(self, response=None, error: Exception | None = None):
        self.response = response or FakeResponse(200)
        self.error = error
        self.calls = []

    def post(self, url, headers=None, json=None):
        self.calls.append({"url": url, "headers": headers, "json": json})
        if self.error:
            raise self.error
        return self.response


def test_ban_and_lift_notices(profiles_repo, sender):
    mailer = BlacklistMailer(sender, profiles_repo)

    assert mailer.send_ban_notice(RECORD) is None
    assert mailer.send_lift_notice(RECORD) is None

    ban, lift = sender.sent
    assert ban.subject == BAN_SUBJECT
    assert "Dear Kim Minji" in ban.text
    assert "2026-09-10" in ban.text
    assert "3 absences" in ban.text
    assert lift.subject == LIFT_SUBJECT


def test_mailer_never_raises(profiles_repo):
    class Exploding:
        def send(self, message):
            raise RuntimeError("smtp down")

    warning = BlacklistMailer(Exploding(), profiles_repo).send_ban_notice(RECORD)

    assert warning == "Notification email failed: smtp down"


def test_resend_sender_posts_message():
    session = FakeSession()
    sender = ResendEmailSender(api_key="key-1", from_address="ops@example.org", api_url="https://mail.test/emails", session=session)

    sender.send(EmailMessage(to="minji@example.org", subject="Hi", text="Body"))

    call = session.calls[0]
    assert call["url"] == "https://mail.test/emails"
    assert call["headers"]["Authorization"] == "Bearer key-1"
    assert call["json"] == {"from": "ops@example.org", "to": ["minji@example.org"], "subject": "Hi", "text": "Body"}


def test_resend_sender_errors():
    message = EmailMessage(to="a@example.org", subject="s", text="t")

    with pytest.raises(EmailDeliveryError):
        ResendEmailSender(api_key="", from_address="x", session=FakeSession()).send(message)

    with pytest.raises(EmailDeliveryError, match="status 422"):
        ResendEmailSender(api_key="k", from_address="x", session=FakeSession(FakeResponse(422, "bad"))).send(message)

    with pytest.raises(EmailDeliveryError, match="unreachable"):
        ResendEmailSender(
            api_key="k", from_address="x", session=FakeSession(error=requests.ConnectionError("dns"))
        ).send(message)
