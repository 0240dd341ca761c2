from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import requests

logger = logging.getLogger(__name__)

DEFAULT_MAIL_API_URL = "https://api.resend.com/emails"


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    text: str


class EmailDeliveryError(Exception):
    """Raised when the mail provider rejects or cannot receive a message."""


class EmailSender(Protocol):
    def send(self, message: EmailMessage) -> None:
        raise NotImplementedError


class ResendEmailSender(EmailSender):
    """Posts messages to a Resend-compatible HTTP API."""

    def __init__(
        self,
        *,
        api_key: str,
        from_address: str,
        api_url: str = DEFAULT_MAIL_API_URL,
        session: requests.Session | None = None,
    ):
        self._api_key = api_key
        self._from = from_address
        self._api_url = api_url
        self._session = session or requests.Session()

    def send(self, message: EmailMessage) -> None:
        if not self._api_key:
            raise EmailDeliveryError("Mail API key is not configured")

        try:
            res = self._session.post(
                self._api_url,
                headers={"Authorization": f"Bearer {self._api_key}"},
                json={
                    "from": self._from,
                    "to": [message.to],
                    "subject": message.subject,
                    "text": message.text,
                },
            )
        except requests.RequestException as exc:
            raise EmailDeliveryError(f"Mail API unreachable: {exc}") from exc

        if not res.ok:
            raise EmailDeliveryError(f"Mail API failed with status {res.status_code}: {res.text}")
        logger.info("Email %r sent to %s", message.subject, message.to)
