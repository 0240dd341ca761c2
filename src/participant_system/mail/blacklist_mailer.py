from __future__ import annotations

import logging
from typing import Optional

from ..blacklist.model import BlacklistRecord
from ..common.datetime_utils import format_day
from ..profiles.repository import ProfileRepository
from .sender import EmailMessage, EmailSender

logger = logging.getLogger(__name__)

BAN_SUBJECT = "Program participation restricted"
LIFT_SUBJECT = "Program participation restriction lifted"


class BlacklistMailer:
    """Sends ban/lift notices. Never raises; failures come back as warning text."""

    def __init__(self, sender: EmailSender, profiles: ProfileRepository):
        self._sender = sender
        self._profiles = profiles

    def send_ban_notice(self, record: BlacklistRecord) -> Optional[str]:
        return self._deliver(
            record,
            subject=BAN_SUBJECT,
            body=lambda name: (
                f"Dear {name},\n\n"
                f"Your applications to programs are restricted until {format_day(record.banned_until)}.\n"
                f"Reason: {record.reason}\n"
            ),
        )

    def send_lift_notice(self, record: BlacklistRecord) -> Optional[str]:
        return self._deliver(
            record,
            subject=LIFT_SUBJECT,
            body=lambda name: (
                f"Dear {name},\n\n"
                "Your participation restriction has been lifted. You can apply to programs again.\n"
            ),
        )

    def _deliver(self, record: BlacklistRecord, *, subject: str, body) -> Optional[str]:
        try:
            profile = self._profiles.get_by_id(record.participant_id)
            if not profile or not profile.email:
                warning = f"No email on file for participant {record.participant_id}"
                logger.warning(warning)
                return warning
            self._sender.send(EmailMessage(to=profile.email, subject=subject, text=body(profile.display_name)))
        except Exception as exc:
            logger.warning("Blacklist email for record %s failed: %s", record.blacklist_id, exc, exc_info=True)
            return f"Notification email failed: {exc}"
        return None
