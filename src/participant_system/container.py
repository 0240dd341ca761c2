from __future__ import annotations

from dataclasses import dataclass

from .attendance.absence import AbsenceCounter
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceLedger
from .blacklist.mysql_blacklist_repository import MySQLBlacklistRepository
from .blacklist.repository import BlacklistRepository
from .blacklist.service import BlacklistPolicyEngine
from .core.constants import DEFAULT_ABSENCE_THRESHOLD, DEFAULT_BAN_DURATION_MONTHS
from .database.connection import DatabaseConnection, DBConfig
from .enrollments.gate import EnrollmentGate
from .enrollments.mysql_enrollment_repository import MySQLEnrollmentRepository
from .enrollments.repository import EnrollmentRepository
from .enrollments.service import EnrollmentService
from .mail.blacklist_mailer import BlacklistMailer
from .mail.sender import DEFAULT_MAIL_API_URL, EmailSender, ResendEmailSender
from .notifications.bus import NotificationBus
from .notifications.change_feed import ChangeFeedAdapter
from .notifications.inbox import NotificationInbox
from .profiles.mysql_profile_repository import MySQLProfileRepository
from .profiles.repository import ProfileRepository


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    blacklist_repo: BlacklistRepository
    enrollments_repo: EnrollmentRepository
    profiles_repo: ProfileRepository

    bus: NotificationBus
    change_feed: ChangeFeedAdapter
    inbox: NotificationInbox

    attendance_ledger: AttendanceLedger
    absence_counter: AbsenceCounter
    blacklist_engine: BlacklistPolicyEngine
    enrollment_gate: EnrollmentGate
    enrollment_service: EnrollmentService


def wire_services(
    *,
    attendance_repo: AttendanceRepository,
    blacklist_repo: BlacklistRepository,
    enrollments_repo: EnrollmentRepository,
    profiles_repo: ProfileRepository,
    email_sender: EmailSender | None = None,
    bus: NotificationBus | None = None,
    absence_threshold: int = DEFAULT_ABSENCE_THRESHOLD,
    ban_duration_months: int = DEFAULT_BAN_DURATION_MONTHS,
) -> Container:
    bus = bus or NotificationBus()
    mailer = BlacklistMailer(email_sender, profiles_repo) if email_sender else None
    inbox = NotificationInbox()
    inbox.attach(bus)

    absence_counter = AbsenceCounter(attendance_repo, default_threshold=absence_threshold)
    attendance_ledger = AttendanceLedger(attendance_repo, bus)
    blacklist_engine = BlacklistPolicyEngine(
        blacklist_repo,
        absence_counter,
        bus,
        mailer=mailer,
        default_duration_months=ban_duration_months,
    )
    enrollment_gate = EnrollmentGate(blacklist_engine)
    enrollment_service = EnrollmentService(enrollments_repo, enrollment_gate, bus)

    return Container(
        attendance_repo=attendance_repo,
        blacklist_repo=blacklist_repo,
        enrollments_repo=enrollments_repo,
        profiles_repo=profiles_repo,
        bus=bus,
        change_feed=ChangeFeedAdapter(bus),
        inbox=inbox,
        attendance_ledger=attendance_ledger,
        absence_counter=absence_counter,
        blacklist_engine=blacklist_engine,
        enrollment_gate=enrollment_gate,
        enrollment_service=enrollment_service,
    )


def build_container(
    *,
    db_config: dict,
    mail_config: dict | None = None,
    absence_threshold: int = DEFAULT_ABSENCE_THRESHOLD,
    ban_duration_months: int = DEFAULT_BAN_DURATION_MONTHS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    mail_config = mail_config or {}
    email_sender = ResendEmailSender(
        api_key=str(mail_config.get("api_key") or ""),
        from_address=str(mail_config.get("from_address") or ""),
        api_url=str(mail_config.get("api_url") or DEFAULT_MAIL_API_URL),
    )

    return wire_services(
        attendance_repo=MySQLAttendanceRepository(conn),
        blacklist_repo=MySQLBlacklistRepository(conn),
        enrollments_repo=MySQLEnrollmentRepository(conn),
        profiles_repo=MySQLProfileRepository(conn),
        email_sender=email_sender,
        absence_threshold=absence_threshold,
        ban_duration_months=ban_duration_months,
    )
