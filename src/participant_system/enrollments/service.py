from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.validators import require_participant_id, require_positive_id
from ..core.enums import EnrollmentStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..notifications.bus import NotificationBus
from ..notifications.events import ApplicationStatusChanged
from .gate import EnrollmentGate
from .model import Enrollment
from .repository import EnrollmentRepository

logger = logging.getLogger(__name__)


class EnrollmentService:
    def __init__(self, enrollments: EnrollmentRepository, gate: EnrollmentGate, bus: NotificationBus):
        self._enrollments = enrollments
        self._gate = gate
        self._bus = bus

    @staticmethod
    def _parse_status(value: Any) -> EnrollmentStatus:
        try:
            return EnrollmentStatus(value)
        except ValueError:
            raise ValidationError("Application status must be pending, approved or cancelled")

    def apply(self, participant_id: Any, program_id: Any, *, now: datetime | None = None) -> Enrollment:
        participant_id = require_participant_id(participant_id)
        program_id = require_positive_id(program_id, "Program id")

        self._gate.ensure_can_enroll(participant_id, now=now)

        if self._enrollments.get_for_participant_and_program(participant_id, program_id):
            raise ValidationError("You have already applied to this program")

        enrollment = self._enrollments.create(participant_id=participant_id, program_id=program_id)
        logger.info("Application %s created for participant=%s program=%s", enrollment.enrollment_id, participant_id, program_id)
        return enrollment

    def update_status(self, enrollment_id: Any, status: Any) -> Enrollment:
        enrollment_id = require_positive_id(enrollment_id, "Application id")
        status = self._parse_status(status)

        current = self._enrollments.get_by_id(enrollment_id)
        if not current:
            raise NotFoundError(f"Application {enrollment_id} does not exist")
        if current.status == status:
            return current

        if not self._enrollments.update_status(enrollment_id=enrollment_id, status=status):
            raise NotFoundError(f"Application {enrollment_id} does not exist")

        updated = self._enrollments.get_by_id(enrollment_id) or current
        self._bus.publish(
            ApplicationStatusChanged(
                enrollment_id=enrollment_id,
                participant_id=current.participant_id,
                program_id=current.program_id,
                old_status=current.status,
                new_status=status,
            )
        )
        return updated

    def approve(self, enrollment_id: Any) -> Enrollment:
        return self.update_status(enrollment_id, EnrollmentStatus.APPROVED)

    def reject(self, enrollment_id: Any) -> Enrollment:
        return self.update_status(enrollment_id, EnrollmentStatus.CANCELLED)

    def revert(self, enrollment_id: Any) -> Enrollment:
        return self.update_status(enrollment_id, EnrollmentStatus.PENDING)

    def delete(self, enrollment_id: Any) -> None:
        enrollment_id = require_positive_id(enrollment_id, "Application id")
        if not self._enrollments.delete(enrollment_id):
            raise NotFoundError(f"Application {enrollment_id} does not exist")
        logger.info("Application %s deleted", enrollment_id)

    def list_for_program(self, program_id: Any, status: Any = None) -> Sequence[Enrollment]:
        program_id = require_positive_id(program_id, "Program id")
        parsed: Optional[EnrollmentStatus] = self._parse_status(status) if status else None
        return list(self._enrollments.list_for_program(program_id, parsed))

    def list_for_participant(self, participant_id: Any) -> Sequence[Enrollment]:
        return list(self._enrollments.list_for_participant(require_participant_id(participant_id)))
