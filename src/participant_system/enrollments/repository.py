from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EnrollmentStatus
from .model import Enrollment


class EnrollmentRepository(Protocol):
    def create(self, *, participant_id: str, program_id: int) -> Enrollment:
        raise NotImplementedError

    def get_by_id(self, enrollment_id: int) -> Optional[Enrollment]:
        raise NotImplementedError

    def get_for_participant_and_program(self, participant_id: str, program_id: int) -> Optional[Enrollment]:
        raise NotImplementedError

    def update_status(self, *, enrollment_id: int, status: EnrollmentStatus) -> bool:
        raise NotImplementedError

    def delete(self, enrollment_id: int) -> bool:
        raise NotImplementedError

    def list_for_program(self, program_id: int, status: Optional[EnrollmentStatus] = None) -> Sequence[Enrollment]:
        raise NotImplementedError

    def list_for_participant(self, participant_id: str) -> Sequence[Enrollment]:
        raise NotImplementedError
