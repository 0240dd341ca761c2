from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EnrollmentStatus
from ..core.exceptions import StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Enrollment
from .repository import EnrollmentRepository

_COLUMNS = "application_id, participant_id, program_id, status, created_at, updated_at"


def _to_enrollment(r: dict) -> Enrollment:
    return Enrollment(
        enrollment_id=int(r["application_id"]),
        participant_id=str(r["participant_id"]),
        program_id=int(r["program_id"]),
        status=EnrollmentStatus(r["status"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, participant_id: str, program_id: int) -> Enrollment:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO applications(participant_id, program_id, status) VALUES(%s,%s,%s)",
                (participant_id, int(program_id), EnrollmentStatus.PENDING.value),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM applications WHERE application_id=%s", (new_id,))
            r = fetchone(cur)
            if not r:
                raise StorageError("Application insert was not persisted")
            return _to_enrollment(r)

    def get_by_id(self, enrollment_id: int) -> Optional[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM applications WHERE application_id=%s", (int(enrollment_id),))
            r = fetchone(cur)
            return _to_enrollment(r) if r else None

    def get_for_participant_and_program(self, participant_id: str, program_id: int) -> Optional[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM applications WHERE participant_id=%s AND program_id=%s",
                (participant_id, int(program_id)),
            )
            r = fetchone(cur)
            return _to_enrollment(r) if r else None

    def update_status(self, *, enrollment_id: int, status: EnrollmentStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE applications SET status=%s, updated_at=CURRENT_TIMESTAMP WHERE application_id=%s",
                (status.value, int(enrollment_id)),
            )
            return cur.rowcount > 0

    def delete(self, enrollment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM applications WHERE application_id=%s", (int(enrollment_id),))
            return cur.rowcount > 0

    def list_for_program(self, program_id: int, status: Optional[EnrollmentStatus] = None) -> Sequence[Enrollment]:
        clauses = ["program_id=%s"]
        params: list[object] = [int(program_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM applications
                WHERE {" AND ".join(clauses)}
                ORDER BY created_at DESC, application_id DESC
                """,
                tuple(params),
            )
            return [_to_enrollment(r) for r in fetchall(cur)]

    def list_for_participant(self, participant_id: str) -> Sequence[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM applications
                WHERE participant_id=%s
                ORDER BY created_at DESC, application_id DESC
                """,
                (participant_id,),
            )
            return [_to_enrollment(r) for r in fetchall(cur)]
