from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, participant_id, program_id, attendance_date, status, note, created_at, updated_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        participant_id=str(r["participant_id"]),
        program_id=int(r["program_id"]),
        attendance_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        note=r.get("note"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(
        self,
        *,
        participant_id: str,
        program_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            # Relies on UNIQUE(participant_id, program_id, attendance_date); last write wins.
            cur.execute(
                """
                INSERT INTO attendance(participant_id, program_id, attendance_date, status, note)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    note=VALUES(note),
                    updated_at=CURRENT_TIMESTAMP
                """,
                (participant_id, program_id, attendance_date, status.value, note),
            )
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE participant_id=%s AND program_id=%s AND attendance_date=%s
                """,
                (participant_id, program_id, attendance_date),
            )
            r = fetchone(cur)
            if not r:
                raise StorageError("Attendance upsert was not persisted")
            return _to_record(r)

    def list_for_program(self, program_id: int, attendance_date: Optional[date] = None) -> Sequence[AttendanceRecord]:
        clauses = ["program_id=%s"]
        params: list[object] = [int(program_id)]
        if attendance_date is not None:
            clauses.append("attendance_date=%s")
            params.append(attendance_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE {" AND ".join(clauses)}
                ORDER BY attendance_date ASC, participant_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_participant(self, participant_id: str, program_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        clauses = ["participant_id=%s"]
        params: list[object] = [participant_id]
        if program_id is not None:
            clauses.append("program_id=%s")
            params.append(int(program_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE {" AND ".join(clauses)}
                ORDER BY attendance_date DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_by_status(self, *, participant_id: str, program_id: int, status: AttendanceStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM attendance
                WHERE participant_id=%s AND program_id=%s AND status=%s
                """,
                (participant_id, int(program_id), status.value),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0
