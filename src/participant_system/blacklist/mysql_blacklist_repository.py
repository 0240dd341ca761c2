from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.exceptions import StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import BlacklistRecord
from .repository import BlacklistRepository

_COLUMNS = (
    "blacklist_id, participant_id, program_id, reason, banned_at, banned_until, "
    "banned_by, is_active, lifted_at, lifted_by"
)


def _to_record(r: dict) -> BlacklistRecord:
    return BlacklistRecord(
        blacklist_id=int(r["blacklist_id"]),
        participant_id=str(r["participant_id"]),
        program_id=int(r["program_id"]) if r.get("program_id") is not None else None,
        reason=r["reason"],
        banned_at=r["banned_at"],
        banned_until=r["banned_until"],
        banned_by=r.get("banned_by"),
        active=bool(r["is_active"]),
        lifted_at=r.get("lifted_at"),
        lifted_by=r.get("lifted_by"),
    )


class MySQLBlacklistRepository(BlacklistRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        participant_id: str,
        program_id: Optional[int],
        reason: str,
        banned_at: datetime,
        banned_until: datetime,
        banned_by: Optional[str],
    ) -> BlacklistRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO blacklist(participant_id, program_id, reason, banned_at, banned_until, banned_by, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                (participant_id, program_id, reason, banned_at, banned_until, banned_by),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM blacklist WHERE blacklist_id=%s", (new_id,))
            r = fetchone(cur)
            if not r:
                raise StorageError("Blacklist insert was not persisted")
            return _to_record(r)

    def get_by_id(self, blacklist_id: int) -> Optional[BlacklistRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM blacklist WHERE blacklist_id=%s", (int(blacklist_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def deactivate(self, *, blacklist_id: int, lifted_by: Optional[str], lifted_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE blacklist
                SET is_active=0, lifted_by=%s, lifted_at=%s
                WHERE blacklist_id=%s AND is_active=1
                """,
                (lifted_by, lifted_at, int(blacklist_id)),
            )
            return cur.rowcount > 0

    def list_active_until_after(self, *, participant_id: str, as_of: datetime) -> Sequence[BlacklistRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM blacklist
                WHERE participant_id=%s AND is_active=1 AND banned_until > %s
                ORDER BY banned_until DESC
                """,
                (participant_id, as_of),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_participant(self, participant_id: str) -> Sequence[BlacklistRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM blacklist
                WHERE participant_id=%s
                ORDER BY banned_at DESC, blacklist_id DESC
                """,
                (participant_id,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_all(self, *, limit: int = 500) -> Sequence[BlacklistRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM blacklist
                ORDER BY banned_at DESC, blacklist_id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_to_record(r) for r in fetchall(cur)]
