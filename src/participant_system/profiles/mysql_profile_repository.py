from __future__ import annotations

from typing import Iterable, Mapping, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Profile
from .repository import ProfileRepository


class MySQLProfileRepository(ProfileRepository):
    """Read-only view over profiles maintained by the auth collaborator."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, participant_id: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, email FROM profiles WHERE id=%s", (participant_id,))
            r = fetchone(cur)
            if not r:
                return None
            return Profile(participant_id=str(r["id"]), name=r.get("name"), email=r.get("email"))

    def names_for(self, participant_ids: Iterable[str]) -> Mapping[str, str]:
        ids = sorted({str(i) for i in participant_ids})
        if not ids:
            return {}
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT id, name FROM profiles WHERE id IN ({placeholders})", tuple(ids))
            return {str(r["id"]): (r.get("name") or "") for r in fetchall(cur)}
