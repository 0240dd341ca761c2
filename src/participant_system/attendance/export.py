from __future__ import annotations

import csv
import io
from typing import Iterable, Mapping, Optional

from .model import AttendanceRecord

_HEADER = ["participant_id", "name", "program_id", "date", "status", "note"]


def export_attendance_csv(
    records: Iterable[AttendanceRecord],
    *,
    names: Optional[Mapping[str, str]] = None,
) -> str:
    """Render a read-only ledger snapshot as CSV text."""
    names = names or {}
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(_HEADER)
    for r in records:
        writer.writerow(
            [
                r.participant_id,
                names.get(r.participant_id, ""),
                r.program_id,
                r.attendance_date.strftime("%Y-%m-%d"),
                r.status.value,
                r.note or "",
            ]
        )
    return buf.getvalue()
