"""Storage of application dependency records."""

from __future__ import annotations

import sqlite3
from dataclasses import replace
from datetime import datetime
from typing import Optional

from zenhost.models import RelyRecord


def _to_row(record: RelyRecord) -> dict:
    row = {column: getattr(record, column) for column in RelyRecord.COLUMNS}
    for column in ("created_at", "updated_at"):
        if row[column] is not None:
            row[column] = row[column].isoformat()
    return row


def _from_row(row: sqlite3.Row) -> RelyRecord:
    values = dict(row)
    for column in ("created_at", "updated_at"):
        if values.get(column):
            values[column] = datetime.fromisoformat(values[column])
        else:
            values[column] = None
    return RelyRecord(**values)


class RelyService:
    """Creates, looks up and removes dependency records."""

    def __init__(self, db: sqlite3.Connection):
        self._db = db

    def create(self, rely: RelyRecord) -> RelyRecord:
        """Store a record and return it with its id and timestamps filled in."""
        now = datetime.now()
        record = replace(
            rely,
            created_at=rely.created_at or now,
            updated_at=rely.updated_at or now,
        )
        row = _to_row(record)
        if not record.id:
            del row["id"]
        columns = ", ".join(row)
        marks = ", ".join("?" for _ in row)
        with self._db:
            cursor = self._db.execute(
                f"INSERT INTO {RelyRecord.TABLE} ({columns}) VALUES ({marks})",
                tuple(row.values()),
            )
        return replace(record, id=record.id or cursor.lastrowid)

    def get_info(self, custom_id: str) -> Optional[RelyRecord]:
        """Return the first record with this custom id, or None."""
        cursor = self._db.cursor()
        cursor.row_factory = sqlite3.Row
        row = cursor.execute(
            f"SELECT * FROM {RelyRecord.TABLE} WHERE custom_id = ? ORDER BY id LIMIT 1",
            (custom_id,),
        ).fetchone()
        return _from_row(row) if row is not None else None

    def delete(self, custom_id: str) -> None:
        """Remove every record with this custom id."""
        with self._db:
            self._db.execute(
                f"DELETE FROM {RelyRecord.TABLE} WHERE custom_id = ?", (custom_id,)
            )