"""Storage of known peer devices."""

from __future__ import annotations

import sqlite3
import time
from dataclasses import replace
from typing import Optional

from zenhost.models import PeerDrive


class PeerService:
    """Looks up, lists, adds and removes peer devices."""

    def __init__(self, db: sqlite3.Connection):
        self._db = db

    def _rows(self, where: str = "", params: tuple = (), suffix: str = "") -> list[PeerDrive]:
        columns = ", ".join(PeerDrive.COLUMNS)
        cursor = self._db.cursor()
        cursor.row_factory = sqlite3.Row
        sql = f"SELECT {columns} FROM {PeerDrive.TABLE}{where}{suffix}"
        return [PeerDrive(**dict(row)) for row in cursor.execute(sql, params)]

    def _first(self, column: str, value: str) -> Optional[PeerDrive]:
        found = self._rows(f" WHERE {column} = ?", (value,), " ORDER BY id LIMIT 1")
        return found[0] if found else None

    def get_peer_by_name(self, name: str) -> Optional[PeerDrive]:
        """Return the peer with this display name, or None."""
        return self._first("display_name", name)

    def get_peer_by_user_agent(self, user_agent: str) -> Optional[PeerDrive]:
        """Return the peer with this user agent, or None."""
        return self._first("user_agent", user_agent)

    def get_peer_by_id(self, peer_id: str) -> Optional[PeerDrive]:
        """Return the peer with this id, or None."""
        return self._first("id", peer_id)

    def get_peers(self) -> list[PeerDrive]:
        """Return all peers, most recently updated first."""
        return self._rows(suffix=" ORDER BY updated DESC")

    def create_peer(self, peer: PeerDrive) -> PeerDrive:
        """Store a peer and return it with its timestamps filled in."""
        now = int(time.time())
        stored = replace(peer, created=peer.created or now, updated=peer.updated or now)
        values = tuple(getattr(stored, column) for column in PeerDrive.COLUMNS)
        columns = ", ".join(PeerDrive.COLUMNS)
        marks = ", ".join("?" for _ in PeerDrive.COLUMNS)
        with self._db:
            self._db.execute(
                f"INSERT INTO {PeerDrive.TABLE} ({columns}) VALUES ({marks})", values
            )
        return stored

    def delete_peer(self, peer_id: str) -> None:
        """Remove the peer with this id."""
        with self._db:
            self._db.execute(f"DELETE FROM {PeerDrive.TABLE} WHERE id = ?", (peer_id,))