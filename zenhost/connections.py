"""Storage and mounting of remote SMB connections."""

from __future__ import annotations

import sqlite3
import subprocess
import time
from typing import Optional

from zenhost.models import ConnectionRecord

_LIST_COLUMNS = ("username", "host", "port", "status", "id", "mount_point")
_HOST_COLUMNS = ("username", "host", "status", "id")
_DETAIL_COLUMNS = (
    "username",
    "password",
    "host",
    "status",
    "id",
    "directories",
    "mount_point",
    "port",
)


class ConnectionsService:
    """Keeps SMB connection records and mounts or unmounts their shares."""

    def __init__(self, db: sqlite3.Connection):
        self._db = db

    def _select(
        self, columns: tuple[str, ...], where: str = "", params: tuple = (), suffix: str = ""
    ) -> list[ConnectionRecord]:
        cursor = self._db.cursor()
        cursor.row_factory = sqlite3.Row
        sql = f"SELECT {', '.join(columns)} FROM {ConnectionRecord.TABLE}{where}{suffix}"
        return [ConnectionRecord(**dict(row)) for row in cursor.execute(sql, params)]

    def get_connections_list(self) -> list[ConnectionRecord]:
        """Return all connections without credentials or directories."""
        return self._select(_LIST_COLUMNS)

    def get_connection_by_host(self, host: str) -> list[ConnectionRecord]:
        """Return the connections to a host, with only their summary fields."""
        return self._select(_HOST_COLUMNS, " WHERE host = ?", (host,))

    def get_connection_by_id(self, connection_id) -> Optional[ConnectionRecord]:
        """Return the full connection with this id, or None."""
        found = self._select(
            _DETAIL_COLUMNS, " WHERE id = ?", (connection_id,), " ORDER BY id LIMIT 1"
        )
        return found[0] if found else None

    def _write(self, connection: ConnectionRecord, verb: str) -> None:
        row = {column: getattr(connection, column) for column in ConnectionRecord.COLUMNS}
        if not connection.id:
            del row["id"]
        columns = ", ".join(row)
        marks = ", ".join("?" for _ in row)
        with self._db:
            cursor = self._db.execute(
                f"{verb} INTO {ConnectionRecord.TABLE} ({columns}) VALUES ({marks})",
                tuple(row.values()),
            )
        if not connection.id:
            connection.id = cursor.lastrowid

    def create_connection(self, connection: ConnectionRecord) -> ConnectionRecord:
        """Insert a connection, filling in its id and timestamps."""
        now = int(time.time())
        connection.created = connection.created or now
        connection.updated = connection.updated or now
        self._write(connection, "INSERT")
        return connection

    def update_connection(self, connection: ConnectionRecord) -> ConnectionRecord:
        """Save every field of a connection, inserting it if it is new."""
        now = int(time.time())
        connection.created = connection.created or now
        connection.updated = now
        self._write(connection, "INSERT OR REPLACE")
        return connection

    def delete_connection(self, connection_id) -> None:
        """Remove the connection with this id."""
        with self._db:
            self._db.execute(
                f"DELETE FROM {ConnectionRecord.TABLE} WHERE id = ?", (connection_id,)
            )

    def mount_samba(
        self,
        username: str,
        host: str,
        directory: str,
        port: str,
        mount_point: str,
        password: str,
    ) -> None:
        """Mount //host/directory on mount_point as a CIFS file system.

        The share is reached on the default SMB port; ``port`` is accepted
        so callers can pass a stored record unchanged.
        """
        source = f"//{host}/{directory}"
        options = f"username={username},password={password},noatime,nodev,nosuid"
        result = subprocess.run(
            ["mount", "-t", "cifs", source, mount_point, "-o", options],
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            message = (result.stderr or "").strip() or f"exit status {result.returncode}"
            raise OSError(f"cannot mount {source} on {mount_point}: {message}")

    def unmount_samba(self, mount_point: str) -> None:
        """Lazily unmount mount_point; a path that is not mounted is ignored."""
        result = subprocess.run(
            ["umount", "-l", mount_point],
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode == 0:
            return
        message = (result.stderr or "").strip()
        if "not mounted" in message:
            return
        raise OSError(
            f"cannot unmount {mount_point}: {message or f'exit status {result.returncode}'}"
        )