"""Records kept in the host database and the schema that stores them."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Optional


@dataclass
class ConnectionRecord:
    """A remote SMB share known to the host."""

    TABLE: ClassVar[str] = "o_connections"
    COLUMNS: ClassVar[tuple[str, ...]] = (
        "id",
        "updated",
        "created",
        "username",
        "password",
        "host",
        "port",
        "status",
        "directories",
        "mount_point",
    )

    id: int = 0
    updated: int = 0
    created: int = 0
    username: str = ""
    password: str = ""
    host: str = ""
    port: str = ""
    status: str = ""
    directories: str = ""
    mount_point: str = ""


@dataclass
class PeerDrive:
    """A browser or device that has connected to the host as a peer."""

    TABLE: ClassVar[str] = "peer_drive_db_models"
    COLUMNS: ClassVar[tuple[str, ...]] = (
        "id",
        "updated",
        "created",
        "user_agent",
        "display_name",
        "device_name",
        "model",
        "ip",
        "os",
        "browser",
    )

    id: str = ""
    updated: int = 0
    created: int = 0
    user_agent: str = ""
    display_name: str = ""
    device_name: str = ""
    model: str = ""
    ip: str = ""
    os: str = ""
    browser: str = ""
    online: bool = False  # runtime state only, never stored


@dataclass
class AppNotify:
    """A stored notification."""

    TABLE: ClassVar[str] = "o_notify"
    COLUMNS: ClassVar[tuple[str, ...]] = (
        "state",
        "message",
        "created_at",
        "updated_at",
        "id",
        "type",
        "icon",
        "name",
        "notify_class",
        "custom_id",
    )

    state: int = 0
    message: str = ""
    created_at: str = ""
    updated_at: str = ""
    id: str = ""
    type: int = 0
    icon: str = ""
    name: str = ""
    notify_class: int = 0
    custom_id: str = ""


@dataclass
class RelyRecord:
    """A dependency between an application and a container."""

    TABLE: ClassVar[str] = "o_rely"
    COLUMNS: ClassVar[tuple[str, ...]] = (
        "id",
        "custom_id",
        "container_custom_id",
        "container_id",
        "type",
        "created_at",
        "updated_at",
    )

    id: int = 0
    custom_id: str = ""
    container_custom_id: str = ""
    container_id: str = ""
    type: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class ShareRecord:
    """A directory shared over Samba."""

    TABLE: ClassVar[str] = "o_shares"
    COLUMNS: ClassVar[tuple[str, ...]] = (
        "id",
        "anonymous",
        "path",
        "name",
        "updated",
        "created",
    )

    id: int = 0
    anonymous: bool = False
    path: str = ""
    name: str = ""
    updated: int = 0
    created: int = 0


_SCHEMA = """
CREATE TABLE IF NOT EXISTS o_connections (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    updated INTEGER NOT NULL DEFAULT 0,
    created INTEGER NOT NULL DEFAULT 0,
    username TEXT NOT NULL DEFAULT '',
    password TEXT NOT NULL DEFAULT '',
    host TEXT NOT NULL DEFAULT '',
    port TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL DEFAULT '',
    directories TEXT NOT NULL DEFAULT '',
    mount_point TEXT NOT NULL DEFAULT ''
);
CREATE TABLE IF NOT EXISTS peer_drive_db_models (
    id TEXT PRIMARY KEY,
    updated INTEGER NOT NULL DEFAULT 0,
    created INTEGER NOT NULL DEFAULT 0,
    user_agent TEXT NOT NULL DEFAULT '',
    display_name TEXT NOT NULL DEFAULT '',
    device_name TEXT NOT NULL DEFAULT '',
    model TEXT NOT NULL DEFAULT '',
    ip TEXT NOT NULL DEFAULT '',
    os TEXT NOT NULL DEFAULT '',
    browser TEXT NOT NULL DEFAULT ''
);
CREATE TABLE IF NOT EXISTS o_notify (
    custom_id TEXT PRIMARY KEY,
    state INTEGER NOT NULL DEFAULT 0,
    message TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL DEFAULT '',
    updated_at TEXT NOT NULL DEFAULT '',
    id TEXT NOT NULL DEFAULT '',
    type INTEGER NOT NULL DEFAULT 0,
    icon TEXT NOT NULL DEFAULT '',
    name TEXT NOT NULL DEFAULT '',
    notify_class INTEGER NOT NULL DEFAULT 0
);
CREATE TABLE IF NOT EXISTS o_rely (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    custom_id TEXT NOT NULL DEFAULT '',
    container_custom_id TEXT NOT NULL DEFAULT '',
    container_id TEXT NOT NULL DEFAULT '',
    type INTEGER NOT NULL DEFAULT 0,
    created_at TEXT,
    updated_at TEXT
);
CREATE TABLE IF NOT EXISTS o_shares (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    anonymous INTEGER NOT NULL DEFAULT 0,
    path TEXT NOT NULL DEFAULT '',
    name TEXT NOT NULL DEFAULT '',
    updated INTEGER NOT NULL DEFAULT 0,
    created INTEGER NOT NULL DEFAULT 0
);
"""


def create_schema(connection: sqlite3.Connection) -> None:
    """Create every table the services use, leaving existing ones alone."""
    connection.executescript(_SCHEMA)
    connection.commit()