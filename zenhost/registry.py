"""All host services built around one database."""

from __future__ import annotations

import logging
import sqlite3
from typing import Callable, Optional

from zenhost.casa import CasaService
from zenhost.connections import ConnectionsService
from zenhost.file_ops import FileQueue
from zenhost.health import HealthService
from zenhost.models import create_schema
from zenhost.notify import NotifyService, Publisher
from zenhost.other import OtherService
from zenhost.peer import PeerService
from zenhost.rely import RelyService
from zenhost.shares import SharesService
from zenhost.system import SystemPaths, SystemService
from zenhost.upload import ChunkUploadService

logger = logging.getLogger(__name__)


def _discard(name: str, properties: dict) -> Optional[int]:
    logger.debug("no message bus configured; dropping event %s", name)
    return None


def _no_update_server() -> str:
    raise RuntimeError("no update server configured")


class ServiceRegistry:
    """Creates every service once and hands out the shared instances."""

    def __init__(
        self,
        db: sqlite3.Connection,
        paths: Optional[SystemPaths] = None,
        publisher: Optional[Publisher] = None,
        version_fetch: Optional[Callable[[], str]] = None,
    ):
        create_schema(db)
        self.db = db
        self.paths = paths or SystemPaths()
        self.casa = CasaService(version_fetch or _no_update_server)
        self.connections = ConnectionsService(db)
        self.notify = NotifyService(db, publisher or _discard)
        self.rely = RelyService(db)
        self.system = SystemService(self.paths)
        self.health = HealthService()
        self.shares = SharesService(db, shell_path=self.paths.shell_path)
        self.other = OtherService()
        self.peer = PeerService(db)
        self.file_queue = FileQueue()
        self.uploads = ChunkUploadService()