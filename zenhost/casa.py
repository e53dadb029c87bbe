"""Release information fetched from the update server and cached."""

from __future__ import annotations

import json
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

RELEASE_VERSION = "1.1"
CACHE_SECONDS = 20 * 60


@dataclass
class Version:
    """A release with its change log."""

    id: int = 0
    change_log: str = ""
    version: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CasaService:
    """Reports the latest release, caching it for twenty minutes.

    ``fetch`` returns the body of the update server's version response,
    a JSON document whose "data" object describes the release.
    """

    def __init__(self, fetch: Callable[[], str]):
        self._fetch = fetch
        self._lock = threading.Lock()
        self._cached: Optional[tuple[Version, float]] = None
        self.clock: Callable[[], float] = time.monotonic

    def _latest(self) -> Version:
        body = self._fetch()
        try:
            document = json.loads(body)
        except (TypeError, json.JSONDecodeError) as error:
            raise ValueError(f"invalid version response: {error}") from error
        data = document.get("data") if isinstance(document, dict) else None
        if not isinstance(data, dict):
            raise ValueError("version response has no data object")
        change_log = data.get("change_log", data.get("ChangeLog", ""))
        now = datetime.now()
        return Version(
            id=1,
            change_log=str(change_log or ""),
            version=RELEASE_VERSION,
            created_at=now,
            updated_at=now,
        )

    def get_version(self) -> Version:
        """Return the cached release, fetching it when the cache has expired."""
        with self._lock:
            if self._cached is not None and self.clock() < self._cached[1]:
                return self._cached[0]
        version = self._latest()
        if version.version:
            with self._lock:
                self._cached = (version, self.clock() + CACHE_SECONDS)
        return version

    def invalidate(self) -> None:
        """Forget the cached release."""
        with self._lock:
            self._cached = None