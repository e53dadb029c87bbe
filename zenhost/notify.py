"""Stored notifications and events published to the message bus."""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
import time
from http import HTTPStatus
from typing import Any, Callable, Mapping, Optional

from zenhost.file_ops import FileQueue
from zenhost.models import AppNotify
from zenhost.types import NotifyState

logger = logging.getLogger(__name__)

FILE_OPERATE_EVENT = "zenhost:file:operate"

Publisher = Callable[[str, dict], Optional[int]]
"""Sends an event with string properties; returns the HTTP status, if any."""


def build_file_operate_payload(queue: FileQueue) -> dict:
    """Describe the progress of every queued file operation.

    Finished operations are reported once, removed from the queue and the
    next queued operation is started.
    """
    if len(queue) == 0:
        return {"state": "", "data": []}
    tasks = []
    for key in queue.keys():
        operation = queue.get(key)
        if operation is None:
            continue
        task = {
            "id": key,
            "processed_size": operation.processed_size,
            "total_size": operation.total_size,
            "to": operation.to,
            "type": operation.type,
            "status": "STARTING" if operation.processed_size == 0 else "PROCESSING",
            "finished": False,
            "processing_path": "",
        }
        if operation.finished or operation.processed_size >= operation.total_size:
            task["finished"] = True
            task["status"] = "FINISHED"
            queue.remove(key)
            queue.exec_next()
            tasks.append(task)
            continue
        task["processing_path"] = next(
            (item.from_path for item in operation.items if item.size != item.processed_size),
            "",
        )
        tasks.append(task)
    return {"state": "NORMAL", "data": tasks}


def _from_row(row: sqlite3.Row) -> AppNotify:
    return AppNotify(**dict(row))


class NotifyService:
    """Keeps notifications in the database and publishes events."""

    def __init__(self, db: sqlite3.Connection, publisher: Publisher):
        self._db = db
        self._publisher = publisher
        self._temp: dict[str, Any] = {}
        self._temp_lock = threading.Lock()
        self.poll_interval = 3.0

    def _select(self, where: str, params: tuple = (), suffix: str = "") -> list[AppNotify]:
        cursor = self._db.cursor()
        cursor.row_factory = sqlite3.Row
        columns = ", ".join(AppNotify.COLUMNS)
        sql = f"SELECT {columns} FROM {AppNotify.TABLE}{where}{suffix}"
        return [_from_row(row) for row in cursor.execute(sql, params)]

    def get_log(self, custom_id: str) -> Optional[AppNotify]:
        """Return the notification with this custom id, or None."""
        found = self._select(" WHERE custom_id = ?", (custom_id,), " LIMIT 1")
        return found[0] if found else None

    def _write(self, log: AppNotify, verb: str) -> None:
        values = tuple(getattr(log, column) for column in AppNotify.COLUMNS)
        columns = ", ".join(AppNotify.COLUMNS)
        marks = ", ".join("?" for _ in AppNotify.COLUMNS)
        with self._db:
            self._db.execute(
                f"{verb} INTO {AppNotify.TABLE} ({columns}) VALUES ({marks})", values
            )

    def add_log(self, log: AppNotify) -> None:
        """Store a new notification."""
        self._write(log, "INSERT")

    def update_log(self, log: AppNotify) -> None:
        """Save a notification, inserting it if its custom id is new."""
        self._write(log, "INSERT OR REPLACE")

    def update_log_by_custom_id(self, log: AppNotify) -> None:
        """Overwrite every field of the notification with the same custom id."""
        if not log.custom_id:
            return
        columns = [column for column in AppNotify.COLUMNS if column != "custom_id"]
        assignments = ", ".join(f"{column} = ?" for column in columns)
        values = tuple(getattr(log, column) for column in columns)
        with self._db:
            self._db.execute(
                f"UPDATE {AppNotify.TABLE} SET {assignments} WHERE custom_id = ?",
                values + (log.custom_id,),
            )

    def del_log(self, custom_id: str) -> None:
        """Remove the notification with this custom id."""
        with self._db:
            self._db.execute(
                f"DELETE FROM {AppNotify.TABLE} WHERE custom_id = ?", (custom_id,)
            )

    def get_list(self, notify_class: int) -> list[AppNotify]:
        """Return the dynamic and unread notifications of a class."""
        return self._select(
            " WHERE notify_class = ? AND (state = ? OR state = ?)",
            (int(notify_class), int(NotifyState.DYNAMIC), int(NotifyState.UNREAD)),
        )

    def mark_read(self, notify_id: str, state: int) -> None:
        """Set the state of one notification, or of all when the id is "0"."""
        with self._db:
            if notify_id == "0":
                self._db.execute(f"UPDATE {AppNotify.TABLE} SET state = ?", (int(state),))
            else:
                self._db.execute(
                    f"UPDATE {AppNotify.TABLE} SET state = ? WHERE id = ?",
                    (int(state), notify_id),
                )

    def setting_system_temp_data(self, message: Mapping[str, Any]) -> None:
        """Remember the latest system values, key by key."""
        with self._temp_lock:
            self._temp.update(message)

    def system_temp_map(self) -> dict[str, Any]:
        """Return a copy of the remembered system values."""
        with self._temp_lock:
            return dict(self._temp)

    def _publish(self, name: str, message: Mapping[str, Any]) -> None:
        properties = {key: json.dumps(value) for key, value in message.items()}
        try:
            status = self._publisher(name, properties)
        except Exception as error:
            logger.error("failed to publish event to message bus: %s (event %s)", error, name)
            return
        if status is not None and status != HTTPStatus.OK:
            logger.error("failed to publish event to message bus: status %s (event %s)", status, name)

    def send_notify(self, name: str, message: Mapping[str, Any]) -> None:
        """Publish an event whose properties are the JSON-encoded values."""
        self._publish(name, message)

    def send_file_operate_notify(self, queue: FileQueue, now_send: bool) -> None:
        """Publish file operation progress.

        With ``now_send`` one event is sent at once, even for an empty queue.
        Otherwise an event is sent every ``poll_interval`` seconds until the
        queue is empty.
        """
        if now_send:
            self._publish(FILE_OPERATE_EVENT, {"file_operate": build_file_operate_payload(queue)})
            return
        while len(queue) > 0:
            self._publish(FILE_OPERATE_EVENT, {"file_operate": build_file_operate_payload(queue)})
            time.sleep(self.poll_interval)