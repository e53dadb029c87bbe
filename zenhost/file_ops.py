"""Queued file copy and move operations, with cancellable streams."""

from __future__ import annotations

import logging
import os
import shutil
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Optional

from zenhost.models import ConnectionRecord

logger = logging.getLogger(__name__)


class OperationCancelled(Exception):
    """Raised when a stream is used after its operation was cancelled."""


class ContextReader:
    """A readable stream that fails once ``cancelled`` is set.

    The event is checked before every read.
    """

    def __init__(self, source: BinaryIO, cancelled: threading.Event):
        self.source = source
        self.cancelled = cancelled

    def read(self, size: int = -1) -> bytes:
        if self.cancelled.is_set():
            raise OperationCancelled("operation cancelled")
        return self.source.read(size)


class ContextWriter:
    """A writable stream that fails once ``cancelled`` is set."""

    def __init__(self, target: BinaryIO, cancelled: threading.Event):
        self.target = target
        self.cancelled = cancelled

    def write(self, data: bytes) -> int:
        if self.cancelled.is_set():
            raise OperationCancelled("operation cancelled")
        return self.target.write(data)


@dataclass
class FileItem:
    """One source path of a queued operation."""

    from_path: str
    size: int = 0
    processed_size: int = 0
    finished: bool = False


@dataclass
class FileOperation:
    """A copy or move of several paths into one directory."""

    type: str
    to: str
    style: str = "overwrite"
    items: list[FileItem] = field(default_factory=list)
    total_size: int = 0
    processed_size: int = 0
    finished: bool = False


def _base(path: str) -> str:
    stripped = path.rstrip("/")
    return stripped.rsplit("/", 1)[-1] if stripped else "/"


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def _copy_tree(source: Path, target: Path, skip: bool) -> None:
    if source.is_dir():
        target.mkdir(parents=True, exist_ok=True)
        for child in source.iterdir():
            _copy_tree(child, target / child.name, skip)
        return
    if skip and target.exists():
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, target)


def copy_dir(source, destination, style: str = "overwrite") -> Path:
    """Copy a file or directory into ``destination`` under its own name.

    With style "skip", files already present at the target are left alone;
    otherwise they are overwritten. Returns the target path.
    """
    src = Path(source)
    if not src.exists():
        raise FileNotFoundError(f"no such file or directory: {source}")
    target = Path(destination) / _base(str(source))
    _copy_tree(src, target, style == "skip")
    return target


def tree_size(path) -> int:
    """Total size in bytes of a file, or of every file below a directory."""
    root = Path(path)
    info = root.stat()
    if not root.is_dir():
        return info.st_size
    total = 0
    for directory, _, files in os.walk(root):
        for name in files:
            try:
                total += (Path(directory) / name).stat().st_size
            except OSError:
                continue
    return total


class FileQueue:
    """Operations waiting or running, kept in the order they were added."""

    def __init__(self):
        self._operations: dict[str, FileOperation] = {}
        self._order: list[str] = []
        self._lock = threading.RLock()

    def add(self, key: str, operation: FileOperation) -> None:
        """Queue an operation under ``key``."""
        with self._lock:
            if key not in self._operations:
                self._order.append(key)
            self._operations[key] = operation

    def get(self, key: str) -> Optional[FileOperation]:
        """Return the operation under ``key``, or None."""
        with self._lock:
            return self._operations.get(key)

    def remove(self, key: str) -> None:
        """Drop an operation from the queue."""
        with self._lock:
            self._operations.pop(key, None)
            if key in self._order:
                self._order.remove(key)

    def keys(self) -> list[str]:
        """Keys in queue order."""
        with self._lock:
            return list(self._order)

    def __len__(self) -> int:
        with self._lock:
            return len(self._operations)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._operations

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def operate(self, key: str) -> None:
        """Carry out the operation under ``key`` unless it has started."""
        operation = self.get(key)
        if operation is None or operation.processed_size > 0:
            return
        for item in operation.items:
            if operation.type == "move":
                self._move(operation, item)
            elif operation.type == "copy":
                try:
                    copy_dir(item.from_path, operation.to, operation.style)
                except OSError as error:
                    logger.error("file copy error: %s", error)
        operation.finished = True

    @staticmethod
    def _move(operation: FileOperation, item: FileItem) -> None:
        target = Path(operation.to) / _base(item.from_path)
        if target.exists() or target.is_symlink():
            if operation.style == "skip":
                item.finished = True
                return
            try:
                _remove(target)
            except OSError as error:
                logger.error("cannot replace %s: %s", target, error)
        try:
            copy_dir(item.from_path, operation.to, operation.style)
        except OSError as error:
            logger.error("file move error: %s", error)
            return
        try:
            _remove(Path(item.from_path))
        except OSError as error:
            logger.error("file move error: %s", error)
            try:
                shutil.move(item.from_path, str(target))
            except OSError as move_error:
                logger.error("move file error: %s", move_error)

    def exec_next(self) -> Optional[threading.Thread]:
        """Start the first queued operation in a thread and return the thread."""
        keys = self.keys()
        if not keys:
            return None
        thread = threading.Thread(target=self.operate, args=(keys[0],), daemon=True)
        thread.start()
        return thread

    def refresh_progress(self) -> None:
        """Measure what has arrived at each destination and update progress."""
        for key in self.keys():
            operation = self.get(key)
            if operation is None:
                continue
            total = 0
            for item in operation.items:
                if item.finished:
                    total += item.processed_size
                    continue
                try:
                    size = tree_size(Path(operation.to) / os.path.basename(item.from_path))
                except OSError:
                    continue
                item.processed_size = size
                if size == item.size:
                    item.finished = True
                total += size
            operation.processed_size = total


def is_mounted(path: str, connections: Iterable[ConnectionRecord] = ()) -> bool:
    """True if ``path`` is a mount point or the mount point of a connection."""
    if os.path.ismount(path):
        return True
    return any(connection.mount_point == path for connection in connections)