"""Chunked file uploads assembled into a temporary file."""

from __future__ import annotations

import os
import shutil
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Union


class UploadError(Exception):
    """Raised when a chunk is unknown or out of range."""


@dataclass
class _UploadState:
    uploaded: list[bool] = field(default_factory=list)
    uploaded_count: int = 0


def _open_without_truncating(path: str, flags: int) -> int:
    return os.open(path, os.O_WRONLY | os.O_CREAT, 0o644)


class ChunkUploadService:
    """Receives numbered chunks of files and renames each file once complete."""

    def __init__(self):
        self._status: dict[str, _UploadState] = {}
        self._lock = threading.RLock()

    @staticmethod
    def _index(state: _UploadState, chunk_number: int) -> int:
        if not 1 <= chunk_number <= len(state.uploaded):
            raise UploadError(f"chunk {chunk_number} out of range")
        return chunk_number - 1

    def test_chunk(self, identifier: str, chunk_number: int) -> bool:
        """Return True if the chunk has arrived; raise UploadError otherwise."""
        with self._lock:
            state = self._status.get(identifier)
            if state is None:
                raise UploadError("file not found")
            if not state.uploaded[self._index(state, chunk_number)]:
                raise UploadError("file not found")
            return True

    def upload_chunk(
        self,
        path,
        chunk_number: int,
        chunk_size: int,
        total_chunks: int,
        identifier: str,
        relative_path: str,
        file_name: str,
        data: Union[bytes, BinaryIO],
    ) -> bool:
        """Write one chunk; return True once every chunk of the file is in place."""
        base = str(path)
        final = f"{base}/{relative_path}"
        temporary = final + ".tmp"
        with self._lock:
            if relative_path != file_name:
                Path(final).parent.mkdir(parents=True, exist_ok=True)
            state = self._status.get(identifier)
            if state is None:
                state = _UploadState(uploaded=[False] * total_chunks)
                index = self._index(state, chunk_number)
                self._status[identifier] = state
            else:
                index = self._index(state, chunk_number)

        with open(temporary, "wb", opener=_open_without_truncating) as handle:
            handle.seek((chunk_number - 1) * chunk_size)
            if isinstance(data, (bytes, bytearray, memoryview)):
                handle.write(data)
            else:
                shutil.copyfileobj(data, handle)

        with self._lock:
            if not state.uploaded[index]:
                state.uploaded[index] = True
                state.uploaded_count += 1
            if state.uploaded_count != total_chunks:
                return False
            self._status.pop(identifier, None)
        os.replace(temporary, final)
        return True