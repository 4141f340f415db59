"""
Persistence for the DayRhythm state document.

The whole AppState is stored as one UTF-8 JSON document:
- Deterministic key ordering (sorted) for diffable files
- 2-space indentation
- ISO-8601 timestamps

Writes are atomic (temp file in the same directory, fsync, os.replace) and
run on a single background worker so they land in submission order.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from pathlib import Path
from threading import Lock

from pydantic import ValidationError as PydanticValidationError

from dayrhythm.lib.exceptions import SerializationError, StorageError
from dayrhythm.models import AppState

logger = logging.getLogger(__name__)


def encode_state(state: AppState) -> bytes:
    """
    Serialize the state to JSON bytes.

    Raises:
        SerializationError: If the state cannot be serialized
    """
    try:
        payload = state.model_dump(mode="json")
        return json.dumps(payload, sort_keys=True, indent=2, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to encode state: {e}") from e


def decode_state(raw: bytes | str) -> AppState:
    """
    Deserialize a state document.

    Raises:
        SerializationError: On invalid JSON or a schema mismatch
    """
    try:
        return AppState.model_validate_json(raw)
    except PydanticValidationError as e:
        raise SerializationError(f"Failed to decode state: {e.error_count()} error(s)") from e
    except (TypeError, ValueError, UnicodeDecodeError) as e:
        raise SerializationError(f"Failed to decode state: {e}") from e


def atomic_write(path: Path, data: bytes) -> None:
    """
    Write bytes to a file atomically.

    Raises:
        StorageError: If the write fails (the target is left untouched)
    """
    path = Path(path)
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise StorageError(f"Failed to write {path}: {e}") from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug("Temp file already gone: %s", tmp_name)


class SerialWriter:
    """
    Background writer that persists snapshots strictly in submission order.

    Backed by a single-worker thread pool. Failed writes are logged and not
    retried: the next successful write carries the latest state anyway.
    """

    def __init__(self, path: Path):
        """
        Initialize the writer.

        Args:
            path: Target file for every write
        """
        self.path = Path(path)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="dayrhythm-writer")
        self._pending: set[Future] = set()
        self._lock = Lock()
        self._closed = False

    def submit(self, data: bytes) -> Future | None:
        """
        Queue bytes for writing.

        Returns:
            The write's future, or None if the writer is closed
        """
        with self._lock:
            if self._closed:
                logger.warning("Write to %s dropped: writer closed", self.path)
                return None
            future = self._executor.submit(self._write, data)
            self._pending.add(future)
        future.add_done_callback(self._discard)
        return future

    def _write(self, data: bytes) -> None:
        try:
            atomic_write(self.path, data)
        except StorageError as e:
            logger.error("State write failed: %s", e)

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def flush(self, timeout: float | None = None) -> bool:
        """
        Wait for all queued writes.

        Returns:
            True if every queued write finished within the timeout
        """
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait_futures(pending, timeout=timeout)
        return not not_done

    def close(self) -> None:
        """Finish queued writes and stop the worker."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=True)

    @property
    def closed(self) -> bool:
        return self._closed
