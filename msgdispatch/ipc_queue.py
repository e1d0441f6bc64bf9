"""A message queue shared between processes through a spool directory."""

from __future__ import annotations

import itertools
import logging
import os
import re
import shutil
import tempfile
import threading
import time
import uuid
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .base import Handler, MessageQueue, Parameter

#: Largest encoded parameter block a message may carry, in bytes.
MAX_DATA_SIZE = 4096

_POLL_INTERVAL = 0.1
_DECODERS = {"int": int, "float": float, "double": float, "string": str}
_sequence = itertools.count()

logger = logging.getLogger(__name__)


def _encode_one(value: Any) -> str:
    if isinstance(value, bool):
        value = int(value)
    if isinstance(value, int):
        return f"int:{value};"
    if isinstance(value, float):
        return f"double:{value!r};"
    if isinstance(value, str):
        if ";" in value:
            raise ValueError("string parameters may not contain ';'")
        return f"string:{value};"
    raise TypeError(f"unsupported message parameter type: {type(value).__name__}")


def encode_parameters(params: Sequence[Parameter]) -> str:
    """Encode parameters as ``count;`` followed by ``type:value;`` for each."""
    params = list(params)
    return f"{len(params)};" + "".join(_encode_one(value) for value in params)


def decode_parameters(data: str) -> list[Parameter]:
    """Decode a parameter block written by :func:`encode_parameters`."""
    count_text, sep, rest = data.partition(";")
    if not sep:
        raise ValueError("missing parameter count")
    try:
        count = int(count_text)
    except ValueError:
        raise ValueError(f"invalid parameter count: {count_text!r}") from None
    if count < 0:
        raise ValueError(f"invalid parameter count: {count}")
    params: list[Parameter] = []
    for _ in range(count):
        tag, sep, rest = rest.partition(":")
        if not sep:
            raise ValueError("truncated parameter block")
        value, sep, rest = rest.partition(";")
        if not sep:
            raise ValueError("truncated parameter block")
        decoder = _DECODERS.get(tag.strip())
        if decoder is None:
            raise ValueError(f"unknown parameter type: {tag!r}")
        try:
            params.append(decoder(value))
        except ValueError:
            raise ValueError(f"invalid {tag.strip()} value: {value!r}") from None
    return params


def _queue_dir_name(name: str) -> str:
    safe = re.sub(r"[^A-Za-z0-9_.-]", "_", name) or "queue"
    return f"{safe}.msgq"


class IPCMessageQueue(MessageQueue):
    """Delivers messages through a named queue other processes can share.

    Messages are only sent while the queue is started; queuing on a stopped
    queue drops the message. Stopping removes the shared queue together with
    any messages still waiting in it.
    """

    def __init__(
        self,
        name: str,
        num_threads: int = 1,
        *,
        directory: str | os.PathLike[str] | None = None,
    ) -> None:
        super().__init__()
        self._name = name
        self._thread_count = self._checked_thread_count(num_threads)
        base = Path(directory) if directory is not None else Path(tempfile.gettempdir())
        self._path = base / _queue_dir_name(name)
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._running = False
        self._workers: list[threading.Thread] = []

    @property
    def name(self) -> str:
        """Name that identifies the shared queue."""
        return self._name

    @property
    def thread_count(self) -> int:
        """Number of worker threads used when the queue starts."""
        return self._thread_count

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            try:
                self._path.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise RuntimeError("Failed to initialize IPC") from exc
            self._stop_event.clear()
            self._running = True
            self._workers = [
                threading.Thread(target=self._process_messages, daemon=True)
                for _ in range(self._thread_count)
            ]
            for worker in self._workers:
                worker.start()

    def stop(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._stop_event.set()
            workers, self._workers = self._workers, []
        current = threading.current_thread()
        for worker in workers:
            if worker is not current:
                worker.join()
        shutil.rmtree(self._path, ignore_errors=True)

    def set_thread_count(self, num_threads: int) -> None:
        count = self._checked_thread_count(num_threads)
        self.stop()
        self._thread_count = count

    def register_handler(self, message_id: int, handler: Handler) -> None:
        self._add_handler(message_id, handler)

    def _queue_message(self, message_id: int, params: list[Parameter]) -> None:
        payload = encode_parameters(params)
        size = len(payload.encode("utf-8"))
        if size > MAX_DATA_SIZE:
            raise ValueError(
                f"encoded parameters take {size} bytes, the limit is {MAX_DATA_SIZE}"
            )
        if not self._running:
            logger.debug("queue %r is not started; message %d dropped", self._name, message_id)
            return
        stem = f"{time.time_ns():020d}-{os.getpid()}-{next(_sequence):010d}"
        staging = self._path / f"{stem}.tmp"
        try:
            staging.write_text(f"{message_id}\n{payload}", encoding="utf-8")
            os.replace(staging, self._path / f"{stem}.msg")
        except OSError:
            logger.warning("could not send message %d on queue %r", message_id, self._name)

    def _claim_next(self) -> str | None:
        try:
            entries = sorted(
                (entry for entry in self._path.iterdir() if entry.suffix == ".msg"),
                key=lambda entry: entry.name,
            )
        except OSError:
            return None
        for entry in entries:
            claimed = entry.with_name(f"{entry.stem}.{uuid.uuid4().hex}.claimed")
            try:
                os.rename(entry, claimed)
            except OSError:
                continue
            try:
                return claimed.read_text(encoding="utf-8")
            except OSError:
                continue
            finally:
                claimed.unlink(missing_ok=True)
        return None

    def _handle_record(self, record: str) -> None:
        id_text, _, payload = record.partition("\n")
        try:
            message_id = int(id_text)
            params = decode_parameters(payload)
        except ValueError:
            logger.warning("malformed message on queue %r dropped", self._name)
            return
        self._dispatch(message_id, params)

    def _process_messages(self) -> None:
        while not self._stop_event.is_set():
            record = self._claim_next()
            if record is not None:
                self._handle_record(record)
                continue
            self._stop_event.wait(_POLL_INTERVAL)