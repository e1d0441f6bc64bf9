"""Message identifiers and the interface shared by all message queues."""

from __future__ import annotations

import abc
import enum
import logging
import operator
import threading
from collections.abc import Callable
from typing import Any, Union

Parameter = Union[int, float, str]
Handler = Callable[[list], None]

#: Largest number of parameters a single message may carry.
MAX_PARAMETERS = 4

logger = logging.getLogger(__name__)


class MessageId(enum.IntEnum):
    """Well-known message identifiers."""

    NONE = 0
    UPDATE = 1
    PROCESS = 2
    CONTROL = 3


def _to_parameter(value: Any) -> Parameter:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float, str)):
        return value
    raise TypeError(f"unsupported message parameter type: {type(value).__name__}")


class MessageQueue(abc.ABC):
    """A queue that delivers messages to handlers registered per message id."""

    def __init__(self) -> None:
        self._handlers: dict[int, list[Handler]] = {}
        self._handler_lock = threading.Lock()

    @abc.abstractmethod
    def start(self) -> None:
        """Start processing messages."""

    @abc.abstractmethod
    def stop(self) -> None:
        """Stop processing messages and wait for the workers to finish."""

    @abc.abstractmethod
    def set_thread_count(self, num_threads: int) -> None:
        """Stop the queue if it runs and use ``num_threads`` workers from now on."""

    @abc.abstractmethod
    def register_handler(self, message_id: int, handler: Handler) -> None:
        """Add a handler called with the parameter list of every ``message_id`` message."""

    def queue_message(self, message_id: int, *args: Any) -> None:
        """Queue a message carrying up to four int, float or str parameters."""
        if len(args) > MAX_PARAMETERS:
            raise TypeError(
                f"a message takes at most {MAX_PARAMETERS} parameters, got {len(args)}"
            )
        params = [_to_parameter(arg) for arg in args]
        self._queue_message(operator.index(message_id), params)

    @abc.abstractmethod
    def _queue_message(self, message_id: int, params: list[Parameter]) -> None:
        """Hand a validated message to the transport."""

    def _add_handler(self, message_id: int, handler: Handler) -> None:
        key = operator.index(message_id)
        with self._handler_lock:
            self._handlers.setdefault(key, []).append(handler)

    def _dispatch(self, message_id: int, params: list[Parameter]) -> None:
        with self._handler_lock:
            handlers = list(self._handlers.get(message_id, ()))
        for handler in handlers:
            try:
                handler(params)
            except Exception:
                logger.exception("handler for message %d failed", message_id)

    @staticmethod
    def _checked_thread_count(num_threads: int) -> int:
        count = operator.index(num_threads)
        if count < 0:
            raise ValueError(f"thread count must not be negative, got {count}")
        return count

    def __enter__(self) -> MessageQueue:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


def call_message(queue: MessageQueue, message_id: int, *args: Any) -> None:
    """Queue a message on ``queue``; a shorthand for ``queue.queue_message``."""
    queue.queue_message(message_id, *args)