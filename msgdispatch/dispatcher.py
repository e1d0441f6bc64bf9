"""An event dispatcher that runs each registered callback on its own thread."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Message:
    """An event key with two parameters of any kind."""

    event: int
    w_param: Any = None
    l_param: Any = None


EventCallback = Callable[[Message], None]


class HandlerNotFoundError(RuntimeError):
    """Raised when an event is dispatched that has no callbacks."""

    def __init__(self, event: int) -> None:
        super().__init__(f"No handlers for event: '{event}'")
        self.event = event


class EventCallbackDispatcher:
    """Keeps callbacks per event and runs them asynchronously when it fires."""

    def __init__(self) -> None:
        self._callbacks: dict[int, list[EventCallback]] = {}
        self._lock = threading.Lock()

    def register_callback(self, event: int, callback: EventCallback) -> None:
        """Add ``callback`` to those run for ``event``."""
        with self._lock:
            self._callbacks.setdefault(event, []).append(callback)

    def unregister_callbacks(self, event: int) -> None:
        """Remove every callback registered for ``event``."""
        with self._lock:
            self._callbacks.pop(event, None)

    def dispatch(self, message: Message) -> list[threading.Thread]:
        """Run each callback for ``message.event`` on a new thread.

        Returns the started threads. Raises :class:`HandlerNotFoundError`
        when the event has no callbacks.
        """
        with self._lock:
            callbacks = list(self._callbacks.get(message.event, ()))
        if not callbacks:
            raise HandlerNotFoundError(message.event)
        threads = [
            threading.Thread(target=self._run, args=(callback, message), daemon=True)
            for callback in callbacks
        ]
        for thread in threads:
            thread.start()
        return threads

    def on_event(
        self, event: int, w_param: Any = None, l_param: Any = None
    ) -> list[threading.Thread]:
        """Build a :class:`Message` from the arguments and dispatch it."""
        return self.dispatch(Message(event, w_param, l_param))

    @staticmethod
    def _run(callback: EventCallback, message: Message) -> None:
        try:
            callback(message)
        except Exception:
            logger.exception("Callback exception")