"""An in-process message queue served by a pool of worker threads."""

from __future__ import annotations

import threading
from collections import deque

from .base import Handler, MessageQueue, Parameter


class LocalMessageQueue(MessageQueue):
    """Delivers messages to handlers on worker threads within this process.

    Messages queued while the queue is stopped wait until it is started.
    Stopping lets the workers finish every message already queued.
    """

    def __init__(self, num_threads: int = 1) -> None:
        super().__init__()
        self._thread_count = self._checked_thread_count(num_threads)
        self._pending: deque[tuple[int, list[Parameter]]] = deque()
        self._condition = threading.Condition()
        self._running = False
        self._workers: list[threading.Thread] = []

    @property
    def thread_count(self) -> int:
        """Number of worker threads used when the queue starts."""
        return self._thread_count

    def start(self) -> None:
        with self._condition:
            if self._running:
                return
            self._running = True
            self._workers = [
                threading.Thread(target=self._process_messages, daemon=True)
                for _ in range(self._thread_count)
            ]
        for worker in self._workers:
            worker.start()

    def stop(self) -> None:
        with self._condition:
            if not self._running:
                return
            self._running = False
            self._condition.notify_all()
            workers, self._workers = self._workers, []
        current = threading.current_thread()
        for worker in workers:
            if worker is not current:
                worker.join()

    def set_thread_count(self, num_threads: int) -> None:
        count = self._checked_thread_count(num_threads)
        self.stop()
        self._thread_count = count

    def register_handler(self, message_id: int, handler: Handler) -> None:
        self._add_handler(message_id, handler)

    def _queue_message(self, message_id: int, params: list[Parameter]) -> None:
        with self._condition:
            self._pending.append((message_id, params))
            self._condition.notify()

    def _process_messages(self) -> None:
        while True:
            with self._condition:
                self._condition.wait_for(lambda: not self._running or self._pending)
                if not self._pending:
                    return
                message_id, params = self._pending.popleft()
            self._dispatch(message_id, params)