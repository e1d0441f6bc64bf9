"""Construction of message queues by kind."""

from __future__ import annotations

from .base import MessageQueue
from .ipc_queue import IPCMessageQueue
from .local_queue import LocalMessageQueue


def create_message_queue(
    use_ipc: bool = False, ipc_name: str = "", num_threads: int = 1
) -> MessageQueue:
    """Return an inter-process queue named ``ipc_name`` or an in-process queue."""
    if use_ipc:
        return IPCMessageQueue(ipc_name, num_threads)
    return LocalMessageQueue(num_threads)