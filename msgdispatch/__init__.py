"""Message queues, event dispatchers and callback registries."""

__version__ = "0.1.0"
__all__ = [
    "base",
    "local_queue",
    "ipc_queue",
    "factory",
    "callback",
    "dispatcher",
    "registry",
    "sample",
    "cli",
]