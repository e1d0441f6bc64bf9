"""A callback registry that converts numeric arguments to the declared types."""

from __future__ import annotations

import threading
import types
from collections.abc import Callable
from typing import Any

from .callback import CallbackError, _signature_of

_NO_INSTANCE = object()
_NUMERIC_TARGETS = (bool, int, float)


class _Callback:
    """A stored callable with the parameter types it declares."""

    __slots__ = ("_func", "_signature")

    def __init__(self, func: Callable[..., Any]) -> None:
        self._func = func
        self._signature = _signature_of(func)

    @staticmethod
    def _convert_one(name: str, expected: type | None, value: Any) -> Any:
        if expected is None or expected is object:
            return value
        if isinstance(value, expected):
            return value
        if (
            expected in _NUMERIC_TARGETS
            and isinstance(value, (int, float))
            and not isinstance(value, bool)
        ):
            return expected(value)
        raise CallbackError(
            f"Callback argument type mismatch: parameter {name!r} "
            f"expects {expected.__name__}, got {type(value).__name__}"
        )

    def _convert(self, args: tuple[Any, ...]) -> list[Any]:
        if self._signature is None:
            return list(args)
        if not self._signature.accepts(len(args)):
            raise CallbackError("Parameter count mismatch")
        converted = [
            self._convert_one(name, expected, value)
            for name, expected, value in self._signature.expected_types(args)
        ]
        converted.extend(args[len(converted):])
        return converted

    def __call__(self, args: tuple[Any, ...]) -> Any:
        return self._func(*self._convert(args))


class RxCallbackManager:
    """Holds one callback per id; int and float arguments adapt to the declared types."""

    def __init__(self) -> None:
        self._callbacks: dict[int, _Callback] = {}
        self._lock = threading.Lock()

    def register_callback(
        self,
        callback_id: int,
        func: Callable[..., Any],
        instance: Any = _NO_INSTANCE,
    ) -> None:
        """Register ``func`` under ``callback_id``, replacing any earlier one.

        When ``instance`` is given, ``func`` is a method taken from a class and
        is bound to ``instance``.
        """
        if instance is _NO_INSTANCE:
            target: Callable[..., Any] = func
        elif instance is None:
            raise ValueError("instance must not be None")
        else:
            target = types.MethodType(func, instance)
        callback = _Callback(target)
        with self._lock:
            self._callbacks[callback_id] = callback

    def _lookup(self, callback_id: int) -> _Callback:
        with self._lock:
            callback = self._callbacks.get(callback_id)
        if callback is None:
            raise CallbackError(f"Callback not found: {callback_id}")
        return callback

    def invoke(self, callback_id: int, *args: Any, returns: type | None = None) -> Any:
        """Call the callback for ``callback_id`` and return its result.

        ``returns`` checks the result: ``type(None)`` demands that the callback
        returned nothing, any other type that the result is an instance of it.
        """
        result = self._lookup(callback_id)(args)
        if returns is None:
            return result
        if returns is type(None):
            if result is not None:
                raise CallbackError(
                    "Invoked void callback but received non-empty return value"
                )
            return None
        if not isinstance(result, returns):
            raise CallbackError("Failed to cast callback return type")
        return result

    def invoke_void(self, callback_id: int, *args: Any) -> None:
        """Call the callback for ``callback_id`` and discard its result."""
        self._lookup(callback_id)(args)

    def has_callback(self, callback_id: int) -> bool:
        """Tell whether a callback is registered under ``callback_id``."""
        with self._lock:
            return callback_id in self._callbacks

    def remove_callback(self, callback_id: int) -> None:
        """Forget the callback registered under ``callback_id``, if any."""
        with self._lock:
            self._callbacks.pop(callback_id, None)