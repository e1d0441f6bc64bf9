"""A registry of callbacks invoked by integer id with argument and result checks."""

from __future__ import annotations

import inspect
import threading
import types
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

_NO_INSTANCE = object()
_CO_VARARGS = 0x04

_BUILTIN_TYPES: dict[str, type] = {
    cls.__name__: cls
    for cls in (
        int,
        float,
        complex,
        bool,
        str,
        bytes,
        bytearray,
        memoryview,
        range,
        list,
        dict,
        tuple,
        set,
        frozenset,
        object,
        type,
    )
}


class CallbackError(RuntimeError):
    """Raised when a callback cannot be found or invoked as requested."""


@dataclass(frozen=True)
class _Signature:
    """Positional parameters of a plain function and the types they declare."""

    positional: tuple[str, ...]
    required: int
    maximum: int | None
    keyword_required: bool = False
    annotations: dict[str, type] = field(default_factory=dict)

    def accepts(self, count: int) -> bool:
        if self.keyword_required or count < self.required:
            return False
        return self.maximum is None or count <= self.maximum

    def expected_types(self, args: tuple[Any, ...]) -> Iterator[tuple[str, type | None, Any]]:
        for name, value in zip(self.positional, args):
            yield name, self.annotations.get(name), value


def _lookup_name(annotation: str, namespace: Mapping[str, Any]) -> Any:
    """Find a plain name in ``namespace`` or among the built-in types.

    Dotted or otherwise complex annotations are not resolved.
    """
    name = annotation.strip()
    if not name.isidentifier():
        return None
    if name in namespace:
        return namespace[name]
    return _BUILTIN_TYPES.get(name)


def _resolve(annotation: Any, namespace: Mapping[str, Any]) -> type | None:
    if isinstance(annotation, str):
        annotation = _lookup_name(annotation, namespace)
    return annotation if isinstance(annotation, type) else None


def _annotations_of(target: Any) -> dict[str, Any]:
    """Return the annotations declared on ``target`` as they are stored."""
    return dict(getattr(target, "__annotations__", None) or {})


def _signature_of(func: Callable[..., Any]) -> _Signature | None:
    """Describe ``func`` from its code object, or return None if it has none."""
    skip = 0
    target: Any = func
    if isinstance(target, types.MethodType):
        skip = 1
        target = target.__func__
    target = inspect.unwrap(target)
    code = getattr(target, "__code__", None)
    if not isinstance(code, types.CodeType):
        return None
    names = code.co_varnames[: code.co_argcount]
    kwonly = code.co_varnames[code.co_argcount : code.co_argcount + code.co_kwonlyargcount]
    defaults = getattr(target, "__defaults__", None) or ()
    kwdefaults = getattr(target, "__kwdefaults__", None) or {}
    positional = tuple(names[skip:])
    namespace = getattr(target, "__globals__", None) or {}
    raw = _annotations_of(target)
    annotations = {
        name: resolved
        for name, annotation in raw.items()
        if name in positional and (resolved := _resolve(annotation, namespace)) is not None
    }
    return _Signature(
        positional=positional,
        required=max(len(names) - len(defaults) - skip, 0),
        maximum=None if code.co_flags & _CO_VARARGS else len(positional),
        keyword_required=any(name not in kwdefaults for name in kwonly),
        annotations=annotations,
    )


def _null_instance(*_args: Any) -> Any:
    raise CallbackError("Cannot invoke member function: instance is null.")


class _Callback:
    """A stored callable together with what is known about its parameters."""

    __slots__ = ("_func", "_signature")

    def __init__(self, func: Callable[..., Any]) -> None:
        self._func = func
        self._signature = _signature_of(func)

    def _check_arguments(self, args: tuple[Any, ...]) -> None:
        if self._signature is None:
            return
        if not self._signature.accepts(len(args)):
            raise CallbackError("Callback invocation failed: incorrect number of arguments.")
        for name, expected, value in self._signature.expected_types(args):
            if expected is not None and not isinstance(value, expected):
                raise CallbackError(
                    "Callback invocation failed: argument type mismatch. "
                    f"Parameter {name!r} expects {expected.__name__}, "
                    f"got {type(value).__name__}."
                )

    def __call__(self, args: tuple[Any, ...]) -> Any:
        self._check_arguments(args)
        return self._func(*args)


class CallbackManager:
    """Holds one callback per id and invokes it with checked arguments."""

    _instance: CallbackManager | None = None
    _instance_lock = threading.Lock()

    def __init__(self) -> None:
        self._callbacks: dict[int, _Callback] = {}
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> CallbackManager:
        """Return the process-wide shared manager."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    def register_callback(
        self,
        callback_id: int,
        func: Callable[..., Any],
        instance: Any = _NO_INSTANCE,
    ) -> None:
        """Register ``func`` under ``callback_id``, replacing any earlier one.

        When ``instance`` is given, ``func`` is a method taken from a class and
        is bound to ``instance``; a ``None`` instance makes every invocation fail.
        """
        if instance is _NO_INSTANCE:
            target: Callable[..., Any] = func
        elif instance is None:
            target = _null_instance
        else:
            target = types.MethodType(func, instance)
        callback = _Callback(target)
        with self._lock:
            self._callbacks[callback_id] = callback

    def invoke(self, callback_id: int, *args: Any, returns: type | None = None) -> Any:
        """Call the callback for ``callback_id`` and return its result.

        If ``returns`` is given, the result must be an instance of it.
        """
        with self._lock:
            callback = self._callbacks.get(callback_id)
        if callback is None:
            raise CallbackError(f"Callback not found for id: {callback_id}")
        result = callback(args)
        if returns is not None and not isinstance(result, returns):
            raise CallbackError(
                "Callback invocation failed: return type mismatch. Expected "
                f"{returns.__name__}, but callback returned incompatible type."
            )
        return result