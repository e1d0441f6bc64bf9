import pytest

from msgdispatch.callback import CallbackError, CallbackManager


class _Service:
    def __init__(self, factor):
        self.factor = factor

    def scale(self, value: int) -> int:
        return value * self.factor


def test_get_instance_is_shared():
    first = CallbackManager.get_instance()
    first.register_callback(9001, lambda: "shared")
    second = CallbackManager.get_instance()
    assert second.invoke(9001) == "shared"
    assert second is first


def test_invoke_lambda_returns_result():
    manager = CallbackManager()
    manager.register_callback(3, lambda a, b: (a, b))
    assert manager.invoke(3, 10, 20) == (10, 20)


def test_invoke_with_matching_return_type():
    manager = CallbackManager()
    manager.register_callback(2, lambda flag: flag)
    assert manager.invoke(2, True, returns=bool) is True


def test_return_type_mismatch_raises():
    manager = CallbackManager()
    manager.register_callback(1, lambda: "text")
    with pytest.raises(CallbackError, match="return type mismatch"):
        manager.invoke(1, returns=int)


def test_void_callback_checked_with_none_type():
    manager = CallbackManager()
    seen = []
    manager.register_callback(4, seen.append)
    assert manager.invoke(4, "Hello from main", returns=type(None)) is None
    assert seen == ["Hello from main"]


def test_unknown_id_raises():
    manager = CallbackManager()
    with pytest.raises(CallbackError, match="Callback not found for id: 7"):
        manager.invoke(7)


def test_wrong_argument_count_raises():
    manager = CallbackManager()
    manager.register_callback(1, lambda a, b: a)
    with pytest.raises(CallbackError, match="incorrect number of arguments"):
        manager.invoke(1, 1)


def test_argument_type_mismatch_raises():
    def takes_str(message: str) -> str:
        return message

    manager = CallbackManager()
    manager.register_callback(1, takes_str)
    with pytest.raises(CallbackError, match="argument type mismatch"):
        manager.invoke(1, 5)
    assert manager.invoke(1, "frame") == "frame"


def test_member_function_bound_to_instance():
    manager = CallbackManager()
    service = _Service(3)
    manager.register_callback(1, _Service.scale, service)
    assert manager.invoke(1, 5, returns=int) == 15


def test_member_function_argument_type_checked():
    manager = CallbackManager()
    manager.register_callback(1, _Service.scale, _Service(2))
    with pytest.raises(CallbackError, match="argument type mismatch"):
        manager.invoke(1, "five")


def test_member_function_with_null_instance_raises():
    manager = CallbackManager()
    manager.register_callback(1, _Service.scale, None)
    with pytest.raises(CallbackError, match="instance is null"):
        manager.invoke(1, 5)


def test_registration_replaces_previous():
    manager = CallbackManager()
    manager.register_callback(1, lambda: "first")
    manager.register_callback(1, lambda: "second")
    assert manager.invoke(1) == "second"


def test_callback_exception_propagates():
    def fail():
        raise KeyError("boom")

    manager = CallbackManager()
    manager.register_callback(1, fail)
    with pytest.raises(KeyError):
        manager.invoke(1)