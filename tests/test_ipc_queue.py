from queue import SimpleQueue

import pytest

from msgdispatch.base import MessageId
from msgdispatch.ipc_queue import IPCMessageQueue, decode_parameters, encode_parameters


def test_empty_parameter_list_encodes_count_only():
    assert encode_parameters([]) == "0;"
    assert decode_parameters("0;") == []


def test_int_parameter_wire_format():
    assert encode_parameters([42]) == "1;int:42;"


def test_round_trip_keeps_values_and_types():
    params = [42, -7, 1.5, "Hello", ""]
    decoded = decode_parameters(encode_parameters(params))
    assert decoded == params
    assert [type(value) for value in decoded] == [int, int, float, str, str]


def test_round_trip_keeps_full_float_precision():
    params = [0.1 + 0.2]
    assert decode_parameters(encode_parameters(params)) == params


def test_decode_accepts_float_tag_and_spaces_before_numbers():
    assert decode_parameters("2;float:2.5;int: 42;") == [2.5, 42]


@pytest.mark.parametrize(
    "data",
    ["abc", "x;", "2;int:1;", "1;blob:1;", "1;int:x;", "1;int", "-1;"],
)
def test_decode_rejects_malformed_data(data):
    with pytest.raises(ValueError):
        decode_parameters(data)


def test_encode_rejects_separator_in_string():
    with pytest.raises(ValueError):
        encode_parameters(["a;b"])


def test_encode_rejects_unsupported_type():
    with pytest.raises(TypeError):
        encode_parameters([[1]])


def test_message_delivered_to_handler(tmp_path):
    queue = IPCMessageQueue("TestQueue", directory=tmp_path)
    inbox = SimpleQueue()
    queue.register_handler(MessageId.UPDATE, inbox.put)
    queue.start()
    try:
        queue.queue_message(MessageId.UPDATE, 42, "Hello")
        params = inbox.get(timeout=5)
    finally:
        queue.stop()
    assert list(params) == [42, "Hello"]


def test_messages_arrive_in_order(tmp_path):
    queue = IPCMessageQueue("ordered", directory=tmp_path)
    inbox = SimpleQueue()
    queue.register_handler(MessageId.PROCESS, inbox.put)
    queue.start()
    try:
        for number in range(5):
            queue.queue_message(MessageId.PROCESS, number)
        received = [inbox.get(timeout=5)[0] for _ in range(5)]
    finally:
        queue.stop()
    assert received == list(range(5))


def test_message_sent_before_start_is_dropped(tmp_path):
    queue = IPCMessageQueue("dropping", directory=tmp_path)
    inbox = SimpleQueue()
    queue.register_handler(MessageId.UPDATE, inbox.put)
    queue.queue_message(MessageId.UPDATE, "first")
    queue.start()
    try:
        queue.queue_message(MessageId.UPDATE, "second")
        params = inbox.get(timeout=5)
    finally:
        queue.stop()
    assert list(params) == ["second"]
    assert inbox.empty()


def test_queues_with_same_name_share_messages(tmp_path):
    sender = IPCMessageQueue("shared", 0, directory=tmp_path)
    receiver = IPCMessageQueue("shared", 1, directory=tmp_path)
    inbox = SimpleQueue()
    receiver.register_handler(MessageId.CONTROL, inbox.put)
    sender.start()
    receiver.start()
    try:
        sender.queue_message(MessageId.CONTROL, 1, 2.5, "go")
        params = inbox.get(timeout=5)
    finally:
        receiver.stop()
        sender.stop()
    assert list(params) == [1, 2.5, "go"]


def test_stop_removes_the_shared_queue(tmp_path):
    queue = IPCMessageQueue("cleanup", directory=tmp_path)
    queue.start()
    created = list(tmp_path.iterdir())
    assert len(created) == 1 and created[0].is_dir()
    queue.stop()
    assert list(tmp_path.iterdir()) == []


def test_start_failure_raises_runtime_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    queue = IPCMessageQueue("broken", directory=blocker)
    with pytest.raises(RuntimeError, match="Failed to initialize IPC"):
        queue.start()


def test_oversized_message_rejected(tmp_path):
    queue = IPCMessageQueue("big", directory=tmp_path)
    with pytest.raises(ValueError):
        queue.queue_message(MessageId.UPDATE, "x" * 5000)


def test_set_thread_count_stops_queue(tmp_path):
    queue = IPCMessageQueue("resize", directory=tmp_path)
    queue.start()
    queue.set_thread_count(2)
    assert queue.thread_count == 2
    assert list(tmp_path.iterdir()) == []


def test_name_is_kept(tmp_path):
    queue = IPCMessageQueue("TestQueue", 2, directory=tmp_path)
    assert (queue.name, queue.thread_count) == ("TestQueue", 2)