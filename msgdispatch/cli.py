"""Command that exercises the dispatcher, the callback managers and a message queue."""

from __future__ import annotations

import argparse
import enum
import sys
import threading
import time
from collections.abc import Sequence
from typing import Any

from .base import MessageId, call_message
from .dispatcher import EventCallbackDispatcher, Message
from .ipc_queue import IPCMessageQueue
from .registry import RxCallbackManager
from .sample import CallbackUser, RxRtspClientService, VideoProcessor, VideoStreamHandler


class MyEvents(enum.IntEnum):
    """Events raised by the demonstration."""

    EVENT_ASYNC_INT_VOID = 2001
    EVENT_WITHOUT_HANDLER = 9999


def _as_int(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise TypeError(f"bad cast: expected int, got {type(value).__name__}")


def _as_pointer(value: Any) -> str:
    if value is None:
        return "0"
    if isinstance(value, int) and not isinstance(value, bool):
        return hex(value)
    raise TypeError(f"bad cast: expected address, got {type(value).__name__}")


class AsyncHandler:
    """Handlers for dispatcher messages carrying integers and addresses."""

    def handle_int_void(self, message: Message) -> None:
        tid = threading.get_ident()
        print(
            f"[{tid}] [Member Fun] Handling EVENT_ASYNC_INT_VOID ({int(message.event)})..."
        )
        try:
            code = _as_int(message.w_param)
            data = _as_pointer(message.l_param)
            print(f"[{tid}] [Member Fun] code={code}, data={data}")
        except TypeError as exc:
            print(
                f"[{tid}] [Member Fun] Error casting data for EVENT_ASYNC_INT_VOID: {exc}",
                file=sys.stderr,
            )
        time.sleep(0.03)
        print(f"[{tid}] [Member Fun] Finished handling EVENT_ASYNC_INT_VOID.")

    def handle_void_void(self, message: Message) -> None:
        w_param = _as_pointer(message.w_param)
        l_param = _as_pointer(message.l_param)
        print(f"[Member Async Void-Void] wParam={w_param}, lParam={l_param}")

    def handle_int_int(self, message: Message) -> None:
        a = _as_int(message.w_param)
        b = _as_int(message.l_param)
        print(f"[Member Async Int-Int] a={a}, b={b}")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="msgdispatch",
        description="Run the event dispatcher, callback managers and message queue.",
    )
    parser.add_argument(
        "--ipc-dir", default=None, help="directory holding the shared message queue"
    )
    parser.add_argument(
        "--settle",
        type=float,
        default=0.2,
        help="seconds to let the queue workers run before stopping",
    )
    return parser.parse_args(argv)


def _run_normal(message: str) -> None:
    print(f"Normal function called: {message}")


def _lambda_sum(a: int, b: int) -> int:
    print(f"Lambda called with a={a}, b={b}")
    return a + b


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    dispatcher = EventCallbackDispatcher()
    handler = AsyncHandler()
    dispatcher.register_callback(MyEvents.EVENT_ASYNC_INT_VOID, handler.handle_int_void)
    threads = dispatcher.on_event(MyEvents.EVENT_ASYNC_INT_VOID, 12345, 0xABCDEF01)
    for thread in threads:
        thread.join(timeout=1.0)

    try:
        VideoProcessor()
        VideoStreamHandler().handle_stream()
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    callback_manager = RxCallbackManager()
    rtsp_service = RxRtspClientService()
    callback_manager.register_callback(1, RxRtspClientService.on_video, rtsp_service)
    callback_manager.register_callback(2, RxRtspClientService.process_data, rtsp_service)
    callback_manager.register_callback(3, _lambda_sum)
    callback_manager.register_callback(4, _run_normal)

    callback_user = CallbackUser(callback_manager)
    callback_user.trigger_video_callback(1920, 1080, "H.264")
    result = callback_user.trigger_process_data_callback("TestData", 0.75)
    print(f"Process data result: {result}")

    callback_manager.invoke_void(4, "Hello from main")
    total = callback_manager.invoke(3, 10, 20, returns=int)
    print(f"Lambda result: {total}")

    queue = IPCMessageQueue("TestQueue", 2, directory=args.ipc_dir)
    queue.register_handler(MessageId.UPDATE, lambda params: print("Received MSG_UPDATE"))
    with queue:
        call_message(queue, MessageId.UPDATE)
        call_message(queue, MessageId.UPDATE, 42)
        call_message(queue, MessageId.UPDATE, 42, "Hello")
        call_message(queue, MessageId.UPDATE, 1, 2, 3)
        call_message(queue, MessageId.UPDATE, 1, 2, 3, 4)
        if args.settle > 0:
            time.sleep(args.settle)
    return 0


if __name__ == "__main__":
    sys.exit(main())