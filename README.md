# msgdispatch

A small toolkit for passing messages and invoking callbacks inside a process
or between processes on the same machine.

## What is in it

- **Message queues**
  - `msgdispatch.base.MessageQueue` is the shared interface: `start()`,
    `stop()`, `set_thread_count(n)`, `register_handler(message_id, handler)`
    and `queue_message(message_id, *args)`. A message carries at most four
    parameters, each an `int`, `float` or `str` (`bool` is sent as `int`).
    Every handler registered for the id is called with the parameter list;
    an exception in a handler is logged and does not stop the others.
    Queues are context managers: `with queue:` starts and stops them.
  - `msgdispatch.base.MessageId` holds the well-known ids `NONE`, `UPDATE`,
    `PROCESS` and `CONTROL`; `call_message(queue, message_id, *args)` is a
    shorthand for `queue.queue_message`.
  - `msgdispatch.local_queue.LocalMessageQueue(num_threads=1)` delivers
    messages in memory on a pool of worker threads. Messages queued while it
    is stopped wait until it is started; stopping lets the workers finish
    every message already queued.
  - `msgdispatch.ipc_queue.IPCMessageQueue(name, num_threads=1, directory=None)`
    passes messages through a spool directory named after the queue (in the
    system temporary directory unless `directory` is given), so several
    processes using the same name and directory share it. Parameters are
    written with `encode_parameters` and read back with `decode_parameters`
    (`count;` followed by `type:value;` for each). Encoded parameters may not
    exceed 4096 bytes (`MAX_DATA_SIZE`), and strings may not contain `;`.
    Messages queued while the queue is stopped are dropped, and stopping
    removes the spool directory with any messages still in it.
- **Factory**: `msgdispatch.factory.create_message_queue(use_ipc=False,
  ipc_name="", num_threads=1)` returns an `IPCMessageQueue` or a
  `LocalMessageQueue`.
- **Event dispatcher**: `msgdispatch.dispatcher.EventCallbackDispatcher`
  keeps several callbacks per event key. `dispatch(message)` and
  `on_event(event, w_param=None, l_param=None)` run each callback on its own
  thread with a `Message` and return the started threads; an event with no
  callbacks raises `HandlerNotFoundError`. `unregister_callbacks(event)`
  removes all callbacks for an event.
- **Callback registries**
  - `msgdispatch.callback.CallbackManager` stores one callback per integer
    id (`get_instance()` returns a shared instance). `invoke(id, *args,
    returns=None)` checks the argument count and any parameter types the
    function annotates, and with `returns` checks the result type; failures
    raise `CallbackError`.
  - `msgdispatch.registry.RxCallbackManager` works the same way but converts
    `int` and `float` arguments to the annotated numeric type. It also has
    `invoke_void`, `has_callback` and `remove_callback`; `invoke(...,
    returns=type(None))` demands that the callback returned nothing.
  - Both accept `register_callback(id, Class.method, instance)` to bind a
    method to an instance.
- **Examples**: `msgdispatch.sample` has small video-processing classes
  (`VideoProcessor`, `VideoStreamHandler`, `RxRtspClientService`,
  `CallbackUser`) wired through the callback registries.

## Installation

```
pip install .
```

## Usage

```python
from msgdispatch.base import MessageId, call_message
from msgdispatch.factory import create_message_queue

received = []
queue = create_message_queue(False, "", 2)
queue.register_handler(MessageId.UPDATE, received.append)
with queue:
    call_message(queue, MessageId.UPDATE, 42, "Hello")
print(received)   # [[42, 'Hello']]
```

```python
from msgdispatch.registry import RxCallbackManager

manager = RxCallbackManager()
manager.register_callback(3, lambda a, b: a + b)
total = manager.invoke(3, 10, 20, returns=int)   # 30
```

```python
from msgdispatch.dispatcher import EventCallbackDispatcher

dispatcher = EventCallbackDispatcher()
dispatcher.register_callback(2001, lambda msg: print(msg.w_param, msg.l_param))
for thread in dispatcher.on_event(2001, 12345, 0xABCDEF01):
    thread.join()
```

## Demo

```
msgdispatch-demo [--ipc-dir DIR] [--settle SECONDS]
```

It fires an event on the dispatcher, runs the sample classes through both
callback registries, then sends five `UPDATE` messages on an
`IPCMessageQueue` named `TestQueue`. `--ipc-dir` chooses where the queue's
spool directory lives; `--settle` (default 0.2) is how long the queue
workers run before the queue is stopped.

## Limits

The inter-process queue is a directory of files polled every 0.1 seconds;
it does not use the operating system's message queues or shared memory and
does not cross machines. There is no server or network transport.

## Tests

```
pip install .[test]
pytest
```