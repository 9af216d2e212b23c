from functools import lru_cache
from typing import Callable, Optional, Protocol
import asyncio
import queue
import threading

from toolexec.common.config.logging_config import get_logger


logger = get_logger(__name__)

Task = Callable[[], None]


class Dispatcher(Protocol):
    def is_dispatch_thread(self) -> bool:
        ...

    def invoke_later(self, task: Task) -> None:
        ...


class ThreadDispatcher:
    _STOP = object()

    def __init__(self, name: str = "toolexec-dispatch"):
        self._name = name
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> "ThreadDispatcher":
        if self._thread is None:
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._thread.start()
        return self

    def _run(self) -> None:
        while True:
            task = self._queue.get()
            try:
                if task is self._STOP:
                    return
                task()
            except Exception:
                logger.exception(f"Dispatched task failed on {self._name}")
            finally:
                self._queue.task_done()

    def is_dispatch_thread(self) -> bool:
        return self._thread is not None and threading.current_thread() is self._thread

    def invoke_later(self, task: Task) -> None:
        if self._thread is None:
            self.start()
        self._queue.put(task)

    def flush(self, timeout: Optional[float] = None) -> bool:
        done = threading.Event()
        self.invoke_later(done.set)
        return done.wait(timeout)

    def shutdown(self, timeout: Optional[float] = None) -> None:
        if self._thread is None:
            return
        self._queue.put(self._STOP)
        self._thread.join(timeout)
        self._thread = None

    def __enter__(self) -> "ThreadDispatcher":
        return self.start()

    def __exit__(self, *args) -> None:
        self.shutdown()


class AsyncioDispatcher:
    def __init__(self, loop: asyncio.AbstractEventLoop):
        self._loop = loop

    def is_dispatch_thread(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def invoke_later(self, task: Task) -> None:
        self._loop.call_soon_threadsafe(task)


# One dispatch thread per process, shared by every runner built without a dispatcher.
@lru_cache()
def get_default_dispatcher() -> ThreadDispatcher:
    return ThreadDispatcher()


def assert_not_dispatch_thread(dispatcher: Dispatcher) -> None:
    on_dispatch_thread = dispatcher.is_dispatch_thread()
    if on_dispatch_thread:
        logger.error("External tool invoked on the dispatch thread")
    assert not on_dispatch_thread, "It's a bad idea to run an external tool on the dispatch thread"
