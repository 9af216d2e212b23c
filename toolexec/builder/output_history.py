from typing import Callable, List, Protocol, Tuple, Union
import threading

from toolexec.common.dto.launch import OutputChunk, ProcessResult
from toolexec.common.exceptions.execution_exceptions import HistoryStateError


class ProcessListener(Protocol):
    def on_text(self, chunk: OutputChunk) -> None:
        ...


class HistoryLog:
    def __init__(self):
        self._chunks: List[OutputChunk] = []
        self._lock = threading.Lock()
        self._frozen = False

    def append(self, chunk: OutputChunk) -> None:
        with self._lock:
            if self._frozen:
                raise HistoryStateError("Cannot append to a frozen history", frozen=True)
            self._chunks.append(chunk)

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    @property
    def chunks(self) -> Tuple[OutputChunk, ...]:
        with self._lock:
            return tuple(self._chunks)

    def __len__(self) -> int:
        with self._lock:
            return len(self._chunks)

    def replay(
        self,
        consumer: Union[ProcessListener, Callable[[OutputChunk], None]],
    ) -> int:
        if not self._frozen:
            raise HistoryStateError("History can only be replayed after the run terminated", frozen=False)

        deliver = consumer.on_text if hasattr(consumer, "on_text") else consumer
        for chunk in self._chunks:
            deliver(chunk)
        return len(self._chunks)


class CapturingListener:
    def __init__(self, result: ProcessResult):
        self._result = result

    def on_text(self, chunk: OutputChunk) -> None:
        if chunk.is_output:
            self._result.append(chunk)


class HistoryListener:
    def __init__(self, history: HistoryLog):
        self._history = history

    def on_text(self, chunk: OutputChunk) -> None:
        self._history.append(chunk)
