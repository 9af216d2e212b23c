from typing import Optional, List, Callable, Protocol, TextIO, TYPE_CHECKING
import sys

from toolexec.builder.console_filter import ConsoleFilter
from toolexec.common.config.constants import StreamKind
from toolexec.common.config.settings import Settings, get_settings
from toolexec.common.config.logging_config import get_logger
from toolexec.common.dto.launch import OutputChunk

if TYPE_CHECKING:
    from toolexec.builder.process_runner import RunContext


logger = get_logger(__name__)

ViewListener = Callable[[OutputChunk], None]


class ProcessView:
    def __init__(
        self,
        pid: Optional[int],
        command_line: str,
        exit_code: Optional[int],
    ):
        self.pid = pid
        self.command_line = command_line
        self.exit_code = exit_code
        self._listeners: List[ViewListener] = []
        self._close_callbacks: List[Callable[["ProcessView"], None]] = []
        self._transcript: List[OutputChunk] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def transcript(self) -> List[OutputChunk]:
        return list(self._transcript)

    def add_listener(self, listener: ViewListener) -> None:
        self._listeners.append(listener)

    def add_close_callback(self, callback: Callable[["ProcessView"], None]) -> None:
        self._close_callbacks.append(callback)

    def on_text(self, chunk: OutputChunk) -> None:
        if self._closed:
            logger.warning(f"Dropping output for closed view of pid {self.pid}")
            return
        self._transcript.append(chunk)
        for listener in self._listeners:
            listener(chunk)

    def notify_text_available(self, text: str, stream_kind: StreamKind) -> None:
        self.on_text(OutputChunk(text=text, stream_kind=stream_kind))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            for callback in self._close_callbacks:
                callback(self)
        finally:
            self._listeners.clear()
            self._close_callbacks.clear()

    def __enter__(self) -> "ProcessView":
        return self

    def __exit__(self, *args) -> None:
        self.close()


class ResultsPresenter(Protocol):
    def present(
        self,
        view: ProcessView,
        title: str,
        activate: bool,
        output_filter: Optional[ConsoleFilter],
    ) -> None:
        ...


class FileSystemRefresher(Protocol):
    def sync_refresh(self) -> None:
        ...


class NullFileSystemRefresher:
    def sync_refresh(self) -> None:
        logger.debug("File system refresh requested; no refresher configured")


class ConsoleResultsPresenter:
    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stderr

    def present(
        self,
        view: ProcessView,
        title: str,
        activate: bool,
        output_filter: Optional[ConsoleFilter],
    ) -> None:
        stream = self.stream
        stream.write(f"==== {title} ====\n")
        stream.write(f"{view.command_line}\n")

        def write_chunk(chunk: OutputChunk) -> None:
            stream.write(chunk.text)

        def write_footer(closed_view: ProcessView) -> None:
            if output_filter is not None:
                for reference in output_filter.scan(closed_view.transcript):
                    stream.write(f"  -> {reference.location}\n")
            stream.write(f"\nProcess finished with exit code {closed_view.exit_code}\n")
            stream.flush()

        view.add_listener(write_chunk)
        view.add_close_callback(write_footer)


class FailureReporter:
    def __init__(
        self,
        presenter: ResultsPresenter,
        settings: Optional[Settings] = None,
    ):
        self._presenter = presenter
        self._settings = settings or get_settings()

    def title_for(self, run: "RunContext") -> str:
        return run.descriptor.presentable_name or self._settings.default_title

    def report(self, run: "RunContext") -> Optional[ProcessView]:
        if run.result.succeeded or not run.descriptor.show_output_on_error:
            return None

        title = self.title_for(run)
        output_filter = ConsoleFilter(run.descriptor.working_directory)

        with ProcessView(
            pid=run.pid,
            command_line=run.command_line,
            exit_code=run.result.exit_code,
        ) as view:
            self._presenter.present(view, title=title, activate=True, output_filter=output_filter)
            replayed = run.history.replay(view)

        logger.info(f"Presented {replayed} output chunks for failed run '{title}'")
        return view
