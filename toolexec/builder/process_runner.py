from typing import Optional, Dict, Mapping, List, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from uuid import UUID, uuid4
import asyncio
import codecs

from toolexec.builder.dispatcher import Dispatcher, get_default_dispatcher, assert_not_dispatch_thread
from toolexec.builder.environment_resolver import CommandLine, create_command_line
from toolexec.builder.failure_reporter import (
    FailureReporter,
    ResultsPresenter,
    FileSystemRefresher,
    ConsoleResultsPresenter,
    NullFileSystemRefresher,
)
from toolexec.builder.output_history import (
    HistoryLog,
    ProcessListener,
    CapturingListener,
    HistoryListener,
)
from toolexec.common.config.constants import RunState, StreamKind, OUTPUT_ENCODING
from toolexec.common.config.settings import Settings, get_settings
from toolexec.common.config.logging_config import get_logger, get_run_logger
from toolexec.common.dto.launch import LaunchDescriptor, OutputChunk, ProcessResult
from toolexec.common.exceptions.execution_exceptions import ExecutionError, SpawnError, ResultStateError
from toolexec.common.utils.time_utils import utc_now, Timer


logger = get_logger(__name__)

_END_OF_STREAM = object()


def _ensure_no_running_loop() -> None:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return
    raise ExecutionError("execute() cannot block inside a running event loop; await execute_async() instead")

_TRANSITIONS: Dict[RunState, tuple] = {
    RunState.PENDING: (RunState.RUNNING, RunState.FAILED),
    RunState.RUNNING: (RunState.SUCCEEDED, RunState.FAILED),
    RunState.SUCCEEDED: (),
    RunState.FAILED: (),
}


@dataclass
class RunContext:
    descriptor: LaunchDescriptor
    command: CommandLine
    result: ProcessResult
    run_id: UUID = field(default_factory=uuid4)
    history: HistoryLog = field(default_factory=HistoryLog)
    state: RunState = RunState.PENDING
    pid: Optional[int] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_seconds: float = 0.0

    @property
    def command_line(self) -> str:
        return self.descriptor.command_line(self.command.executable)

    def transition(self, state: RunState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise ResultStateError(f"Invalid run state transition {self.state.value} -> {state.value}")
        self.state = state


class ProcessRunner:
    def __init__(
        self,
        dispatcher: Optional[Dispatcher] = None,
        presenter: Optional[ResultsPresenter] = None,
        refresher: Optional[FileSystemRefresher] = None,
        settings: Optional[Settings] = None,
        parent_env: Optional[Mapping[str, str]] = None,
    ):
        self._settings = settings or get_settings()
        self._dispatcher = dispatcher or get_default_dispatcher()
        self._reporter = FailureReporter(presenter or ConsoleResultsPresenter(), self._settings)
        self._refresher = refresher or NullFileSystemRefresher()
        self._parent_env = parent_env
        self._last_run: Optional[RunContext] = None

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def last_run(self) -> Optional[RunContext]:
        return self._last_run

    def execute(
        self,
        descriptor: LaunchDescriptor,
        process_output: Optional[ProcessResult] = None,
    ) -> bool:
        assert_not_dispatch_thread(self._dispatcher)
        _ensure_no_running_loop()

        command = create_command_line(descriptor, parent_env=self._parent_env, settings=self._settings)

        if process_output is not None:
            process_output.reset()
        run = RunContext(
            descriptor=descriptor,
            command=command,
            result=process_output if process_output is not None else ProcessResult(),
        )
        self._last_run = run
        run_logger = get_run_logger(str(run.run_id), command.executable)
        run_logger.info(f"Running {run.command_line}")

        timer = Timer().start()
        try:
            exit_code = asyncio.run(self._run_process(run))
        except SpawnError:
            run.transition(RunState.FAILED)
            run.history.freeze()
            run_logger.error(f"Failed to start {command.executable}")
            raise
        except BaseException:
            if not run.state.is_terminal:
                run.transition(RunState.FAILED)
            run.history.freeze()
            run_logger.exception(f"Run of {command.executable} aborted")
            raise
        finally:
            timer.stop()
            run.duration_seconds = timer.elapsed
            run.completed_at = utc_now()

        run.result.finalize(exit_code)
        run.history.freeze()
        run.transition(RunState.SUCCEEDED if run.result.succeeded else RunState.FAILED)

        if run.result.succeeded:
            run_logger.info(
                f"Process finished in {timer.elapsed_formatted}",
                extra={"exit_code": exit_code, "pid": run.pid},
            )
        else:
            run_logger.warning(
                f"Process failed with exit code {exit_code} after {timer.elapsed_formatted}",
                extra={"exit_code": exit_code, "pid": run.pid},
            )
            if descriptor.show_output_on_error:
                self._dispatcher.invoke_later(partial(self._on_failure, run))

        return run.result.succeeded

    async def execute_async(
        self,
        descriptor: LaunchDescriptor,
        process_output: Optional[ProcessResult] = None,
    ) -> bool:
        return await asyncio.to_thread(self.execute, descriptor, process_output)

    async def _run_process(self, run: RunContext) -> int:
        command = run.command
        logger.debug(f"Spawning {command.executable} in {command.cwd or '.'}")

        try:
            process = await asyncio.create_subprocess_exec(
                *command.argv,
                cwd=command.cwd,
                env=command.env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            raise SpawnError(
                message=f"Cannot run program {command.executable}: {getattr(e, 'strerror', None) or e}",
                executable=command.executable,
                work_directory=command.cwd,
                os_error=str(e),
                cause=e,
            ) from e

        run.pid = process.pid
        run.started_at = utc_now()
        run.transition(RunState.RUNNING)

        channel: asyncio.Queue = asyncio.Queue()
        listeners: List[ProcessListener] = [
            CapturingListener(run.result),
            HistoryListener(run.history),
        ]

        try:
            await asyncio.gather(
                self._read_stream(process.stdout, StreamKind.STDOUT, channel),
                self._read_stream(process.stderr, StreamKind.STDERR, channel),
                self._pump(channel, listeners, senders=2),
            )
        except BaseException:
            if process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    logger.debug(f"Process {process.pid} already exited")
            await process.wait()
            raise

        return await process.wait()

    async def _read_stream(
        self,
        stream: asyncio.StreamReader,
        stream_kind: StreamKind,
        channel: asyncio.Queue,
    ) -> None:
        decoder = codecs.getincrementaldecoder(OUTPUT_ENCODING)(errors="replace")
        try:
            while True:
                data = await stream.read(self._settings.read_chunk_size)
                text = decoder.decode(data, final=not data)
                if text:
                    channel.put_nowait(OutputChunk(text=text, stream_kind=stream_kind))
                if not data:
                    break
        finally:
            channel.put_nowait(_END_OF_STREAM)

    async def _pump(
        self,
        channel: asyncio.Queue,
        listeners: Sequence[ProcessListener],
        senders: int,
    ) -> None:
        remaining = senders
        while remaining:
            item = await channel.get()
            if item is _END_OF_STREAM:
                remaining -= 1
                continue
            for listener in listeners:
                listener.on_text(item)

    def _on_failure(self, run: RunContext) -> None:
        try:
            self._reporter.report(run)
        finally:
            self._refresher.sync_refresh()
