from toolexec.builder.command_builder import CommandBuilder
from toolexec.builder.console_filter import ConsoleFilter, FileReference
from toolexec.builder.dispatcher import Dispatcher, ThreadDispatcher, AsyncioDispatcher, get_default_dispatcher
from toolexec.builder.environment_resolver import CommandLine, create_command_line, resolve_environment
from toolexec.builder.failure_reporter import (
    FailureReporter,
    ProcessView,
    ResultsPresenter,
    ConsoleResultsPresenter,
    FileSystemRefresher,
    NullFileSystemRefresher,
)
from toolexec.builder.output_history import HistoryLog, CapturingListener, HistoryListener
from toolexec.builder.process_runner import ProcessRunner, RunContext
from toolexec.builder.toolchain import (
    ToolchainContext,
    ToolchainLocator,
    SettingsToolchainLocator,
    resolve_executable,
)

__all__ = [
    "CommandBuilder",
    "ConsoleFilter",
    "FileReference",
    "Dispatcher",
    "ThreadDispatcher",
    "AsyncioDispatcher",
    "get_default_dispatcher",
    "CommandLine",
    "create_command_line",
    "resolve_environment",
    "FailureReporter",
    "ProcessView",
    "ResultsPresenter",
    "ConsoleResultsPresenter",
    "FileSystemRefresher",
    "NullFileSystemRefresher",
    "HistoryLog",
    "CapturingListener",
    "HistoryListener",
    "ProcessRunner",
    "RunContext",
    "ToolchainContext",
    "ToolchainLocator",
    "SettingsToolchainLocator",
    "resolve_executable",
]
