from __future__ import annotations

import io

from toolexec.builder.environment_resolver import CommandLine
from toolexec.builder.failure_reporter import ConsoleResultsPresenter, FailureReporter, ProcessView
from toolexec.builder.process_runner import RunContext
from toolexec.common.config.constants import StreamKind
from toolexec.common.dto.launch import LaunchDescriptor, OutputChunk, ProcessResult


def _run(exit_code, show_output_on_error=True, name=None, chunks=()):
    descriptor = LaunchDescriptor(
        root_path="/opt/go",
        executable_path="/opt/go/bin/go",
        arguments=("build", "./..."),
        working_directory="/work/demo",
        show_output_on_error=show_output_on_error,
        presentable_name=name,
    )
    run = RunContext(
        descriptor=descriptor,
        command=CommandLine(argv=("/opt/go/bin/go", "build", "./..."), env={}, cwd="/work/demo"),
        result=ProcessResult(),
        pid=4242,
    )
    for chunk in chunks:
        run.history.append(chunk)
        run.result.append(chunk)
    run.result.finalize(exit_code)
    run.history.freeze()
    return run


def test_console_presenter_writes_transcript_and_references(settings):
    stream = io.StringIO()
    chunks = [
        OutputChunk(text="# example.com/demo\n", stream_kind=StreamKind.STDERR),
        OutputChunk(text="./main.go:7:2: undefined: x\n", stream_kind=StreamKind.STDERR),
    ]
    view = FailureReporter(ConsoleResultsPresenter(stream), settings).report(
        _run(2, name="go build", chunks=chunks)
    )

    text = stream.getvalue()
    assert text.startswith("==== go build ====\n/opt/go/bin/go build ./...\n")
    assert "./main.go:7:2: undefined: x\n" in text
    assert "-> /work/demo/main.go:7:2" in text
    assert text.endswith("Process finished with exit code 2\n")
    assert view.closed
    assert view.pid == 4242


def test_report_skips_successful_runs(settings):
    stream = io.StringIO()
    reporter = FailureReporter(ConsoleResultsPresenter(stream), settings)
    assert reporter.report(_run(0)) is None
    assert stream.getvalue() == ""


def test_report_skips_when_output_not_requested(settings):
    stream = io.StringIO()
    reporter = FailureReporter(ConsoleResultsPresenter(stream), settings)
    assert reporter.report(_run(1, show_output_on_error=False)) is None
    assert stream.getvalue() == ""


def test_view_releases_listeners_on_scope_exit():
    seen = []
    with ProcessView(pid=1, command_line="go vet", exit_code=1) as view:
        view.add_listener(seen.append)
        view.notify_text_available("a", StreamKind.STDOUT)

    view.notify_text_available("b", StreamKind.STDOUT)
    assert [c.text for c in seen] == ["a"]
    assert [c.text for c in view.transcript] == ["a"]
