from __future__ import annotations

import asyncio

import pytest

from toolexec.builder.dispatcher import AsyncioDispatcher, ThreadDispatcher, assert_not_dispatch_thread


def test_tasks_run_in_submission_order(dispatcher):
    seen = []
    for i in range(20):
        dispatcher.invoke_later(lambda i=i: seen.append(i))

    assert dispatcher.flush(timeout=5)
    assert seen == list(range(20))


def test_is_dispatch_thread_only_inside_tasks(dispatcher):
    observed = []
    dispatcher.invoke_later(lambda: observed.append(dispatcher.is_dispatch_thread()))
    assert dispatcher.flush(timeout=5)

    assert observed == [True]
    assert dispatcher.is_dispatch_thread() is False


def test_failing_task_does_not_stop_dispatcher(dispatcher):
    seen = []

    def boom():
        raise ValueError("boom")

    dispatcher.invoke_later(boom)
    dispatcher.invoke_later(lambda: seen.append("after"))
    assert dispatcher.flush(timeout=5)
    assert seen == ["after"]


def test_assertion_fires_on_dispatch_thread(dispatcher):
    errors = []

    def check():
        try:
            assert_not_dispatch_thread(dispatcher)
        except AssertionError as e:
            errors.append(e)

    dispatcher.invoke_later(check)
    assert dispatcher.flush(timeout=5)
    assert len(errors) == 1

    assert_not_dispatch_thread(dispatcher)


def test_dispatcher_starts_lazily():
    d = ThreadDispatcher()
    try:
        seen = []
        d.invoke_later(lambda: seen.append(1))
        assert d.flush(timeout=5)
        assert seen == [1]
    finally:
        d.shutdown(timeout=5)


def test_asyncio_dispatcher_detects_loop_thread():
    async def main():
        loop = asyncio.get_running_loop()
        d = AsyncioDispatcher(loop)
        assert d.is_dispatch_thread()
        assert not await asyncio.to_thread(d.is_dispatch_thread)

        done = asyncio.Event()
        await asyncio.to_thread(d.invoke_later, done.set)
        await asyncio.wait_for(done.wait(), timeout=5)

    asyncio.run(main())


def test_asyncio_dispatcher_without_running_loop():
    loop = asyncio.new_event_loop()
    try:
        assert AsyncioDispatcher(loop).is_dispatch_thread() is False
    finally:
        loop.close()
