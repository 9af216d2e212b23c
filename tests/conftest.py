from __future__ import annotations

import shutil

import pytest

from toolexec.builder.dispatcher import ThreadDispatcher
from toolexec.builder.process_runner import ProcessRunner
from toolexec.common.config.settings import Settings


class RecordingPresenter:
    def __init__(self) -> None:
        self.calls = []
        self.chunks = []

    def present(self, view, title, activate, output_filter) -> None:
        self.calls.append(
            {"view": view, "title": title, "activate": activate, "output_filter": output_filter}
        )
        view.add_listener(self.chunks.append)


class RecordingRefresher:
    def __init__(self) -> None:
        self.count = 0

    def sync_refresh(self) -> None:
        self.count += 1


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, toolchain_root=None, toolchain_path=None)


@pytest.fixture
def toolchain_root(tmp_path):
    root = tmp_path / "goroot"
    (root / "bin").mkdir(parents=True)
    return str(root)


@pytest.fixture
def dispatcher():
    with ThreadDispatcher(name="test-dispatch") as d:
        yield d


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def refresher() -> RecordingRefresher:
    return RecordingRefresher()


@pytest.fixture
def runner(dispatcher, presenter, refresher, settings) -> ProcessRunner:
    return ProcessRunner(
        dispatcher=dispatcher,
        presenter=presenter,
        refresher=refresher,
        settings=settings,
    )


@pytest.fixture
def sh() -> str:
    path = shutil.which("sh")
    assert path, "sh is required for process tests"
    return path
