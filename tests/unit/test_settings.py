from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from toolexec.builder.toolchain import SettingsToolchainLocator, ToolchainContext, resolve_executable
from toolexec.common.config import logging_config, settings as settings_module
from toolexec.common.config.logging_config import get_logging_config, get_run_logger, setup_logging_from_settings
from toolexec.common.config.settings import Settings


def test_log_level_is_normalized():
    assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"


def test_invalid_log_level_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="chatty")


def test_toolchain_variables_must_differ():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, root_env_var="GOROOT", path_env_var="GOROOT")


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("TOOLEXEC_TOOLCHAIN_ROOT", "/opt/go")
    monkeypatch.setenv("TOOLEXEC_DEFAULT_TITLE", "gobuild")
    settings = Settings(_env_file=None)
    assert settings.toolchain_root == "/opt/go"
    assert settings.default_title == "gobuild"


def test_locator_prefers_settings_then_environment():
    context = ToolchainContext(project_name="demo")
    environ = {"GOROOT": "/env/go", "GOPATH": "/env/path"}

    from_env = SettingsToolchainLocator(Settings(_env_file=None), environ=environ)
    assert from_env.root_path(context) == "/env/go"
    assert from_env.search_path(context) == "/env/path"

    configured = SettingsToolchainLocator(Settings(_env_file=None, toolchain_root="/cfg/go"), environ=environ)
    assert configured.root_path(context) == "/cfg/go"


def test_locator_returns_none_when_unconfigured():
    locator = SettingsToolchainLocator(Settings(_env_file=None), environ={})
    context = ToolchainContext(project_name="demo", module_name="api")
    assert locator.root_path(context) is None
    assert locator.search_path(context) is None
    assert context.display_name == "demo:api"


def test_resolve_executable_platform_suffix():
    assert resolve_executable("/opt/go", "go", platform="linux").endswith("/opt/go/bin/go")
    assert resolve_executable("/opt/go", "go", platform="win32").endswith("go.exe")


def test_logging_config_has_json_formatter(tmp_path):
    config = get_logging_config(log_level="DEBUG", log_dir=str(tmp_path))
    assert config["handlers"]["console"]["formatter"] == "json"
    assert config["handlers"]["file"]["filename"].endswith("toolexec.log")
    assert config["loggers"]["toolexec"]["level"] == "DEBUG"


def test_run_logger_stamps_run_context(caplog):
    run_logger = get_run_logger("run-1", "/opt/go/bin/go")
    with caplog.at_level(logging.INFO, logger="toolexec.run"):
        run_logger.info("hello", extra={"exit_code": 3})

    record = caplog.records[-1]
    assert record.run_id == "run-1"
    assert record.executable == "/opt/go/bin/go"
    assert record.exit_code == 3


def test_logging_setup_follows_settings(monkeypatch, tmp_path):
    configured = Settings(_env_file=None, log_level="warning", json_logs=False, log_dir=str(tmp_path))
    calls = []
    monkeypatch.setattr(settings_module, "get_settings", lambda: configured)
    monkeypatch.setattr(logging_config, "setup_logging", lambda **kwargs: calls.append(kwargs))

    setup_logging_from_settings()

    assert calls == [{"log_level": "WARNING", "json_format": False, "log_dir": str(tmp_path)}]
