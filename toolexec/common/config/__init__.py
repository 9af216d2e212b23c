from toolexec.common.config.settings import Settings, get_settings
from toolexec.common.config.logging_config import setup_logging, get_logger, get_run_logger
from toolexec.common.config.constants import (
    StreamKind,
    RunState,
    TOOLCHAIN_ROOT_VAR,
    TOOLCHAIN_PATH_VAR,
    DEFAULT_PRESENTABLE_NAME,
)

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "get_run_logger",
    "StreamKind",
    "RunState",
    "TOOLCHAIN_ROOT_VAR",
    "TOOLCHAIN_PATH_VAR",
    "DEFAULT_PRESENTABLE_NAME",
]
