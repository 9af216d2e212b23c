from typing import Optional, Dict, Mapping, Tuple
from dataclasses import dataclass
import os
import sys

from toolexec.builder.toolchain import resolve_executable
from toolexec.common.config.constants import LOCALE_VARIABLES, DEFAULT_UTF8_LOCALE
from toolexec.common.config.settings import Settings, get_settings
from toolexec.common.config.logging_config import get_logger
from toolexec.common.dto.launch import LaunchDescriptor
from toolexec.common.exceptions.execution_exceptions import ConfigurationError


logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandLine:
    argv: Tuple[str, ...]
    env: Dict[str, str]
    cwd: Optional[str] = None

    @property
    def executable(self) -> str:
        return self.argv[0]


def _validate_root(descriptor: LaunchDescriptor, settings: Settings) -> str:
    if not descriptor.has_root_path:
        logger.error("Toolchain root is not set; refusing to spawn process")
        raise ConfigurationError(
            "Toolchain root is not set or its home path is empty",
            executable=descriptor.executable_path,
            missing_variables=[settings.root_env_var],
        )
    return descriptor.root_path


def apply_locale_if_mac(env: Dict[str, str], platform: Optional[str] = None) -> None:
    platform = platform or sys.platform
    if platform != "darwin":
        return
    if any(env.get(name) for name in LOCALE_VARIABLES):
        return
    env["LC_CTYPE"] = DEFAULT_UTF8_LOCALE


def resolve_environment(
    descriptor: LaunchDescriptor,
    parent_env: Optional[Mapping[str, str]] = None,
    settings: Optional[Settings] = None,
    platform: Optional[str] = None,
) -> Dict[str, str]:
    settings = settings or get_settings()
    root_path = _validate_root(descriptor, settings)

    env: Dict[str, str] = {}
    if descriptor.inherit_parent_env:
        env.update(os.environ if parent_env is None else parent_env)

    env.update(descriptor.extra_env)
    env[settings.root_env_var] = root_path
    env[settings.path_env_var] = descriptor.secondary_path or ""

    apply_locale_if_mac(env, platform)
    return env


def create_command_line(
    descriptor: LaunchDescriptor,
    parent_env: Optional[Mapping[str, str]] = None,
    settings: Optional[Settings] = None,
) -> CommandLine:
    settings = settings or get_settings()
    env = resolve_environment(descriptor, parent_env=parent_env, settings=settings)

    executable = descriptor.executable_path or resolve_executable(
        descriptor.root_path, settings.executable_name
    )

    return CommandLine(
        argv=(executable, *descriptor.arguments),
        env=env,
        cwd=descriptor.working_directory,
    )
