from typing import Optional, Mapping, Protocol
from dataclasses import dataclass
import os
import sys
from pathlib import Path

from toolexec.common.config.settings import Settings, get_settings
from toolexec.common.config.logging_config import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class ToolchainContext:
    project_name: str
    base_directory: Optional[str] = None
    module_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.module_name:
            return f"{self.project_name}:{self.module_name}"
        return self.project_name


class ToolchainLocator(Protocol):
    def root_path(self, context: ToolchainContext) -> Optional[str]:
        ...

    def search_path(self, context: ToolchainContext) -> Optional[str]:
        ...


class SettingsToolchainLocator:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self._settings = settings or get_settings()
        self._environ = environ if environ is not None else os.environ

    def root_path(self, context: ToolchainContext) -> Optional[str]:
        root = self._settings.toolchain_root or self._environ.get(self._settings.root_env_var)
        if not root:
            logger.debug(f"No toolchain root configured for {context.display_name}")
            return None
        return root

    def search_path(self, context: ToolchainContext) -> Optional[str]:
        search_path = self._settings.toolchain_path or self._environ.get(self._settings.path_env_var)
        return search_path or None


def executable_file_name(name: str, platform: Optional[str] = None) -> str:
    platform = platform or sys.platform
    if platform.startswith("win"):
        return f"{name}.exe"
    return name


def resolve_executable(
    root_path: str,
    executable_name: Optional[str] = None,
    platform: Optional[str] = None,
) -> str:
    name = executable_name or get_settings().executable_name
    executable = Path(root_path) / "bin" / executable_file_name(name, platform)
    return str(executable.absolute())
