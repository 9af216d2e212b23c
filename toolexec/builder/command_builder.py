from typing import Optional, Dict, List, Mapping
import shlex

from toolexec.builder.process_runner import ProcessRunner
from toolexec.builder.toolchain import ToolchainContext, ToolchainLocator, SettingsToolchainLocator
from toolexec.common.config.logging_config import get_logger
from toolexec.common.dto.launch import LaunchDescriptor, ProcessResult


logger = get_logger(__name__)


class CommandBuilder:
    def __init__(self, runner: Optional[ProcessRunner] = None):
        self._runner = runner
        self._executable_path: Optional[str] = None
        self._parameters: List[str] = []
        self._work_directory: Optional[str] = None
        self._extra_environment: Dict[str, str] = {}
        self._pass_parent_environment = True
        self._toolchain_root: Optional[str] = None
        self._search_path: Optional[str] = None
        self._show_output_on_error = False
        self._presentable_name: Optional[str] = None
        self._process_output: Optional[ProcessResult] = None

    @classmethod
    def for_context(
        cls,
        context: ToolchainContext,
        locator: Optional[ToolchainLocator] = None,
        runner: Optional[ProcessRunner] = None,
    ) -> "CommandBuilder":
        locator = locator or SettingsToolchainLocator()
        builder = (
            cls(runner)
            .with_toolchain_root(locator.root_path(context))
            .with_search_path(locator.search_path(context))
        )
        if context.base_directory:
            builder.with_work_directory(context.base_directory)
        return builder

    def with_presentable_name(self, presentable_name: Optional[str]) -> "CommandBuilder":
        self._presentable_name = presentable_name
        return self

    def with_executable_path(self, executable_path: Optional[str]) -> "CommandBuilder":
        self._executable_path = executable_path
        return self

    def with_work_directory(self, work_directory: Optional[str]) -> "CommandBuilder":
        self._work_directory = work_directory
        return self

    def with_toolchain_root(self, toolchain_root: Optional[str]) -> "CommandBuilder":
        self._toolchain_root = toolchain_root
        return self

    def with_search_path(self, search_path: Optional[str]) -> "CommandBuilder":
        self._search_path = search_path
        return self

    def with_process_output(self, process_output: ProcessResult) -> "CommandBuilder":
        self._process_output = process_output
        return self

    def with_extra_environment(self, environment: Mapping[str, str]) -> "CommandBuilder":
        self._extra_environment.update(environment)
        return self

    def with_pass_parent_environment(self, pass_parent_environment: bool) -> "CommandBuilder":
        self._pass_parent_environment = pass_parent_environment
        return self

    def add_parameter_string(self, parameter_string: str) -> "CommandBuilder":
        self._parameters.extend(shlex.split(parameter_string))
        return self

    def add_parameters(self, *parameters: str) -> "CommandBuilder":
        self._parameters.extend(parameters)
        return self

    def show_output_on_error(self) -> "CommandBuilder":
        self._show_output_on_error = True
        return self

    def build(self) -> LaunchDescriptor:
        return LaunchDescriptor(
            executable_path=self._executable_path,
            arguments=tuple(self._parameters),
            working_directory=self._work_directory,
            extra_env=dict(self._extra_environment),
            inherit_parent_env=self._pass_parent_environment,
            root_path=self._toolchain_root,
            secondary_path=self._search_path,
            show_output_on_error=self._show_output_on_error,
            presentable_name=self._presentable_name,
        )

    def _get_runner(self) -> ProcessRunner:
        if self._runner is None:
            logger.debug("No runner supplied, using a default ProcessRunner")
            self._runner = ProcessRunner()
        return self._runner

    def execute(self) -> bool:
        return self._get_runner().execute(self.build(), self._process_output)

    async def execute_async(self) -> bool:
        return await self._get_runner().execute_async(self.build(), self._process_output)
