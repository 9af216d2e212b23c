from typing import Optional, Dict, List, Tuple
import shlex

from pydantic import BaseModel, Field, ConfigDict, PrivateAttr, field_validator

from toolexec.common.config.constants import StreamKind
from toolexec.common.exceptions.execution_exceptions import ResultStateError


class LaunchDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    executable_path: Optional[str] = Field(
        default=None,
        description="Explicit executable; resolved from the toolchain root when absent"
    )
    arguments: Tuple[str, ...] = Field(default_factory=tuple)
    working_directory: Optional[str] = None
    extra_env: Dict[str, str] = Field(default_factory=dict)
    inherit_parent_env: bool = Field(default=True)
    root_path: Optional[str] = Field(default=None, description="Toolchain installation root")
    secondary_path: Optional[str] = Field(default=None, description="Toolchain module search path")
    show_output_on_error: bool = Field(default=False)
    presentable_name: Optional[str] = None

    @field_validator("extra_env")
    @classmethod
    def validate_extra_env(cls, v: Dict[str, str]) -> Dict[str, str]:
        for key in v:
            if not key or "=" in key:
                raise ValueError(f"Invalid environment variable name: {key!r}")
        return dict(v)

    @property
    def has_root_path(self) -> bool:
        return bool(self.root_path)

    def command_line(self, executable: Optional[str] = None) -> str:
        exe = executable or self.executable_path or "<unresolved>"
        return shlex.join([exe, *self.arguments])


class OutputChunk(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    stream_kind: StreamKind

    @property
    def is_output(self) -> bool:
        return self.stream_kind in (StreamKind.STDOUT, StreamKind.STDERR)


class ProcessResult(BaseModel):
    exit_code: Optional[int] = None
    captured_output: List[OutputChunk] = Field(default_factory=list)

    _finalized: bool = PrivateAttr(default=False)

    @property
    def succeeded(self) -> bool:
        return self._finalized and self.exit_code == 0

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    @property
    def stdout(self) -> str:
        return "".join(c.text for c in self.captured_output if c.stream_kind == StreamKind.STDOUT)

    @property
    def stderr(self) -> str:
        return "".join(c.text for c in self.captured_output if c.stream_kind == StreamKind.STDERR)

    def append(self, chunk: OutputChunk) -> None:
        if self._finalized:
            raise ResultStateError("Cannot capture output after the process result was finalized",
                                   exit_code=self.exit_code)
        self.captured_output.append(chunk)

    def reset(self) -> None:
        self.exit_code = None
        self.captured_output = []
        self._finalized = False

    def finalize(self, exit_code: int) -> None:
        if self._finalized:
            raise ResultStateError("Process result already finalized", exit_code=self.exit_code)
        self.exit_code = exit_code
        self._finalized = True
