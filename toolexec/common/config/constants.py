from enum import Enum
from typing import Final


class StreamKind(str, Enum):
    STDOUT = "stdout"
    STDERR = "stderr"
    SYSTEM = "system"


class RunState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.SUCCEEDED, RunState.FAILED)


TOOLCHAIN_ROOT_VAR: Final[str] = "GOROOT"
TOOLCHAIN_PATH_VAR: Final[str] = "GOPATH"
TOOLCHAIN_EXECUTABLE: Final[str] = "go"
DEFAULT_PRESENTABLE_NAME: Final[str] = "go"

LOCALE_VARIABLES: Final[tuple] = ("LC_ALL", "LC_CTYPE", "LANG")
DEFAULT_UTF8_LOCALE: Final[str] = "en_US.UTF-8"

OUTPUT_ENCODING: Final[str] = "utf-8"
DEFAULT_READ_CHUNK_SIZE: Final[int] = 4096
