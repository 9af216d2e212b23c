from toolexec.common.exceptions.base_exceptions import (
    ToolexecBaseException,
    ErrorCode,
    NonRetryableException,
)
from toolexec.common.exceptions.execution_exceptions import (
    ExecutionError,
    ConfigurationError,
    SpawnError,
    HistoryStateError,
    ResultStateError,
)

__all__ = [
    "ToolexecBaseException",
    "ErrorCode",
    "NonRetryableException",
    "ExecutionError",
    "ConfigurationError",
    "SpawnError",
    "HistoryStateError",
    "ResultStateError",
]
