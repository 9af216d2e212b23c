from typing import Optional, Dict, Any, Sequence

from toolexec.common.exceptions.base_exceptions import (
    NonRetryableException,
    ErrorCode,
)


class ExecutionError(NonRetryableException):
    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.EXECUTION_FAILED,
        executable: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        requires_manual_intervention: bool = False,
    ):
        details = details or {}
        if executable:
            details["executable"] = executable
        super().__init__(
            message,
            error_code=error_code,
            details=details,
            cause=cause,
            requires_manual_intervention=requires_manual_intervention,
        )
        self.executable = executable


class ConfigurationError(ExecutionError):
    def __init__(
        self,
        message: str,
        executable: Optional[str] = None,
        missing_variables: Optional[Sequence[str]] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        details = details or {}
        if missing_variables:
            details["missing_variables"] = list(missing_variables)
        super().__init__(
            message=message,
            error_code=ErrorCode.EXECUTION_CONFIGURATION_ERROR,
            executable=executable,
            details=details,
            cause=cause,
            requires_manual_intervention=True,
        )
        self.missing_variables = list(missing_variables or [])


class SpawnError(ExecutionError):
    def __init__(
        self,
        message: str,
        executable: Optional[str] = None,
        work_directory: Optional[str] = None,
        os_error: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        details = details or {}
        if work_directory:
            details["work_directory"] = work_directory
        if os_error:
            details["os_error"] = os_error[:500]
        super().__init__(
            message=message,
            error_code=ErrorCode.EXECUTION_SPAWN_ERROR,
            executable=executable,
            details=details,
            cause=cause,
        )
        self.work_directory = work_directory
        self.os_error = os_error


class HistoryStateError(NonRetryableException):
    def __init__(
        self,
        message: str,
        frozen: Optional[bool] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if frozen is not None:
            details["frozen"] = frozen
        super().__init__(
            message=message,
            error_code=ErrorCode.HISTORY_STATE_ERROR,
            details=details,
        )
        self.frozen = frozen


class ResultStateError(NonRetryableException):
    def __init__(
        self,
        message: str,
        exit_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if exit_code is not None:
            details["exit_code"] = exit_code
        super().__init__(
            message=message,
            error_code=ErrorCode.RESULT_STATE_ERROR,
            details=details,
        )
        self.exit_code = exit_code
