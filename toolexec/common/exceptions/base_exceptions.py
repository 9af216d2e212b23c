from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ErrorCode(str, Enum):
    UNKNOWN = "E0000"

    EXECUTION_FAILED = "E1000"
    EXECUTION_CONFIGURATION_ERROR = "E1001"
    EXECUTION_SPAWN_ERROR = "E1002"

    STATE_ERROR = "E2000"
    HISTORY_STATE_ERROR = "E2001"
    RESULT_STATE_ERROR = "E2002"

    VALIDATION_ERROR = "E7000"


class ToolexecBaseException(Exception):
    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

    def __str__(self) -> str:
        return f"[{self.error_code.value}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code}, "
            f"details={self.details})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "exception_type": self.__class__.__name__,
        }

    def with_context(self, **kwargs: Any) -> "ToolexecBaseException":
        self.details.update(kwargs)
        return self


class NonRetryableException(ToolexecBaseException):
    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        requires_manual_intervention: bool = False,
    ):
        super().__init__(message, error_code, details, cause)
        self.requires_manual_intervention = requires_manual_intervention
