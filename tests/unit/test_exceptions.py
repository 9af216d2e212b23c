from __future__ import annotations

from toolexec.common.exceptions import (
    ConfigurationError,
    ErrorCode,
    ExecutionError,
    SpawnError,
)


def test_configuration_error_shape():
    err = ConfigurationError("root missing", missing_variables=["GOROOT"])
    assert isinstance(err, ExecutionError)
    assert err.error_code == ErrorCode.EXECUTION_CONFIGURATION_ERROR
    assert err.requires_manual_intervention is True
    assert str(err) == "[E1001] root missing"
    assert err.to_dict()["details"] == {"missing_variables": ["GOROOT"]}


def test_spawn_error_details_and_context():
    cause = FileNotFoundError(2, "No such file or directory")
    err = SpawnError("cannot run", executable="/nope", work_directory="/tmp", os_error=str(cause), cause=cause)
    err.with_context(attempt=1)

    data = err.to_dict()
    assert data["exception_type"] == "SpawnError"
    assert data["details"]["executable"] == "/nope"
    assert data["details"]["work_directory"] == "/tmp"
    assert data["details"]["attempt"] == 1
    assert err.cause is cause
