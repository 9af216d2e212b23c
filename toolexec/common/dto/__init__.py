from toolexec.common.dto.launch import (
    LaunchDescriptor,
    OutputChunk,
    ProcessResult,
)

__all__ = [
    "LaunchDescriptor",
    "OutputChunk",
    "ProcessResult",
]
