from toolexec.common.utils.time_utils import (
    utc_now,
    format_duration,
    Timer,
)

__all__ = [
    "utc_now",
    "format_duration",
    "Timer",
]
