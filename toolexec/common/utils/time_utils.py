from datetime import datetime, timedelta, timezone
from typing import Optional, Union
import time


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_duration(
    duration: Union[timedelta, float, int],
    precision: int = 2,
) -> str:
    if isinstance(duration, timedelta):
        total_seconds = duration.total_seconds()
    else:
        total_seconds = float(duration)

    if total_seconds < 0:
        return "0s"

    hours = int(total_seconds // 3600)
    remaining = total_seconds % 3600

    minutes = int(remaining // 60)
    seconds = remaining % 60

    parts = []

    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    if seconds > 0 or not parts:
        if seconds == int(seconds):
            parts.append(f"{int(seconds)}s")
        else:
            parts.append(f"{seconds:.{precision}f}s")

    return " ".join(parts)


class Timer:
    def __init__(self):
        self._start_time: Optional[float] = None
        self._end_time: Optional[float] = None

    def start(self) -> "Timer":
        self._start_time = time.perf_counter()
        self._end_time = None
        return self

    def stop(self) -> float:
        if self._start_time is None:
            raise RuntimeError("Timer was never started")
        self._end_time = time.perf_counter()
        return self.elapsed

    @property
    def elapsed(self) -> float:
        if self._start_time is None:
            return 0.0
        end = self._end_time or time.perf_counter()
        return end - self._start_time

    @property
    def elapsed_formatted(self) -> str:
        return format_duration(self.elapsed)

    def __enter__(self) -> "Timer":
        return self.start()

    def __exit__(self, *args) -> None:
        self.stop()
