from typing import Optional, List
from dataclasses import dataclass
import re
from pathlib import Path

from toolexec.common.dto.launch import OutputChunk


@dataclass(frozen=True)
class FileReference:
    path: str
    line: int
    column: Optional[int] = None
    start: int = 0
    end: int = 0

    @property
    def location(self) -> str:
        loc = f"{self.path}:{self.line}"
        if self.column:
            loc += f":{self.column}"
        return loc


class ConsoleFilter:
    REFERENCE_PATTERN = re.compile(
        r"(?P<path>(?:[A-Za-z]:)?[^\s:\"'()]+\.[A-Za-z0-9_]+):(?P<line>\d+)(?::(?P<column>\d+))?"
    )

    def __init__(self, work_directory: Optional[str] = None):
        self._work_directory = Path(work_directory) if work_directory else None

    @property
    def work_directory(self) -> Optional[str]:
        return str(self._work_directory) if self._work_directory else None

    def _resolve(self, raw_path: str) -> str:
        path = Path(raw_path)
        if path.is_absolute() or self._work_directory is None:
            return str(path)
        return str(self._work_directory / path)

    def apply_filter(self, line: str) -> List[FileReference]:
        references = []
        for match in self.REFERENCE_PATTERN.finditer(line):
            column = match.group("column")
            references.append(
                FileReference(
                    path=self._resolve(match.group("path")),
                    line=int(match.group("line")),
                    column=int(column) if column else None,
                    start=match.start(),
                    end=match.end(),
                )
            )
        return references

    def scan(self, chunks: List[OutputChunk]) -> List[FileReference]:
        references = []
        for chunk in chunks:
            for line in chunk.text.splitlines():
                references.extend(self.apply_filter(line))
        return references
