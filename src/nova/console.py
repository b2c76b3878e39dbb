from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

CONSOLE_LOG_NAME = "console.log"
MAX_CONSOLE_LINES = 0x1000


def runtime_path(base_dir: Path, name: str) -> Path:
    return base_dir / name


@dataclass(slots=True)
class ConsoleLog:
    """In-memory status log, appended to `console.log` on flush."""

    base_dir: Path
    lines: list[str] = field(default_factory=list)
    flushed_index: int = 0
    echo: bool = False

    def log(self, message: str) -> None:
        self.lines.append(message)
        if self.echo:
            print(message)
        if len(self.lines) > MAX_CONSOLE_LINES:
            overflow = len(self.lines) - MAX_CONSOLE_LINES
            del self.lines[:overflow]
            self.flushed_index = max(0, self.flushed_index - overflow)

    def flush(self) -> None:
        if self.flushed_index >= len(self.lines):
            return
        path = runtime_path(self.base_dir, CONSOLE_LOG_NAME)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            for line in self.lines[self.flushed_index :]:
                handle.write(line.rstrip() + "\n")
        self.flushed_index = len(self.lines)

    def tail(self, count: int = 10) -> list[str]:
        if count <= 0:
            return []
        return list(self.lines[-int(count) :])
