from __future__ import annotations

import datetime as dt
import os
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import Any

import msgspec

TRACE_ENV = "GALACTIC_TRACE"
FLOAT_DIGITS = 4


class TraceRecord(msgspec.Struct, forbid_unknown_fields=True):
    """One JSON line of a gameplay trace, keyed by the world tick it happened on."""

    tick: int
    event: str
    fields: dict[str, Any] = msgspec.field(default_factory=dict)


@dataclass(slots=True)
class TraceWriter:
    path: Path
    written: int = 0
    last_tick: int = 0
    lock: Lock = field(default_factory=Lock, repr=False)

    def write(self, record: TraceRecord) -> None:
        line = msgspec.json.encode(record) + b"\n"
        with self.lock:
            with self.path.open("ab") as handle:
                handle.write(line)
            self.written += 1
            self.last_tick = max(self.last_tick, int(record.tick))


_WRITER: TraceWriter | None = None


def _round_floats(value: object) -> object:
    if isinstance(value, float):
        return round(value, FLOAT_DIGITS)
    if isinstance(value, dict):
        return {str(key): _round_floats(item) for key, item in value.items()}
    return value


def trace_requested(flag: bool = False) -> bool:
    """`--trace` on the command line or GALACTIC_TRACE=1 in the environment."""
    return bool(flag) or os.environ.get(TRACE_ENV) == "1"


def trace_writer() -> TraceWriter | None:
    return _WRITER


def trace_enabled() -> bool:
    return _WRITER is not None


def init_trace_log(*, base_dir: Path, seed: int, width: int, height: int, build_id: str) -> Path:
    global _WRITER
    timestamp = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%dT%H%M%S.%fZ")
    path = base_dir / "logs" / f"trace-pid{os.getpid()}-{timestamp}.jsonl"
    path.parent.mkdir(parents=True, exist_ok=True)

    _WRITER = TraceWriter(path)
    trace_event(0, "init", seed=int(seed), width=int(width), height=int(height), build_id=str(build_id))
    return path


def trace_event(tick: int, event: str, **fields: object) -> None:
    writer = _WRITER
    if writer is None:
        return
    payload = {key: _round_floats(fields[key]) for key in sorted(fields)}
    writer.write(TraceRecord(tick=int(tick), event=str(event).strip(), fields=payload))


def close_trace_log(*, summary: dict[str, object] | None = None) -> Path | None:
    """Write the closing record (with the final world summary, if given) and stop tracing."""
    global _WRITER
    writer = _WRITER
    if writer is None:
        return None
    if summary is not None:
        fields = dict(summary)
        tick = int(fields.pop("tick", writer.last_tick))  # type: ignore[call-overload]
        trace_event(tick, "close", records=writer.written, **fields)
    _WRITER = None
    return writer.path


def read_trace(path: Path) -> list[TraceRecord]:
    decoder = msgspec.json.Decoder(TraceRecord)
    return [decoder.decode(line) for line in path.read_bytes().splitlines() if line.strip()]


__all__ = [
    "TRACE_ENV",
    "TraceRecord",
    "TraceWriter",
    "close_trace_log",
    "init_trace_log",
    "read_trace",
    "trace_enabled",
    "trace_event",
    "trace_requested",
    "trace_writer",
]
