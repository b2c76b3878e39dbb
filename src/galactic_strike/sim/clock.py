from __future__ import annotations

from dataclasses import dataclass

from ..constants import TICK_RATE, TIMER_EPSILON

DEFAULT_MAX_FRAME_DT = 0.25


@dataclass(slots=True)
class FixedStepClock:
    """Host frame time in, whole simulation tick indices out.

    `tick_index` counts every tick handed out so far; `dropped` is the frame
    time discarded by the `max_frame_dt` clamp after a stall.
    """

    tick_rate: int = TICK_RATE
    max_frame_dt: float = DEFAULT_MAX_FRAME_DT
    accum: float = 0.0
    tick_index: int = 0
    dropped: float = 0.0

    def __post_init__(self) -> None:
        if int(self.tick_rate) <= 0:
            raise ValueError(f"tick_rate must be positive, got {self.tick_rate}")
        if float(self.max_frame_dt) <= 0.0:
            raise ValueError(f"max_frame_dt must be positive, got {self.max_frame_dt}")
        self.tick_rate = int(self.tick_rate)
        self.max_frame_dt = float(self.max_frame_dt)

    @property
    def dt_tick(self) -> float:
        return 1.0 / float(self.tick_rate)

    @property
    def sim_time(self) -> float:
        """Seconds of simulation handed out so far."""
        return self.tick_index / float(self.tick_rate)

    def advance(self, dt_frame: float) -> range:
        """Bank a host frame delta and return the indices of the ticks now due."""
        first = self.tick_index
        dt_frame = float(dt_frame)
        if dt_frame <= 0.0:
            return range(first, first)
        if dt_frame > self.max_frame_dt:
            self.dropped += dt_frame - self.max_frame_dt
            dt_frame = self.max_frame_dt

        self.accum += dt_frame
        ticks = int((self.accum + TIMER_EPSILON) / self.dt_tick)
        if ticks > 0:
            self.accum = max(self.accum - self.dt_tick * ticks, 0.0)
            self.tick_index += ticks
        return range(first, self.tick_index)
