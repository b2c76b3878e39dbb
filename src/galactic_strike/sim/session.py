from __future__ import annotations

from dataclasses import dataclass, field

from ..actors import SpriteSizes
from ..constants import TICK_RATE, WINDOW_HEIGHT, WINDOW_WIDTH
from ..input_state import InputState
from ..replay.recorder import ReplayRecorder
from ..world import TickEvents, World
from .clock import FixedStepClock


@dataclass(slots=True)
class GameSession:
    """Fixed-step driver: turns host frame deltas into whole world ticks."""

    world: World
    clock: FixedStepClock = field(default_factory=FixedStepClock)
    inputs: InputState = field(default_factory=InputState)
    recorder: ReplayRecorder | None = None
    ticks_run: int = 0

    @classmethod
    def build(
        cls,
        *,
        seed: int,
        width: int = WINDOW_WIDTH,
        height: int = WINDOW_HEIGHT,
        sizes: SpriteSizes | None = None,
        tick_rate: int = TICK_RATE,
        recorder: ReplayRecorder | None = None,
    ) -> GameSession:
        world = World.build(width=int(width), height=int(height), sizes=sizes, seed=int(seed))
        return cls(world=world, clock=FixedStepClock(tick_rate=int(tick_rate)), recorder=recorder)

    def step(self) -> TickEvents:
        """Run exactly one tick with the current input latches."""
        if self.recorder is not None:
            self.recorder.record_tick(self.inputs)
        events = self.world.step(self.inputs, self.clock.dt_tick)
        self.ticks_run += 1
        return events

    def advance(self, dt_frame: float) -> list[TickEvents]:
        """Run every tick the host frame delta made due, in order."""
        return [self.step() for _ in self.clock.advance(dt_frame)]
