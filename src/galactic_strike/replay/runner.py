from __future__ import annotations

import warnings
from dataclasses import dataclass

from ..sim.fingerprint import world_fingerprint
from ..world import World
from .types import Replay


class ReplayGameVersionWarning(UserWarning):
    """The replay was recorded by a different build; playback may diverge."""


@dataclass(frozen=True, slots=True)
class ReplayRunResult:
    ticks: int
    score: int
    max_score: int
    kills: int
    player_hp: float
    match_resets: int
    fingerprint: str
    expected_fingerprint: str | None
    version_note: str | None = None

    @property
    def matches(self) -> bool | None:
        """`None` when the replay carries no fingerprint to compare against."""
        if self.expected_fingerprint is None:
            return None
        return self.fingerprint == self.expected_fingerprint


def world_for_replay(replay: Replay) -> World:
    header = replay.header
    return World.build(
        width=int(header.width),
        height=int(header.height),
        sizes=header.sizes(),
        seed=int(header.seed),
    )


def run_replay(
    replay: Replay,
    *,
    warn_version: bool = True,
    current_version: str | None = None,
) -> ReplayRunResult:
    """Rebuild the world from the header and feed it every recorded tick.

    A build mismatch is reported on the result and, unless `warn_version` is off,
    emitted as a `ReplayGameVersionWarning` before playback starts.
    """
    version_note = replay.game_version_note(current_version)
    if warn_version and version_note is not None:
        warnings.warn(f"{version_note}; playback may diverge", category=ReplayGameVersionWarning, stacklevel=2)
    world = world_for_replay(replay)
    dt_tick = 1.0 / float(replay.header.tick_rate)
    for tick_index in range(replay.tick_count):
        world.step(replay.input_at(tick_index), dt_tick)
    return ReplayRunResult(
        ticks=replay.tick_count,
        score=int(world.score),
        max_score=int(world.max_score),
        kills=int(world.kills_total),
        player_hp=float(world.player.hp),
        match_resets=int(world.match_resets),
        fingerprint=world_fingerprint(world),
        expected_fingerprint=replay.final_fingerprint,
        version_note=version_note,
    )
