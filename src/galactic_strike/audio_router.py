from __future__ import annotations

from dataclasses import dataclass

from nova.audio import AudioState, play_sfx

from .world import TickEvents


@dataclass(slots=True)
class AudioRouter:
    """Forwards the sound names a tick emitted to the audio collaborator."""

    audio: AudioState | None = None

    def route(self, events: TickEvents) -> int:
        for name in events.sfx:
            play_sfx(self.audio, name)
        return len(events.sfx)

    def route_all(self, ticks: list[TickEvents]) -> int:
        return sum(self.route(events) for events in ticks)
