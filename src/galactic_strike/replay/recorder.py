from __future__ import annotations

from ..input_state import InputState
from .types import FORMAT_VERSION, Replay, ReplayHeader


class ReplayRecorder:
    def __init__(self, header: ReplayHeader, *, version: int = FORMAT_VERSION) -> None:
        if int(version) != FORMAT_VERSION:
            raise ValueError(f"unsupported replay version: {version}")
        self._version = int(version)
        self._header = header
        self._inputs: list[int] = []

    @property
    def header(self) -> ReplayHeader:
        return self._header

    @property
    def tick_index(self) -> int:
        return len(self._inputs)

    def record_tick(self, inputs: InputState) -> int:
        """Record a single simulation tick worth of inputs.

        Returns the tick index that was recorded.
        """

        tick_index = len(self._inputs)
        self._inputs.append(inputs.pack())
        return tick_index

    def finish(self, *, final_fingerprint: str | None = None) -> Replay:
        return Replay(
            v=self._version,
            header=self._header,
            inputs=list(self._inputs),
            final_fingerprint=final_fingerprint,
        )
