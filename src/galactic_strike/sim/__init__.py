from __future__ import annotations

from .clock import FixedStepClock
from .session import GameSession

__all__ = ["FixedStepClock", "GameSession"]
