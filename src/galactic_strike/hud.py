from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from nova.geom import Vec2

SCORE_TEXT_SIZE = 24
LIFE_TEXT_SIZE = 24
SHIELD_TEXT_SIZE = 20


class HudTag(Enum):
    SCORE = "score"
    MAX_SCORE = "max_score"
    PLAYER_LIFE = "player_life"
    SHIELD_HP_1 = "shield_hp_1"
    SHIELD_HP_2 = "shield_hp_2"
    SHIELD_HP_3 = "shield_hp_3"


SHIELD_HP_TAGS: tuple[HudTag, ...] = (HudTag.SHIELD_HP_1, HudTag.SHIELD_HP_2, HudTag.SHIELD_HP_3)


@dataclass(slots=True)
class HudText:
    text: str
    size: int
    position: Vec2


def _hp_text(hp: float) -> str:
    return str(int(hp))


def score_position(window: Vec2) -> Vec2:
    return Vec2(-window.x / 2.6, -window.y / 2.4)


def max_score_position(window: Vec2) -> Vec2:
    return Vec2(-window.x / 2.6, -window.y / 2.25)


def player_life_position(window: Vec2) -> Vec2:
    return Vec2(-window.x / 2.6, window.y / 2.25)


def shield_x_offsets(window: Vec2) -> tuple[float, float, float]:
    return (-window.x / 3.5, 0.0, window.x / 3.5)


def shield_hp_position(window: Vec2, index: int) -> Vec2:
    return Vec2(shield_x_offsets(window)[index], window.y / 4.5)


@dataclass(slots=True)
class Hud:
    """HUD text entries keyed by tag; shield entries vanish with their shield."""

    window: Vec2
    texts: dict[HudTag, HudText] = field(default_factory=dict)

    def get(self, tag: HudTag) -> HudText | None:
        return self.texts.get(tag)

    def text(self, tag: HudTag) -> str | None:
        entry = self.texts.get(tag)
        return entry.text if entry is not None else None

    def set_score(self, score: int) -> None:
        self.texts[HudTag.SCORE] = HudText(f"Score: {int(score)}", SCORE_TEXT_SIZE, score_position(self.window))

    def set_max_score(self, max_score: int) -> None:
        self.texts[HudTag.MAX_SCORE] = HudText(
            f"Max score: {int(max_score)}",
            SCORE_TEXT_SIZE,
            max_score_position(self.window),
        )

    def set_player_life(self, hp: float) -> None:
        self.texts[HudTag.PLAYER_LIFE] = HudText(
            f"Life: {_hp_text(hp)}",
            LIFE_TEXT_SIZE,
            player_life_position(self.window),
        )

    def set_shield_hp(self, index: int, hp: float) -> None:
        tag = SHIELD_HP_TAGS[index]
        if hp <= 0.0:
            self.texts.pop(tag, None)
            return
        self.texts[tag] = HudText(_hp_text(hp), SHIELD_TEXT_SIZE, shield_hp_position(self.window, index))

    def refresh(self, *, score: int, max_score: int, player_hp: float, shield_hps: list[float]) -> None:
        self.set_score(score)
        self.set_max_score(max_score)
        self.set_player_life(player_hp)
        for index, hp in enumerate(shield_hps[: len(SHIELD_HP_TAGS)]):
            self.set_shield_hp(index, hp)
