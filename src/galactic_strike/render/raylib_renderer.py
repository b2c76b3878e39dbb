from __future__ import annotations

from dataclasses import dataclass

import pyray as rl

from nova.assets import AssetLoadError
from nova.textures import TextureCache

from .view import DrawOp, SpriteDraw, TextDraw

HUD_TEXT_COLOR = rl.Color(235, 235, 235, 255)


@dataclass(slots=True)
class RaylibRenderer:
    textures: TextureCache
    text_color: rl.Color = HUD_TEXT_COLOR

    def draw_sprite(self, op: SpriteDraw) -> None:
        asset = self.textures.get(op.name)
        if asset is None:
            raise AssetLoadError(op.name, reason="texture not loaded")
        width = float(asset.width) * op.scale.x
        height = float(asset.height) * op.scale.y
        src = rl.Rectangle(0.0, 0.0, float(asset.width), float(asset.height))
        dst = rl.Rectangle(op.position.x, op.position.y, width, height)
        origin = rl.Vector2(width * op.offset.x, height * op.offset.y)
        rl.draw_texture_pro(asset.texture, src, dst, origin, 0.0, rl.WHITE)

    def draw_text(self, op: TextDraw) -> None:
        width = rl.measure_text(op.text, int(op.size))
        x = op.position.x - float(width) * op.offset.x
        y = op.position.y - float(op.size) * op.offset.y
        rl.draw_text(op.text, int(x), int(y), int(op.size), self.text_color)

    def draw(self, ops: list[DrawOp]) -> None:
        for op in ops:
            if isinstance(op, SpriteDraw):
                self.draw_sprite(op)
            else:
                self.draw_text(op)
