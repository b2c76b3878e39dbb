from __future__ import annotations

from .view import SpriteDraw, TextDraw, build_draw_list, world_to_screen

__all__ = ["SpriteDraw", "TextDraw", "build_draw_list", "world_to_screen"]
