from __future__ import annotations

from pathlib import Path

import pytest

from nova import config as nova_config


def test_galactic_cfg_roundtrip_default() -> None:
    data = nova_config.default_galactic_cfg_data()
    blob = nova_config.GALACTIC_CFG_STRUCT.build(data)

    assert len(blob) == nova_config.GALACTIC_CFG_SIZE
    parsed = nova_config.GALACTIC_CFG_STRUCT.parse(blob)
    assert nova_config.GALACTIC_CFG_STRUCT.build(parsed) == blob


def test_ensure_galactic_cfg_creates_defaults(tmp_path: Path) -> None:
    cfg = nova_config.ensure_galactic_cfg(tmp_path)

    assert cfg.path == tmp_path / nova_config.GALACTIC_CFG_NAME
    assert cfg.path.stat().st_size == nova_config.GALACTIC_CFG_SIZE
    assert (cfg.screen_width, cfg.screen_height) == (650, 700)
    assert cfg.fps_limit == 60
    assert cfg.sfx_volume == 1.0
    assert cfg.rng_seed == 0
    assert not cfg.sound_disable
    assert cfg.keybinds() == (nova_config.KEY_LEFT, nova_config.KEY_RIGHT, nova_config.KEY_SPACE)


def test_ensure_galactic_cfg_clamps_out_of_range_values(tmp_path: Path) -> None:
    data = nova_config.default_galactic_cfg_data()
    data["screen_width"] = 100
    data["screen_height"] = 50
    data["fps_limit"] = 0
    path = tmp_path / nova_config.GALACTIC_CFG_NAME
    path.write_bytes(nova_config.GALACTIC_CFG_STRUCT.build(data))

    cfg = nova_config.ensure_galactic_cfg(tmp_path)

    assert (cfg.screen_width, cfg.screen_height) == (650, 700)
    assert cfg.fps_limit == 60
    reloaded = nova_config.load_galactic_cfg(path)
    assert reloaded.screen_width == 650


def test_ensure_galactic_cfg_backfills_zero_keybinds(tmp_path: Path) -> None:
    data = nova_config.default_galactic_cfg_data()
    for key in ("keybind_left", "keybind_right", "keybind_fire"):
        data[key] = 0
    path = tmp_path / nova_config.GALACTIC_CFG_NAME
    path.write_bytes(nova_config.GALACTIC_CFG_STRUCT.build(data))

    cfg = nova_config.ensure_galactic_cfg(tmp_path)

    assert cfg.keybinds() == (263, 262, 32)


def test_load_galactic_cfg_rejects_wrong_size(tmp_path: Path) -> None:
    path = tmp_path / nova_config.GALACTIC_CFG_NAME
    path.write_bytes(b"\x00" * 12)

    with pytest.raises(ValueError, match="unexpected size"):
        nova_config.ensure_galactic_cfg(tmp_path)


def test_sfx_volume_setter_clamps(tmp_path: Path) -> None:
    cfg = nova_config.ensure_galactic_cfg(tmp_path)

    cfg.sfx_volume = 3.0
    assert cfg.sfx_volume == 1.0
    cfg.sfx_volume = -1.0
    assert cfg.sfx_volume == 0.0


def test_config_summary_lists_typed_values(tmp_path: Path) -> None:
    cfg = nova_config.ensure_galactic_cfg(tmp_path)
    cfg.rng_seed = 1234
    cfg.save()

    summary = nova_config.config_summary(nova_config.load_galactic_cfg(cfg.path))

    assert summary["rng_seed"] == 1234
    assert summary["screen_width"] == 650
    assert summary["windowed"] is True
    assert summary["keybind_fire"] == 32
