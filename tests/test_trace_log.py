from __future__ import annotations

from pathlib import Path

import pytest

from nova.geom import Vec2

from galactic_strike import trace_log as trace
from galactic_strike.actors import create_player_bullet
from galactic_strike.input_state import InputState
from galactic_strike.world import World


@pytest.fixture(autouse=True)
def _closed_trace_log():
    trace.close_trace_log()
    yield
    trace.close_trace_log()


def _start(tmp_path: Path, *, seed: int = 1) -> Path:
    return trace.init_trace_log(base_dir=tmp_path, seed=seed, width=650, height=700, build_id="test")


def test_trace_log_is_off_by_default(tmp_path: Path) -> None:
    trace.trace_event(0, "kill", row=0)

    assert trace.trace_enabled() is False
    assert not (tmp_path / "logs").exists()


def test_trace_requested_by_flag_or_environment(monkeypatch) -> None:
    monkeypatch.delenv(trace.TRACE_ENV, raising=False)
    assert trace.trace_requested() is False
    assert trace.trace_requested(True) is True

    monkeypatch.setenv(trace.TRACE_ENV, "1")
    assert trace.trace_requested() is True


def test_init_writes_tick_zero_record(tmp_path: Path) -> None:
    path = _start(tmp_path, seed=7)

    assert path.parent == tmp_path / "logs"
    assert path.suffix == ".jsonl"
    writer = trace.trace_writer()
    assert writer is not None and writer.path == path
    (record,) = trace.read_trace(path)
    assert record.tick == 0
    assert record.event == "init"
    assert record.fields["seed"] == 7
    assert record.fields["build_id"] == "test"


def test_event_records_carry_tick_and_rounded_floats(tmp_path: Path) -> None:
    path = _start(tmp_path)

    trace.trace_event(3, "player_hit", hp=2.0 / 3.0, hits=1)

    record = trace.read_trace(path)[-1]
    assert record.tick == 3
    assert record.event == "player_hit"
    assert record.fields == {"hits": 1, "hp": 0.6667}


def test_world_traces_kills_on_their_tick(tmp_path: Path) -> None:
    path = _start(tmp_path)
    world = World.build(seed=1)
    world.tick_index = 4
    world.player_bullets.append(create_player_bullet(world.sizes, Vec2(0.0, -205.0)))

    world.step(InputState())

    kills = [record for record in trace.read_trace(path) if record.event == "kill"]
    assert len(kills) == 1
    assert kills[0].tick == 4
    assert kills[0].fields["tag"] == "ENEMY_C"
    assert kills[0].fields["score"] == 150


def test_close_writes_world_summary(tmp_path: Path) -> None:
    path = _start(tmp_path)
    world = World.build(seed=1)
    for _ in range(5):
        world.step(InputState())

    assert trace.close_trace_log(summary=world.summary()) == path

    record = trace.read_trace(path)[-1]
    assert record.event == "close"
    assert record.tick == 5
    assert record.fields["score"] == world.score
    assert record.fields["enemies"] == len(world.enemies)
    assert record.fields["records"] >= 1
    assert set(record.fields["shields"]) == {str(slot) for slot in world.shield_slots}
    assert trace.trace_enabled() is False


def test_close_stops_writing(tmp_path: Path) -> None:
    path = _start(tmp_path)
    trace.close_trace_log()

    trace.trace_event(1, "kill", row=0)

    assert [record.event for record in trace.read_trace(path)] == ["init"]
