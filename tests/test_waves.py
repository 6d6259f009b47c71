"""Wave table flattening and scheduler guards."""

from __future__ import annotations

import random
from typing import List

import pytest

from firewall_frenzy.game.constants import EnemyType, Vec2
from firewall_frenzy.game.models import Enemy, GameState
from firewall_frenzy.game.waves import (
    WAVES,
    EnemyGroup,
    WaveDefinition,
    WaveScheduler,
    build_spawn_queue,
)

STRAIGHT = [Vec2(0, 300), Vec2(1000, 300)]


@pytest.fixture()
def scheduler() -> WaveScheduler:
    return WaveScheduler(base_points=[Vec2(0, 300), Vec2(500, 300), Vec2(1000, 300)], rng=random.Random(5))


def test_first_wave_spawns_every_half_second() -> None:
    queue = build_spawn_queue(WAVES[0])
    assert [entry.tick for entry in queue] == [0, 30, 60, 90, 120]
    assert {entry.enemy_type for entry in queue} == {EnemyType.VIRUS}


def test_groups_run_side_by_side() -> None:
    queue = build_spawn_queue(WAVES[1])
    viruses = [entry.tick for entry in queue if entry.enemy_type is EnemyType.VIRUS]
    worms = [entry.tick for entry in queue if entry.enemy_type is EnemyType.WORM]
    assert viruses == [0, 18, 36, 54, 72, 90, 108, 126]
    assert worms == [0, 30, 60]


def test_fast_groups_land_on_whole_ticks() -> None:
    queue = build_spawn_queue(WAVES[3])
    ddos = [entry.tick for entry in queue if entry.enemy_type is EnemyType.DDOS]
    assert ddos == [6 * index for index in range(15)]


def test_start_regenerates_path_and_fills_queue(scheduler: WaveScheduler) -> None:
    state = GameState()
    initial_path = scheduler.path
    assert scheduler.start(state)
    assert state.wave == 1
    assert state.wave_active
    assert scheduler.path is not initial_path
    assert len(scheduler.queue) == 5


def test_start_twice_is_a_noop(scheduler: WaveScheduler) -> None:
    state = GameState()
    scheduler.start(state)
    path, queue = scheduler.path, list(scheduler.queue)
    assert not scheduler.start(state)
    assert state.wave == 1
    assert scheduler.path is path
    assert scheduler.queue == queue


def test_start_ignored_after_game_over(scheduler: WaveScheduler) -> None:
    state = GameState(game_over=True)
    assert not scheduler.start(state)
    assert state.wave == 0
    assert not scheduler.queue


def test_wave_number_sticks_at_last_wave(scheduler: WaveScheduler) -> None:
    state = GameState(wave=len(WAVES))
    assert scheduler.start(state)
    assert state.wave == len(WAVES)
    assert len(scheduler.queue) == 18


def test_tick_releases_only_exact_matches(scheduler: WaveScheduler) -> None:
    state = GameState()
    enemies: List[Enemy] = []
    scheduler.start(state)
    scheduler.tick(0, enemies, state)
    assert len(enemies) == 1
    assert enemies[0].path is scheduler.path
    scheduler.tick(29, enemies, state)
    scheduler.tick(31, enemies, state)
    assert len(enemies) == 1
    scheduler.tick(30, enemies, state)
    assert len(enemies) == 2
    assert [entry.tick for entry in scheduler.queue] == [60, 90, 120]


def test_all_enemies_of_a_wave_share_one_path(scheduler: WaveScheduler) -> None:
    state = GameState()
    enemies: List[Enemy] = []
    scheduler.start(state)
    for tick in range(121):
        scheduler.tick(tick, enemies, state)
    assert len(enemies) == 5
    assert all(enemy.path is scheduler.path for enemy in enemies)


def test_wave_ends_when_queue_empty_and_nobody_alive(scheduler: WaveScheduler) -> None:
    state = GameState()
    enemies: List[Enemy] = []
    scheduler.start(state)
    for tick in range(121):
        assert not scheduler.tick(tick, enemies, state)
    for enemy in enemies:
        enemy.alive = False
    assert scheduler.tick(121, enemies, state)
    assert not state.wave_active
    assert not state.game_over


def test_idle_tick_does_not_report_wave_end(scheduler: WaveScheduler) -> None:
    state = GameState()
    assert not scheduler.tick(0, [], state)
    assert not state.game_over


def test_clearing_last_wave_is_victory() -> None:
    single = WaveDefinition("Only", (EnemyGroup(EnemyType.VIRUS, count=1, delay=1.0),), settle_delay=0.0)
    scheduler = WaveScheduler(waves=[single], base_points=STRAIGHT)
    state = GameState()
    enemies: List[Enemy] = []
    scheduler.start(state)
    scheduler.tick(0, enemies, state)
    enemies[0].alive = False
    assert scheduler.tick(1, enemies, state)
    assert state.game_over
    assert state.victory


def test_scheduler_needs_waves() -> None:
    with pytest.raises(ValueError):
        WaveScheduler(waves=[])
