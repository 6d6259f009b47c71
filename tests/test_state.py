"""Regression tests for the per-tick simulation step."""

from __future__ import annotations

import pytest

from firewall_frenzy.game.constants import MAX_HEALTH, EnemyType, TowerType, Vec2
from firewall_frenzy.game.models import Enemy, Tower
from firewall_frenzy.game.state import Simulation

STRAIGHT = [Vec2(0, 300), Vec2(1000, 300)]


@pytest.fixture()
def sim() -> Simulation:
    return Simulation(seed=1, base_points=STRAIGHT)


def run_until(sim: Simulation, predicate, limit: int = 2000) -> int:
    for step in range(limit):
        if predicate():
            return step
        sim.step()
    raise AssertionError("condition never reached")


def test_initial_state(sim: Simulation) -> None:
    assert sim.state.credits == 100
    assert sim.state.health == MAX_HEALTH
    assert sim.state.wave == 0
    assert not sim.state.wave_active
    assert sim.scheduler.path.length == pytest.approx(1000)


def test_idle_steps_only_advance_the_clock(sim: Simulation) -> None:
    for _ in range(10):
        sim.step()
    assert sim.tick == 10
    assert not sim.enemies
    assert not sim.state.game_over


def test_first_wave_spawn_timing_and_end(sim: Simulation) -> None:
    assert sim.start_wave()
    assert sim.tick == 0
    sim.step()
    assert len(sim.enemies) == 1
    for _ in range(29):
        sim.step()
    assert len(sim.enemies) == 1
    sim.step()
    assert len(sim.enemies) == 2
    for _ in range(90):
        sim.step()
    assert len(sim.enemies) == 5
    assert not sim.scheduler.queue

    run_until(sim, lambda: not sim.state.wave_active)
    assert sim.state.health == MAX_HEALTH - 5
    assert not sim.state.game_over
    assert any(event["type"] == "wave_cleared" for event in sim.drain_events())


def test_start_wave_twice_without_ticking(sim: Simulation) -> None:
    assert sim.start_wave()
    queue = list(sim.scheduler.queue)
    path = sim.scheduler.path
    assert not sim.start_wave()
    assert sim.state.wave == 1
    assert sim.scheduler.queue == queue
    assert sim.scheduler.path is path


def test_start_wave_resets_tick_counter(sim: Simulation) -> None:
    for _ in range(42):
        sim.step()
    sim.start_wave()
    assert sim.tick == 0


def test_firewall_kills_virus_and_pays_before_projectile_lands(sim: Simulation) -> None:
    assert sim.place_tower(500, 330, TowerType.FIREWALL)
    assert sim.state.credits == 75
    sim.start_wave()
    run_until(sim, lambda: sim.state.credits != 75)
    assert sim.state.credits == 82
    assert len(sim.projectiles) == 1
    assert sim.projectiles[0].alive
    assert sim.projectiles[0].progress < 1
    assert sim.towers[0].active
    assert len(sim.enemies) == 4


def test_enemies_move_before_towers_fire(sim: Simulation) -> None:
    sim.place_tower(500, 300, TowerType.FIREWALL)
    sim.towers[0].cooldown_timer = 10.0
    enemy = Enemy(EnemyType.RANSOMWARE, sim.scheduler.path, total_progress=379.5)
    sim.enemies.append(enemy)
    sim.step()
    assert enemy.total_progress == pytest.approx(380.3)
    assert enemy.health == 3
    assert sim.projectiles[0].target.x == pytest.approx(380.3, rel=1e-6)


def test_tower_kill_just_before_host_prevents_damage(sim: Simulation) -> None:
    sim.place_tower(990, 300, TowerType.FIREWALL)
    sim.towers[0].cooldown_timer = 10.0
    enemy = Enemy(EnemyType.VIRUS, sim.scheduler.path, total_progress=990.0)
    sim.enemies.append(enemy)
    sim.step()
    assert sim.state.health == MAX_HEALTH
    assert sim.state.credits == 82


def test_enemy_reaching_host_is_not_shot(sim: Simulation) -> None:
    sim.place_tower(995, 300, TowerType.FIREWALL)
    sim.towers[0].cooldown_timer = 10.0
    enemy = Enemy(EnemyType.VIRUS, sim.scheduler.path, total_progress=999.0)
    sim.enemies.append(enemy)
    sim.step()
    assert sim.state.health == MAX_HEALTH - 1
    assert sim.state.credits == 75
    assert not sim.projectiles


def test_health_depletion_ends_game_on_next_tick(sim: Simulation) -> None:
    path = sim.scheduler.path
    sim.enemies.append(Enemy(EnemyType.RANSOMWARE, path, total_progress=999.5))
    sim.step()
    assert sim.state.health == 15

    sim.enemies.extend(Enemy(EnemyType.RANSOMWARE, path, total_progress=999.5) for _ in range(3))
    sim.step()
    assert sim.state.health == 0
    assert not sim.state.game_over

    sim.start_wave()
    tick = sim.tick
    sim.step()
    assert sim.state.game_over
    assert not sim.state.victory
    assert sim.tick == tick
    assert not sim.enemies
    events = sim.drain_events()
    assert events[-1] == {"type": "game_over", "message": "Game Over! Network Compromised!", "victory": False}


def test_game_over_is_sticky(sim: Simulation) -> None:
    sim.state.game_over = True
    sim.enemies.append(Enemy(EnemyType.VIRUS, sim.scheduler.path))
    sim.step()
    assert sim.tick == 0
    assert sim.enemies[0].total_progress == 0
    assert not sim.start_wave()


def test_placement_refused_when_too_poor(sim: Simulation) -> None:
    sim.state.credits = 30
    assert not sim.place_tower(100, 100, TowerType.IDS)
    assert sim.state.credits == 30
    assert not sim.towers
    assert sim.drain_events() == [{"type": "message", "message": "Not enough credits!"}]
    assert sim.place_tower(100, 100, TowerType.FIREWALL)
    assert sim.state.credits == 5


def test_credits_never_go_negative_across_purchases(sim: Simulation) -> None:
    for _ in range(10):
        sim.place_tower(100, 100, TowerType.HONEYPOT)
    assert sim.state.credits == 30
    assert len(sim.towers) == 2


def test_placement_rejects_unknown_type(sim: Simulation) -> None:
    with pytest.raises(ValueError):
        sim.place_tower(0, 0, "laser")


def test_patch_server_scenario(sim: Simulation) -> None:
    sim.select_tower(TowerType.PATCH)
    assert sim.place_tower(600, 300, TowerType.PATCH)
    assert sim.state.credits == 50
    assert sim.state.selection is None

    sim.state.health = 15
    for _ in range(200):
        sim.step()
    assert sim.state.health == 15

    sim.start_wave()
    sim.step()
    assert sim.state.health == 16
    for _ in range(125):
        sim.step()
    assert sim.state.health == 17
    assert not sim.projectiles
    assert all(enemy.health == enemy.stats.health for enemy in sim.enemies)


def test_clearing_every_wave_is_victory() -> None:
    sim = Simulation(seed=4, base_points=STRAIGHT)
    for x in range(60, 1000, 40):
        sim.towers.append(Tower(x, 280, TowerType.HONEYPOT))
        sim.towers.append(Tower(x, 320, TowerType.HONEYPOT))
    for wave in range(1, 5):
        assert sim.start_wave()
        run_until(sim, lambda: not sim.state.wave_active, limit=5000)
        assert sim.state.wave == wave
    assert sim.state.game_over
    assert sim.state.victory
    assert sim.state.health > 0
    messages = [event.get("message") for event in sim.drain_events()]
    assert "Victory! All waves defeated!" in messages


def test_snapshot_clamps_health_and_exposes_view(sim: Simulation) -> None:
    sim.select_tower(TowerType.FIREWALL)
    sim.move_preview(120, 80)
    sim.state.health = -3
    snapshot = sim.snapshot()
    assert snapshot.health == 0
    assert sim.state.health == -3
    assert snapshot.selection == {"type": "firewall", "x": 120, "y": 80}
    assert snapshot.path == [{"x": 0, "y": 300}, {"x": 1000, "y": 300}]
    assert snapshot.total_waves == 4
    assert snapshot.wave_name is None
    assert [entry["type"] for entry in snapshot.catalogue] == ["firewall", "ids", "honeypot", "patch"]
    assert [entry["cost"] for entry in snapshot.catalogue] == [25, 40, 35, 50]


def test_snapshot_reports_enemy_health_fraction(sim: Simulation) -> None:
    sim.start_wave()
    sim.step()
    sim.enemies[0].health = 0.5
    enemy = sim.snapshot().enemies[0]
    assert enemy["health_fraction"] == pytest.approx(0.5)
    assert enemy["type"] == "virus"
    assert sim.snapshot().wave_name == "Home Wi-Fi"
