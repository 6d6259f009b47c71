"""Authoritative simulation for a single Firewall Frenzy match."""

from __future__ import annotations

import random
from collections import deque
from typing import Deque, Dict, List, Optional, Sequence

from loguru import logger

from .constants import (
    BASE_PATH_POINTS,
    MAX_HEALTH,
    TICK_SECONDS,
    TOWER_STATS,
    TowerType,
    Vec2,
)
from .models import Enemy, GameSnapshot, GameState, Projectile, Tower, TowerSelection
from .waves import WAVES, WaveDefinition, WaveScheduler

MAX_PENDING_EVENTS = 50


class Simulation:
    """Everything that makes up one match: counters, entities and the scheduler.

    A restart never resets a simulation in place; the owner builds a new one.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        waves: Sequence[WaveDefinition] = WAVES,
        base_points: Sequence[Vec2] = BASE_PATH_POINTS,
    ) -> None:
        self.random = random.Random(seed)
        self.state = GameState()
        self.scheduler = WaveScheduler(waves, base_points, self.random)
        self.towers: List[Tower] = []
        self.enemies: List[Enemy] = []
        self.projectiles: List[Projectile] = []
        self.tick: int = 0
        self.events: Deque[Dict[str, object]] = deque(maxlen=MAX_PENDING_EVENTS)

    # ------------------------------------------------------------------
    # Simulation loop
    # ------------------------------------------------------------------
    def step(self) -> None:
        """Advance the match by one fixed tick."""

        state = self.state
        if state.game_over:
            return

        if state.health <= 0:
            state.game_over = True
            logger.info("Host compromised on wave {}", state.wave)
            self.add_event("game_over", message="Game Over! Network Compromised!", victory=False)
            return

        if self.scheduler.tick(self.tick, self.enemies, state):
            if state.victory:
                self.add_event("game_over", message="Victory! All waves defeated!", victory=True)
            else:
                self.add_event("wave_cleared", wave=state.wave)

        for enemy in self.enemies:
            enemy.update(state)
        for tower in self.towers:
            projectile = tower.update(self.enemies, state, TICK_SECONDS)
            if projectile is not None:
                self.projectiles.append(projectile)
        for projectile in self.projectiles:
            projectile.update()

        self.enemies = [enemy for enemy in self.enemies if enemy.alive]
        self.projectiles = [projectile for projectile in self.projectiles if projectile.alive]
        self.tick += 1

    # ------------------------------------------------------------------
    # Player entry points
    # ------------------------------------------------------------------
    def start_wave(self) -> bool:
        """Kick off the next wave unless one is running or the match is over."""

        if not self.scheduler.start(self.state):
            return False
        self.tick = 0
        definition = self.scheduler.definition(self.state.wave)
        self.add_event("wave_started", wave=self.state.wave, name=definition.name if definition else None)
        return True

    def place_tower(self, x: float, y: float, tower_type: TowerType | str) -> bool:
        """Buy a tower at ``(x, y)``; refused without side effects when too poor."""

        tower_type = TowerType(tower_type)
        cost = TOWER_STATS[tower_type].cost
        if self.state.credits < cost:
            logger.debug("Refused {} at ({:.0f}, {:.0f}): {} credits", tower_type.value, x, y, self.state.credits)
            self.add_event("message", message="Not enough credits!")
            return False

        self.towers.append(Tower(x, y, tower_type))
        self.state.credits -= cost
        self.state.selection = None
        self.add_event("message", message=f"{tower_type.value} placed!")
        return True

    def select_tower(self, tower_type: TowerType | str) -> None:
        tower_type = TowerType(tower_type)
        stats = TOWER_STATS[tower_type]
        self.state.selection = TowerSelection(tower_type)
        self.add_event("message", message=f"{stats.label} selected - Click to place (${stats.cost})")

    def move_preview(self, x: float, y: float) -> None:
        selection = self.state.selection
        if selection is None:
            return
        selection.x = x
        selection.y = y

    # ------------------------------------------------------------------
    # Events and snapshots
    # ------------------------------------------------------------------
    def add_event(self, event_type: str, **data: object) -> None:
        self.events.append({"type": event_type, **data})

    def drain_events(self) -> List[Dict[str, object]]:
        events = list(self.events)
        self.events.clear()
        return events

    def snapshot(self) -> GameSnapshot:
        state = self.state
        definition = self.scheduler.definition(state.wave)
        return GameSnapshot(
            tick=self.tick,
            credits=state.credits,
            health=max(0, state.health),
            max_health=MAX_HEALTH,
            wave=state.wave,
            wave_name=definition.name if definition else None,
            total_waves=self.scheduler.total_waves,
            wave_active=state.wave_active,
            game_over=state.game_over,
            victory=state.victory,
            path=self.scheduler.path.to_list(),
            towers=[tower.serialise() for tower in self.towers],
            enemies=[enemy.serialise() for enemy in self.enemies],
            projectiles=[projectile.serialise() for projectile in self.projectiles],
            selection=state.selection.serialise() if state.selection else None,
            catalogue=[
                {
                    "type": tower_type.value,
                    "label": stats.label,
                    "cost": stats.cost,
                    "range": stats.range,
                    "color": stats.color,
                    "glyph": stats.glyph,
                }
                for tower_type, stats in TOWER_STATS.items()
            ],
        )


__all__ = ["Simulation"]
