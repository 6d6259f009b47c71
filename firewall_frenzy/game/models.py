"""Entities and value objects shared by the simulation and its front-ends."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .constants import (
    ENEMY_STATS,
    MAX_HEALTH,
    PATCH_HEAL_AMOUNT,
    PROJECTILE_SPEED,
    STARTING_CREDITS,
    TICK_SECONDS,
    TOWER_STATS,
    EnemyStats,
    EnemyType,
    TowerStats,
    TowerType,
    Vec2,
)
from .path import Path


@dataclass
class TowerSelection:
    """Tower type picked in the toolbar, plus where its preview hovers."""

    tower_type: TowerType
    x: float = 0.0
    y: float = 0.0

    def serialise(self) -> Dict[str, object]:
        return {"type": self.tower_type.value, "x": self.x, "y": self.y}


@dataclass
class GameState:
    """Counters the player sees on the HUD.

    ``health`` is allowed to drop below zero; only the snapshot clamps it.
    """

    credits: int = STARTING_CREDITS
    health: int = MAX_HEALTH
    wave: int = 0
    wave_active: bool = False
    game_over: bool = False
    victory: bool = False
    selection: Optional[TowerSelection] = None


@dataclass(eq=False)
class Enemy:
    """A piece of malware walking along a path.

    Its position is never stored: it is derived from ``total_progress`` every
    time it is needed.
    """

    enemy_type: EnemyType
    path: Path
    total_progress: float = 0.0
    alive: bool = True
    health: float = field(init=False)

    def __post_init__(self) -> None:
        self.enemy_type = EnemyType(self.enemy_type)
        self.health = self.stats.health

    @property
    def stats(self) -> EnemyStats:
        return ENEMY_STATS[self.enemy_type]

    @property
    def speed(self) -> float:
        return self.stats.speed

    @property
    def damage(self) -> int:
        return self.stats.damage

    @property
    def reward(self) -> int:
        return self.stats.reward

    def update(self, state: GameState) -> None:
        """Advance one tick, hurting the host if the end of the path is reached."""

        if not self.alive:
            return
        self.total_progress += self.speed
        if self.total_progress >= self.path.length:
            self.alive = False
            state.health -= self.damage

    def position(self) -> Vec2:
        return self.path.point_at(self.total_progress)

    def take_damage(self, amount: float, state: GameState) -> None:
        if not self.alive:
            return
        self.health -= amount
        if self.health <= 0:
            self.alive = False
            state.credits += self.reward

    def serialise(self) -> Dict[str, object]:
        position = self.position()
        return {
            "type": self.enemy_type.value,
            "x": position.x,
            "y": position.y,
            "health": self.health,
            "health_fraction": max(0.0, self.health / self.stats.health),
            "color": self.stats.color,
            "glyph": self.stats.glyph,
        }


@dataclass(eq=False)
class Projectile:
    """Cosmetic shot flying towards where its target stood when fired."""

    start: Vec2
    target: Vec2
    tower_type: TowerType
    progress: float = 0.0
    speed: float = PROJECTILE_SPEED
    alive: bool = True

    def update(self) -> None:
        self.progress += self.speed
        if self.progress >= 1:
            self.alive = False

    def position(self) -> Vec2:
        return Vec2(
            self.start.x + (self.target.x - self.start.x) * self.progress,
            self.start.y + (self.target.y - self.start.y) * self.progress,
        )

    def serialise(self) -> Dict[str, object]:
        position = self.position()
        stats = TOWER_STATS[self.tower_type]
        return {
            "x": position.x,
            "y": position.y,
            "start_x": self.start.x,
            "start_y": self.start.y,
            "color": stats.color,
            "glyph": stats.projectile_glyph,
        }


@dataclass(eq=False)
class Tower:
    """Stationary defence placed by the player."""

    x: float
    y: float
    tower_type: TowerType
    cooldown_timer: float = 0.0
    active: bool = False

    def __post_init__(self) -> None:
        self.tower_type = TowerType(self.tower_type)

    @property
    def stats(self) -> TowerStats:
        return TOWER_STATS[self.tower_type]

    @property
    def range(self) -> float:
        return self.stats.range

    @property
    def damage(self) -> float:
        return self.stats.damage

    @property
    def fire_rate(self) -> float:
        return self.stats.fire_rate

    @property
    def ready(self) -> bool:
        return self.cooldown_timer >= self.stats.cooldown

    def update(
        self, enemies: Iterable[Enemy], state: GameState, dt: float = TICK_SECONDS
    ) -> Optional[Projectile]:
        """Run one tick of the tower and return the projectile it fired, if any."""

        self.cooldown_timer += dt
        self.active = False

        if self.tower_type is TowerType.PATCH:
            if state.wave_active and self.ready and state.health < MAX_HEALTH:
                state.health = min(state.health + PATCH_HEAL_AMOUNT, MAX_HEALTH)
                self.cooldown_timer = 0.0
                self.active = True
            return None

        target = self.find_target(enemies)
        if target is None or not self.ready:
            return None

        projectile = Projectile(start=Vec2(self.x, self.y), target=target.position(), tower_type=self.tower_type)
        target.take_damage(self.damage, state)
        self.cooldown_timer = 0.0
        self.active = True
        return projectile

    def find_target(self, enemies: Iterable[Enemy]) -> Optional[Enemy]:
        """Nearest living enemy strictly inside range; the first one wins ties."""

        closest: Optional[Enemy] = None
        closest_distance = self.range
        for enemy in enemies:
            if not enemy.alive:
                continue
            position = enemy.position()
            distance = math.hypot(position.x - self.x, position.y - self.y)
            if distance < closest_distance:
                closest = enemy
                closest_distance = distance
        return closest

    def serialise(self) -> Dict[str, object]:
        return {
            "type": self.tower_type.value,
            "x": self.x,
            "y": self.y,
            "range": self.range,
            "active": self.active,
            "color": self.stats.color,
            "glyph": self.stats.glyph,
        }


@dataclass
class GameSnapshot:
    """Read-only view of a match handed to the presentation layer."""

    tick: int
    credits: int
    health: int
    max_health: int
    wave: int
    wave_name: Optional[str]
    total_waves: int
    wave_active: bool
    game_over: bool
    victory: bool
    path: List[Dict[str, float]] = field(default_factory=list)
    towers: List[Dict[str, object]] = field(default_factory=list)
    enemies: List[Dict[str, object]] = field(default_factory=list)
    projectiles: List[Dict[str, object]] = field(default_factory=list)
    selection: Optional[Dict[str, object]] = None
    catalogue: List[Dict[str, object]] = field(default_factory=list)


@dataclass
class Action:
    """Input relayed by a front-end, such as a click or a toolbar button."""

    type: str
    payload: Dict[str, object] = field(default_factory=dict)
