"""Wave definitions and the scheduler that turns them into spawns."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from loguru import logger

from .constants import BASE_PATH_POINTS, TICKS_PER_SECOND, EnemyType, Vec2
from .models import Enemy, GameState
from .path import Path, generate_path


@dataclass(frozen=True)
class EnemyGroup:
    """``count`` enemies of one type, released ``delay`` seconds apart."""

    enemy_type: EnemyType
    count: int
    delay: float


@dataclass(frozen=True)
class WaveDefinition:
    name: str
    groups: tuple[EnemyGroup, ...]
    settle_delay: float


@dataclass(frozen=True)
class SpawnEntry:
    enemy_type: EnemyType
    tick: int


WAVES: tuple[WaveDefinition, ...] = (
    WaveDefinition(
        name="Home Wi-Fi",
        groups=(EnemyGroup(EnemyType.VIRUS, count=5, delay=0.5),),
        settle_delay=1.0,
    ),
    WaveDefinition(
        name="Small Business",
        groups=(
            EnemyGroup(EnemyType.VIRUS, count=8, delay=0.3),
            EnemyGroup(EnemyType.WORM, count=3, delay=0.5),
        ),
        settle_delay=1.0,
    ),
    WaveDefinition(
        name="Corporate Network",
        groups=(
            EnemyGroup(EnemyType.VIRUS, count=10, delay=0.2),
            EnemyGroup(EnemyType.WORM, count=5, delay=0.4),
            EnemyGroup(EnemyType.RANSOMWARE, count=2, delay=1.0),
        ),
        settle_delay=0.8,
    ),
    WaveDefinition(
        name="Mixed Threats",
        groups=(
            EnemyGroup(EnemyType.DDOS, count=15, delay=0.1),
            EnemyGroup(EnemyType.PHISHING, count=3, delay=0.6),
        ),
        settle_delay=0.5,
    ),
)


def build_spawn_queue(wave: WaveDefinition) -> List[SpawnEntry]:
    """Flatten the groups of ``wave`` into tick-stamped spawn entries.

    Every group starts at tick 0, so groups release their enemies side by
    side rather than one after another.
    """

    queue: List[SpawnEntry] = []
    for group in wave.groups:
        for index in range(group.count):
            queue.append(SpawnEntry(group.enemy_type, round(index * group.delay * TICKS_PER_SECOND)))
    return queue


class WaveScheduler:
    """Owns the current path and the queue of enemies still to be released."""

    def __init__(
        self,
        waves: Sequence[WaveDefinition] = WAVES,
        base_points: Sequence[Vec2] = BASE_PATH_POINTS,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not waves:
            raise ValueError("at least one wave definition is required")
        self.waves = tuple(waves)
        self.base_points = tuple(base_points)
        self.rng = rng or random.Random()
        self.queue: List[SpawnEntry] = []
        self.path: Path = generate_path(self.base_points, self.rng)

    @property
    def total_waves(self) -> int:
        return len(self.waves)

    def definition(self, wave: int) -> Optional[WaveDefinition]:
        """Definition for the 1-based ``wave`` number, if there is one."""

        if 1 <= wave <= len(self.waves):
            return self.waves[wave - 1]
        return None

    def start(self, state: GameState) -> bool:
        """Begin the next wave; returns ``False`` when the request is ignored."""

        if state.wave_active or state.game_over:
            return False
        state.wave = min(state.wave + 1, self.total_waves)
        state.wave_active = True
        self.path = generate_path(self.base_points, self.rng)
        wave = self.waves[state.wave - 1]
        self.queue = build_spawn_queue(wave)
        logger.info("Wave {} ({}) started with {} spawns", state.wave, wave.name, len(self.queue))
        return True

    def tick(self, current_tick: int, enemies: List[Enemy], state: GameState) -> bool:
        """Release the enemies due on ``current_tick`` into ``enemies``.

        Entries only match their exact tick. Returns ``True`` when this call
        ended the running wave.
        """

        due = [entry for entry in self.queue if entry.tick == current_tick]
        if due:
            self.queue = [entry for entry in self.queue if entry.tick != current_tick]
            enemies.extend(Enemy(entry.enemy_type, self.path) for entry in due)

        if not state.wave_active or self.queue or any(enemy.alive for enemy in enemies):
            return False

        state.wave_active = False
        if state.wave >= self.total_waves:
            state.game_over = True
            state.victory = True
        logger.info("Wave {} cleared", state.wave)
        return True


__all__ = [
    "EnemyGroup",
    "SpawnEntry",
    "WAVES",
    "WaveDefinition",
    "WaveScheduler",
    "build_spawn_queue",
]
