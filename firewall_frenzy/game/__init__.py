"""Simulation core: path, entities, waves and the per-tick step.

Nothing in this package imports a graphical or network dependency, so the
whole game can be driven and tested headless.
"""

from .constants import EnemyType, TowerType, Vec2
from .models import Action, Enemy, GameSnapshot, GameState, Projectile, Tower
from .path import Path, generate_path
from .session import GameSession
from .state import Simulation
from .waves import WAVES, WaveScheduler

__all__ = [
    "Action",
    "Enemy",
    "EnemyType",
    "GameSession",
    "GameSnapshot",
    "GameState",
    "Path",
    "Projectile",
    "Simulation",
    "Tower",
    "TowerType",
    "Vec2",
    "WAVES",
    "WaveScheduler",
    "generate_path",
]
