"""Constants and stat tables for the Firewall Frenzy simulation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Vec2:
    """Immutable helper for expressing 2D positions in logical canvas units."""

    x: float
    y: float


class EnemyType(str, Enum):
    """Malware families that walk the path towards the host."""

    VIRUS = "virus"
    WORM = "worm"
    RANSOMWARE = "ransomware"
    DDOS = "ddos"
    PHISHING = "phishing"


class TowerType(str, Enum):
    """Defences the player can place next to the path."""

    FIREWALL = "firewall"
    IDS = "ids"
    HONEYPOT = "honeypot"
    PATCH = "patch"


@dataclass(frozen=True)
class EnemyStats:
    health: float
    speed: float  # pixels per tick
    damage: int  # base health lost when the enemy reaches the host
    reward: int  # credits granted on kill
    color: str
    glyph: str


@dataclass(frozen=True)
class TowerStats:
    label: str
    cost: int
    range: float
    damage: float
    fire_rate: float  # actions per second
    color: str
    glyph: str
    projectile_glyph: str

    @property
    def cooldown(self) -> float:
        """Seconds that must elapse between two actions."""

        return 1.0 / self.fire_rate


TICKS_PER_SECOND: int = 60
TICK_SECONDS: float = 1.0 / TICKS_PER_SECOND

CANVAS_WIDTH: int = 1000
CANVAS_HEIGHT: int = 600

STARTING_CREDITS: int = 100
MAX_HEALTH: int = 20
PATCH_HEAL_AMOUNT: int = 1

# Interior path anchors move by up to this many pixels on each axis and are
# kept this far away from the canvas edges.
PATH_JITTER: float = 25.0
PATH_MARGIN: float = 20.0

# The first and last anchors sit just off-screen so enemies walk in and out.
BASE_PATH_POINTS: tuple[Vec2, ...] = (
    Vec2(-20.0, 300.0),
    Vec2(150.0, 100.0),
    Vec2(400.0, 200.0),
    Vec2(600.0, 100.0),
    Vec2(800.0, 350.0),
    Vec2(1020.0, 300.0),
)

PROJECTILE_SPEED: float = 0.15  # fraction of the flight covered per tick

ENEMY_STATS: dict[EnemyType, EnemyStats] = {
    EnemyType.VIRUS: EnemyStats(health=1, speed=2.8, damage=1, reward=7, color="#ff6b6b", glyph="V"),
    EnemyType.WORM: EnemyStats(health=2, speed=1.7, damage=2, reward=15, color="#ff9999", glyph="W"),
    EnemyType.RANSOMWARE: EnemyStats(health=4, speed=0.8, damage=5, reward=35, color="#ffcc00", glyph="R"),
    EnemyType.DDOS: EnemyStats(health=1, speed=3.5, damage=1, reward=7, color="#ff3333", glyph="D"),
    EnemyType.PHISHING: EnemyStats(health=1, speed=2.1, damage=1, reward=7, color="#ff99ff", glyph="P"),
}

TOWER_STATS: dict[TowerType, TowerStats] = {
    TowerType.FIREWALL: TowerStats(
        label="Firewall",
        cost=25,
        range=120,
        damage=1,
        fire_rate=0.5,
        color="#ff6b6b",
        glyph="F",
        projectile_glyph="→",
    ),
    TowerType.IDS: TowerStats(
        label="IDS",
        cost=40,
        range=180,
        damage=1.5,
        fire_rate=0.3,
        color="#4a90e2",
        glyph="I",
        projectile_glyph="◆",
    ),
    TowerType.HONEYPOT: TowerStats(
        label="Honeypot",
        cost=35,
        range=100,
        damage=0.5,
        fire_rate=1,
        color="#ffd700",
        glyph="H",
        projectile_glyph="●",
    ),
    TowerType.PATCH: TowerStats(
        label="Patch Server",
        cost=50,
        range=150,
        damage=0,
        fire_rate=0.5,
        color="#00ff00",
        glyph="+",
        projectile_glyph="✨",
    ),
}


def clamp(value: float, minimum: float, maximum: float) -> float:
    """Clamp *value* to the inclusive range [minimum, maximum]."""

    return max(minimum, min(value, maximum))
