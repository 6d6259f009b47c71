"""Tick driver that owns the simulation and routes player input into it."""

from __future__ import annotations

import math
from typing import Callable, Dict, List, Optional

from loguru import logger

from .constants import CANVAS_HEIGHT, CANVAS_WIDTH, TowerType
from .models import Action, GameSnapshot
from .state import Simulation


class GameSession:
    """Single owner of the running :class:`Simulation`.

    Front-ends call :meth:`tick` once per frame and :meth:`handle` between
    frames. Restarting swaps in a brand new simulation in one assignment.
    """

    def __init__(self, factory: Optional[Callable[[], Simulation]] = None) -> None:
        self._factory = factory or Simulation
        self.simulation = self._factory()
        self._carried_events: List[Dict[str, object]] = []

    def tick(self) -> None:
        self.simulation.step()

    def snapshot(self) -> GameSnapshot:
        return self.simulation.snapshot()

    def drain_events(self) -> List[Dict[str, object]]:
        events = self._carried_events + self.simulation.drain_events()
        self._carried_events = []
        return events

    def restart(self) -> None:
        self.simulation = self._factory()
        self._carried_events = [{"type": "message", "message": "Game restarted!"}]
        logger.info("Match restarted")

    # ------------------------------------------------------------------
    # Action handling
    # ------------------------------------------------------------------
    def handle(self, action: Action) -> bool:
        """Apply a front-end action; unknown or malformed actions are ignored."""

        handler = getattr(self, f"_handle_{action.type}", None)
        if handler is None:
            logger.debug("Ignoring unknown action {!r}", action.type)
            return False
        return bool(handler(action.payload))

    def _handle_select_tower(self, payload: Dict[str, object]) -> bool:
        try:
            tower_type = TowerType(str(payload.get("tower_type", "")).lower())
        except ValueError:
            return False
        self.simulation.select_tower(tower_type)
        return True

    def _handle_pointer_move(self, payload: Dict[str, object]) -> bool:
        position = _parse_position(payload)
        if position is None or self.simulation.state.selection is None:
            return False
        self.simulation.move_preview(*position)
        return True

    def _handle_pointer_down(self, payload: Dict[str, object]) -> bool:
        state = self.simulation.state
        if state.wave_active or state.selection is None:
            return False
        position = _parse_position(payload)
        if position is None:
            return False
        return self.simulation.place_tower(position[0], position[1], state.selection.tower_type)

    def _handle_start_wave(self, payload: Dict[str, object]) -> bool:
        return self.simulation.start_wave()

    def _handle_restart(self, payload: Dict[str, object]) -> bool:
        self.restart()
        return True


def _parse_position(payload: Dict[str, object]) -> Optional[tuple[float, float]]:
    try:
        x = float(payload["x"])
        y = float(payload["y"])
    except (KeyError, TypeError, ValueError):
        return None
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    if 0 <= x <= CANVAS_WIDTH and 0 <= y <= CANVAS_HEIGHT:
        return x, y
    return None


__all__ = ["GameSession"]
