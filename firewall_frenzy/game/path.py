"""The polyline malware walks along, and the generator that jitters it."""

from __future__ import annotations

import math
import random
from typing import List, Optional, Sequence, Tuple

from .constants import (
    BASE_PATH_POINTS,
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    PATH_JITTER,
    PATH_MARGIN,
    Vec2,
    clamp,
)


class Path:
    """Ordered anchors plus the cached arc length of every segment.

    A path is never mutated once built; a new wave gets a new instance.
    """

    def __init__(self, points: Sequence[Vec2]) -> None:
        if len(points) < 2:
            raise ValueError("a path needs at least two points")
        self.points: Tuple[Vec2, ...] = tuple(points)
        self.segment_lengths: Tuple[float, ...] = tuple(
            math.hypot(b.x - a.x, b.y - a.y) for a, b in zip(self.points, self.points[1:])
        )
        self.length: float = sum(self.segment_lengths)

    @property
    def start(self) -> Vec2:
        return self.points[0]

    @property
    def end(self) -> Vec2:
        return self.points[-1]

    def point_at(self, progress: float) -> Vec2:
        """Return the point ``progress`` pixels along the path."""

        if progress <= 0:
            return self.start
        if progress >= self.length:
            return self.end

        travelled = 0.0
        for index, segment_length in enumerate(self.segment_lengths):
            if travelled + segment_length >= progress:
                prev = self.points[index]
                if segment_length == 0:
                    return prev
                curr = self.points[index + 1]
                t = (progress - travelled) / segment_length
                return Vec2(prev.x + (curr.x - prev.x) * t, prev.y + (curr.y - prev.y) * t)
            travelled += segment_length
        return self.end

    def to_list(self) -> List[dict]:
        return [{"x": point.x, "y": point.y} for point in self.points]


def generate_path(
    base_points: Sequence[Vec2] = BASE_PATH_POINTS,
    rng: Optional[random.Random] = None,
) -> Path:
    """Jitter the interior anchors of ``base_points`` into a fresh path.

    The first and last anchors stay where they are. Every interior anchor is
    nudged by up to ``PATH_JITTER`` pixels on each axis and then kept inside
    the canvas, ``PATH_MARGIN`` pixels away from its edges.
    """

    rng = rng or random.Random()
    points: List[Vec2] = [base_points[0]]
    for anchor in base_points[1:-1]:
        x = anchor.x + rng.uniform(-PATH_JITTER, PATH_JITTER)
        y = anchor.y + rng.uniform(-PATH_JITTER, PATH_JITTER)
        points.append(
            Vec2(
                clamp(x, PATH_MARGIN, CANVAS_WIDTH - PATH_MARGIN),
                clamp(y, PATH_MARGIN, CANVAS_HEIGHT - PATH_MARGIN),
            )
        )
    points.append(base_points[-1])
    return Path(points)


__all__ = ["Path", "generate_path"]
