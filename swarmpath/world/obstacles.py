# world/obstacles.py — obstacle occupancy oracles queried when a grid is built

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Protocol

from pygame.math import Vector2


class ObstacleOracle(Protocol):
    def is_walkable(self, world_position: Vector2, cell_extent: Vector2) -> bool:
        """True when no obstacle overlaps the box centred on world_position."""
        ...


class OpenField:
    """Nothing blocks movement anywhere."""

    def is_walkable(self, world_position: Vector2, cell_extent: Vector2) -> bool:
        return True


@dataclass
class Box:
    left: float
    bottom: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def top(self) -> float:
        return self.bottom + self.height

    def overlaps(self, center: Vector2, extent: Vector2) -> bool:
        # Touching edges do not count as overlap
        half_w = extent.x / 2
        half_h = extent.y / 2
        return (center.x - half_w < self.right and center.x + half_w > self.left and
                center.y - half_h < self.top and center.y + half_h > self.bottom)


@dataclass
class RectObstacleMap:
    """
    Static obstacles as axis-aligned boxes in world space (y grows upward).
    Mutate `boxes` and call Grid.update_grid() / update_grid_section()
    to refresh walkability.
    """
    boxes: list[Box] = field(default_factory=list)

    def add_box(self, left: float, bottom: float, width: float, height: float) -> Box:
        box = Box(left, bottom, width, height)
        self.boxes.append(box)
        return box

    def remove_box(self, box: Box) -> None:
        if box in self.boxes:
            self.boxes.remove(box)

    def is_walkable(self, world_position: Vector2, cell_extent: Vector2) -> bool:
        return not any(b.overlaps(world_position, cell_extent) for b in self.boxes)
