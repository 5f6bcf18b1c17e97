# agents/neighbors.py — spatial hash answering "which agents are near this point"

from __future__ import annotations
import math
from collections import defaultdict
from typing import Iterable, Optional, TYPE_CHECKING

from pygame.math import Vector2

if TYPE_CHECKING:
    from swarmpath.agents.agent import Agent


class NeighborQuery:
    """
    Buckets agents into square cells so a radius query only scans the
    cells the query circle touches. Rebuilt once per tick from the agents'
    positions at the start of that tick.
    """

    def __init__(self, cell_size: float = 1.0) -> None:
        if cell_size <= 0:
            raise ValueError("cell_size must be positive")
        self.cell_size = cell_size
        self._cells: dict[tuple[int, int], list[Agent]] = defaultdict(list)

    def clear(self) -> None:
        self._cells.clear()

    def _hash(self, x: float, y: float) -> tuple[int, int]:
        return math.floor(x / self.cell_size), math.floor(y / self.cell_size)

    def insert(self, agent: Agent) -> None:
        self._cells[self._hash(agent.position.x, agent.position.y)].append(agent)

    def rebuild(self, agents: Iterable[Agent]) -> None:
        self.clear()
        for agent in agents:
            self.insert(agent)

    def find_neighbors(
        self,
        position,
        radius: float,
        layer: Optional[str] = None,
        exclude: Optional[Agent] = None,
    ) -> list[Agent]:
        """Agents within radius of position on the given layer, minus `exclude`."""
        center = Vector2(position)
        col, row = self._hash(center.x, center.y)
        reach = max(1, math.ceil(radius / self.cell_size))

        found = []
        for c in range(col - reach, col + reach + 1):
            for r in range(row - reach, row + reach + 1):
                for agent in self._cells.get((c, r), ()):
                    if agent is exclude:
                        continue
                    if layer is not None and agent.settings.layer != layer:
                        continue
                    if center.distance_to(agent.position) <= radius:
                        found.append(agent)
        return found
