# world/node.py — single cell of a pathfinding grid

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from pygame.math import Vector2


@dataclass(eq=False)
class Node:
    grid_x: int
    grid_y: int
    index: int                           # slot in the grid's flat node list
    world_position: Vector2
    walkable: bool          = True

    # Search scratch state, reset at the start of every search
    g_cost: int             = 0          # distance from the start node
    h_cost: int             = 0          # heuristic distance to the end node
    parent: Optional[int]   = None       # index of the previous node on the route
    heap_index: int         = -1         # owned by the open set while enqueued

    neighbors: tuple[Node, ...] = field(default_factory=tuple, repr=False)

    @property
    def f_cost(self) -> int:
        return self.g_cost + self.h_cost

    @property
    def grid_position(self) -> tuple[int, int]:
        return self.grid_x, self.grid_y

    def reset_search_state(self) -> None:
        self.g_cost = 0
        self.h_cost = 0
        self.parent = None
        self.heap_index = -1

    def compare(self, other: Node) -> int:
        """
        Priority of this node against another: 1 higher, 0 equal, -1 lower.
        Lower F cost wins; ties go to the lower H cost.
        """
        if self.f_cost != other.f_cost:
            return 1 if self.f_cost < other.f_cost else -1
        if self.h_cost != other.h_cost:
            return 1 if self.h_cost < other.h_cost else -1
        return 0
