# world/grid.py — pathfinding grid of nodes laid over a rectangular world region

from __future__ import annotations
import logging
import math
import threading
from typing import Optional, TYPE_CHECKING

from pygame.math import Vector2

from swarmpath.core.errors import ConfigurationError, GridNotActiveError
from swarmpath.world.node import Node

if TYPE_CHECKING:
    from swarmpath.core.event_bus import EventBus
    from swarmpath.settings import GridSettings
    from swarmpath.world.obstacles import ObstacleOracle

logger = logging.getLogger(__name__)


class Grid:
    """
    Owns the 2D array of Node objects for one region of the world.

    World y grows upward: node (0, 0) is the bottom-left cell.
    Topology (node objects and neighbor links) is built once in activate();
    update_grid() / update_grid_section() only refresh walkability.

    Node search fields (g/h/parent/heap_index) are scratch state shared by
    every search on this grid, so searches must hold `search_lock`.
    """

    def __init__(
        self,
        oracle: ObstacleOracle,
        center: tuple[float, float] = (0.0, 0.0),
        world_size: tuple[float, float] = (1.0, 1.0),
        cell_radius: float = 1.0,
        agent_type: str = "A",
        event_bus: Optional[EventBus] = None,
    ) -> None:
        if cell_radius <= 0:
            raise ConfigurationError("cell_radius must be positive")

        self.agent_type = agent_type
        self.center = Vector2(center)
        self.world_size = Vector2(world_size)
        self.cell_radius = cell_radius
        self.cell_diameter = cell_radius * 2.0
        self.count_x = 0
        self.count_y = 0
        self.nodes: list[list[Node]] = []     # nodes[x][y]
        self.search_lock = threading.Lock()

        self._oracle = oracle
        self._bus = event_bus
        self._arena: list[Node] = []
        self._active = False

    @classmethod
    def from_settings(cls, settings: GridSettings, oracle: ObstacleOracle,
                      event_bus: Optional[EventBus] = None) -> Grid:
        return cls(
            oracle,
            center=settings.center,
            world_size=settings.world_size,
            cell_radius=settings.cell_radius,
            agent_type=settings.agent_type,
            event_bus=event_bus,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def active(self) -> bool:
        return self._active

    @property
    def max_size(self) -> int:
        return self.count_x * self.count_y

    @property
    def bottom_left(self) -> Vector2:
        return self.center - self.world_size / 2

    def activate(self) -> None:
        """Fill the grid with nodes and link each one to its neighbors."""
        self.count_x = round(self.world_size.x / self.cell_diameter)
        self.count_y = round(self.world_size.y / self.cell_diameter)
        if self.count_x < 1 or self.count_y < 1:
            raise ConfigurationError(
                f"world size {tuple(self.world_size)} is smaller than one cell "
                f"of diameter {self.cell_diameter}"
            )
        # Snap the world size so whole cells cover it exactly
        self.world_size = Vector2(self.count_x * self.cell_diameter,
                                  self.count_y * self.cell_diameter)

        self._generate_nodes()
        self._link_neighbors()
        self._active = True

        logger.info("Grid %s activated: %dx%d cells, %d walkable",
                    self.agent_type, self.count_x, self.count_y,
                    sum(1 for n in self._arena if n.walkable))
        if self._bus:
            self._bus.publish("GRID_ACTIVATED", {"grid": self})

    def deactivate(self) -> None:
        """Drop every node. activate() rebuilds them."""
        self._active = False
        self.nodes = []
        self._arena = []

    def _generate_nodes(self) -> None:
        origin = self.bottom_left
        r = self.cell_radius
        d = self.cell_diameter
        self.nodes = []
        self._arena = []
        for x in range(self.count_x):
            column = []
            for y in range(self.count_y):
                pos = origin + Vector2(x * d + r, y * d + r)
                node = Node(
                    grid_x=x,
                    grid_y=y,
                    index=len(self._arena),
                    world_position=pos,
                    walkable=self._query_walkable(pos),
                )
                column.append(node)
                self._arena.append(node)
            self.nodes.append(column)

    def _link_neighbors(self) -> None:
        for node in self._arena:
            linked = []
            for dx in (-1, 0, 1):
                for dy in (-1, 0, 1):
                    if dx == 0 and dy == 0:
                        continue
                    n = self.get_node(node.grid_x + dx, node.grid_y + dy)
                    if n is not None:
                        linked.append(n)
            node.neighbors = tuple(linked)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_node(self, x: int, y: int) -> Node | None:
        if 0 <= x < self.count_x and 0 <= y < self.count_y:
            return self.nodes[x][y]
        return None

    def node_at(self, index: int) -> Node:
        return self._arena[index]

    def get_node_from_world_position(self, world_position) -> Node:
        """
        Node under a world position. Positions outside the grid rectangle
        are clamped onto the nearest edge cell.
        """
        self._require_active()
        p = Vector2(world_position)
        origin = self.bottom_left
        percent_x = (p.x - origin.x) / self.world_size.x
        percent_y = (p.y - origin.y) / self.world_size.y
        x = math.floor(min(max(self.count_x * percent_x, 0), self.count_x - 1))
        y = math.floor(min(max(self.count_y * percent_y, 0), self.count_y - 1))
        return self.nodes[x][y]

    def iter_nodes(self):
        return iter(self._arena)

    # ------------------------------------------------------------------
    # Walkability refresh
    # ------------------------------------------------------------------

    def update_grid(self) -> None:
        """Re-query walkability for every node."""
        self._require_active()
        for node in self._arena:
            node.walkable = self._query_walkable(node.world_position)
        logger.debug("Grid %s walkability refreshed", self.agent_type)

    def update_grid_section(self, bottom_left, top_right) -> None:
        """Re-query walkability for the nodes covering a rectangular area."""
        self._require_active()
        corner_a = self.get_node_from_world_position(bottom_left)
        corner_b = self.get_node_from_world_position(top_right)
        for x in range(corner_a.grid_x, corner_b.grid_x + 1):
            for y in range(corner_a.grid_y, corner_b.grid_y + 1):
                node = self.nodes[x][y]
                node.walkable = self._query_walkable(node.world_position)

    # ------------------------------------------------------------------
    # Search support
    # ------------------------------------------------------------------

    def reset_search_state(self) -> None:
        for node in self._arena:
            node.reset_search_state()

    def retrace(self, start: Node, end: Node) -> list[Node]:
        """Follow parent links from end back to start. Returns start..end."""
        route = [end]
        current = end
        while current is not start:
            if current.parent is None:
                raise ValueError(f"{end.grid_position} is not linked back to {start.grid_position}")
            current = self.node_at(current.parent)
            route.append(current)
        route.reverse()
        return route

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _query_walkable(self, position: Vector2) -> bool:
        extent = Vector2(self.cell_diameter, self.cell_diameter)
        return bool(self._oracle.is_walkable(Vector2(position), extent))

    def _require_active(self) -> None:
        if not self._active:
            raise GridNotActiveError(f"Grid {self.agent_type} is not active")

    def __repr__(self) -> str:
        return f"Grid({self.agent_type} {self.count_x}x{self.count_y} cell={self.cell_diameter})"
