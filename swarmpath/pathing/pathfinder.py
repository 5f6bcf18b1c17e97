# pathing/pathfinder.py — A* grid pathfinder

from __future__ import annotations
import logging
import threading
import time
from typing import Optional, TYPE_CHECKING

from pygame.math import Vector2

from swarmpath import settings
from swarmpath.pathing.heap import Heap
from swarmpath.pathing.request import PathResult

if TYPE_CHECKING:
    from swarmpath.pathing.request import PathRequest
    from swarmpath.world.grid import Grid
    from swarmpath.world.node import Node

logger = logging.getLogger(__name__)


class AStar:
    """
    A* pathfinding over a Grid's 8-connected nodes.
    Uses the octile distance (10 per straight step, 14 per diagonal step)
    for both step costs and the heuristic.

    The open and closed sets are allocated once per grid and cleared
    between searches. Searches on the same grid are serialized through
    the grid's search_lock because node costs and parents are shared.
    """

    def __init__(self, log_search_time: bool = settings.LOG_SEARCH_TIME) -> None:
        self.log_search_time = log_search_time
        self._open_sets: dict[Grid, Heap[Node]] = {}
        self._closed_sets: dict[Grid, set[Node]] = {}
        self.searches_run = 0
        self._stats_lock = threading.Lock()     # searches on different grids run in parallel

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def find_path(self, request: PathRequest) -> PathResult:
        """
        Run the search for a request and package the outcome.
        Returns a result whose waypoints exclude the start cell; success is
        False when no route exists, when the end node matches the request's
        cached end node (search skipped), or when the route simplifies to
        no waypoints at all.
        """
        grid = request.grid
        started = time.perf_counter()

        with grid.search_lock:
            start_node = grid.get_node_from_world_position(request.start)
            end_node = grid.get_node_from_world_position(request.end)

            if end_node is request.end_node_cache:
                logger.debug("%s: end node %s unchanged, search skipped",
                             request.request_id, end_node.grid_position)
                return PathResult([], False, end_node, request.callback,
                                  request_id=request.request_id, searched=False)

            route = self.find_route(grid, start_node, end_node)
            waypoints = self.simplify(route, start_node) if route else []

        elapsed_ms = (time.perf_counter() - started) * 1000.0
        if self.log_search_time:
            logger.debug("%s: search took %.2fms", request.request_id, elapsed_ms)
        if route is None:
            logger.debug("%s: no route from %s to %s", request.request_id,
                         start_node.grid_position, end_node.grid_position)

        # A route with nothing left after simplification means the agent
        # already stands on the end cell; following it would index nothing.
        return PathResult(waypoints, bool(waypoints), end_node, request.callback,
                          request_id=request.request_id, elapsed_ms=elapsed_ms)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def find_route(self, grid: Grid, start: Node, end: Node) -> Optional[list[Node]]:
        """
        Raw A* route from start to end (both included), or None when the
        open set runs dry. Callers must hold grid.search_lock.
        """
        open_set = self._open_sets.get(grid)
        if open_set is None or open_set.capacity < grid.max_size:
            open_set = self._open_sets[grid] = Heap(grid.max_size)
            self._closed_sets[grid] = set()
        closed_set = self._closed_sets[grid]

        grid.reset_search_state()
        open_set.clear()
        closed_set.clear()
        with self._stats_lock:
            self.searches_run += 1

        open_set.add(start)
        while open_set:
            current = open_set.remove_first()
            closed_set.add(current)

            if current is end:
                return grid.retrace(start, end)

            for neighbor in current.neighbors:
                if not neighbor.walkable or neighbor in closed_set:
                    continue

                g = current.g_cost + self.distance(current, neighbor)
                in_open = open_set.contains(neighbor)
                if g < neighbor.g_cost or not in_open:
                    neighbor.g_cost = g
                    neighbor.h_cost = self.distance(neighbor, end)
                    neighbor.parent = current.index

                    if not in_open:
                        open_set.add(neighbor)
                    else:
                        open_set.update_item(neighbor)

        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def distance(a: Node, b: Node) -> int:
        dx = abs(a.grid_x - b.grid_x)
        dy = abs(a.grid_y - b.grid_y)
        if dx > dy:
            return settings.DIAGONAL_STEP_COST * dy + settings.STRAIGHT_STEP_COST * (dx - dy)
        return settings.DIAGONAL_STEP_COST * dx + settings.STRAIGHT_STEP_COST * (dy - dx)

    @classmethod
    def path_cost(cls, route: list[Node]) -> int:
        return sum(cls.distance(a, b) for a, b in zip(route, route[1:]))

    @staticmethod
    def simplify(route: list[Node], start: Node) -> list[Vector2]:
        """
        Keep only the nodes where the direction of travel changes.
        The first node (the agent's own cell) is never emitted.
        """
        waypoints: list[Vector2] = []
        previous_direction = Vector2()
        last = len(route) - 1

        for i in range(1, len(route)):
            direction = Vector2(route[i].grid_x - route[i - 1].grid_x,
                                route[i].grid_y - route[i - 1].grid_y).normalize()
            if direction != previous_direction and i != 1:
                waypoints.append(Vector2(route[i - 1].world_position))
            previous_direction = direction

            # Collinear runs would otherwise drop the end node and cut the
            # last corner; compare the raw offset from start, not a unit vector
            if i == last:
                to_start = Vector2(route[i].grid_x - start.grid_x,
                                   route[i].grid_y - start.grid_y)
                if to_start != previous_direction:
                    waypoints.append(Vector2(route[i].world_position))

        return waypoints
