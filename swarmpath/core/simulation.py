# core/simulation.py — wires the services together and drives the tick

from __future__ import annotations
import logging
from typing import Iterable, Optional

import pygame

from swarmpath import settings
from swarmpath.agents.agent_manager import AgentManager
from swarmpath.agents.neighbors import NeighborQuery
from swarmpath.behaviors.avoidance import AvoidanceBehavior
from swarmpath.behaviors.composite import CompositeBehavior
from swarmpath.behaviors.follow_path import FollowPathBehavior
from swarmpath.core.clock import SimClock
from swarmpath.core.event_bus import EventBus
from swarmpath.pathing.dispatcher import PathRequestDispatcher
from swarmpath.pathing.pathfinder import AStar
from swarmpath.settings import GridSettings
from swarmpath.world.grid_registry import GridRegistry
from swarmpath.world.obstacles import ObstacleOracle, OpenField

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def default_behavior(use_congestion_control: bool = settings.USE_CONGESTION_CONTROL) -> CompositeBehavior:
    """Follow the path while keeping clear of neighbors."""
    return CompositeBehavior(
        [FollowPathBehavior(), AvoidanceBehavior(use_congestion_control)],
        [settings.FOLLOW_PATH_WEIGHT, settings.AVOIDANCE_WEIGHT],
    )


class Simulation:
    """
    Top-level orchestrator. Builds every service in dependency order and
    passes each one explicitly to whoever needs it.

    Initialization order:
      1. EventBus + SimClock
      2. GridRegistry (one activated grid per agent type)
      3. AStar + PathRequestDispatcher
      4. NeighborQuery + AgentManager

    Per tick: drain finished path searches (callbacks run here), then
    update every agent.
    """

    def __init__(
        self,
        grid_settings: Iterable[GridSettings] = (GridSettings(),),
        oracle: Optional[ObstacleOracle] = None,
        path_workers: int = settings.PATH_WORKERS,
        neighbor_cell_size: float = settings.AGENT_DETECTION_RADIUS,
        behavior=None,
    ) -> None:
        # Core
        self.bus = EventBus()
        self.clock = SimClock()

        # World
        self.oracle = oracle or OpenField()
        self.grids = GridRegistry.build(grid_settings, self.oracle, self.bus)

        # Pathfinding
        self.pathfinder = AStar()
        self.dispatcher = PathRequestDispatcher(self.pathfinder, self.bus, max_workers=path_workers)

        # Agents
        self.agents = AgentManager(
            self.grids,
            self.dispatcher,
            self.clock,
            neighbor_query=NeighborQuery(neighbor_cell_size),
            event_bus=self.bus,
            general_behavior=behavior or default_behavior(),
        )

        self._running = False

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def tick(self, dt: float) -> None:
        sim_dt = self.clock.tick(dt)
        self.dispatcher.drain()
        self.agents.update(sim_dt)

    def run(self, ticks: Optional[int] = None, fps: int = settings.FPS) -> None:
        """Tick in real time until stop() is called or `ticks` frames ran."""
        pg_clock = pygame.time.Clock()
        self._running = True
        frames = 0
        try:
            while self._running and (ticks is None or frames < ticks):
                dt_ms = pg_clock.tick(fps)
                self.tick(dt_ms / 1000.0)
                frames += 1
        finally:
            self._running = False
        logger.info("Simulation stopped after %d frames", frames)

    def stop(self) -> None:
        self._running = False

    def close(self) -> None:
        self.dispatcher.shutdown()

    def __enter__(self) -> Simulation:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
