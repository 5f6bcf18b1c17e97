# agents/agent_manager.py — creates, removes and ticks all agents

from __future__ import annotations
import logging
from typing import Optional, TYPE_CHECKING

from pygame.math import Vector2

from swarmpath import settings as defaults
from swarmpath.agents.agent import Agent
from swarmpath.agents.neighbors import NeighborQuery
from swarmpath.settings import AgentSettings

if TYPE_CHECKING:
    from swarmpath.agents.agent import Targetable
    from swarmpath.behaviors.behavior import Behavior
    from swarmpath.core.clock import SimClock
    from swarmpath.core.event_bus import EventBus
    from swarmpath.pathing.dispatcher import PathRequestDispatcher
    from swarmpath.world.grid_registry import GridRegistry

logger = logging.getLogger(__name__)


class AgentManager:
    """
    Owns every Agent and the values they share: a general target and a
    general behavior handed to agents spawned without their own, and the
    counter that gives each agent a unique non-zero priority.
    """

    def __init__(
        self,
        grids: GridRegistry,
        dispatcher: PathRequestDispatcher,
        clock: SimClock,
        neighbor_query: Optional[NeighborQuery] = None,
        event_bus: Optional[EventBus] = None,
        general_target: Optional[Targetable] = None,
        general_behavior: Optional[Behavior] = None,
    ) -> None:
        self._grids = grids
        self._dispatcher = dispatcher
        self._clock = clock
        self._neighbors = neighbor_query or NeighborQuery()
        self._bus = event_bus
        self.general_target = general_target
        self.general_behavior = general_behavior

        self._agents: dict[int, Agent] = {}
        self._next_priority = defaults.FIRST_AGENT_PRIORITY

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def next_priority(self) -> int:
        priority = self._next_priority
        self._next_priority += 1
        return priority

    def spawn(
        self,
        position,
        agent_settings: Optional[AgentSettings] = None,
        target: Optional[Targetable] = None,
        behavior: Optional[Behavior] = None,
    ) -> Agent:
        """Create an agent on its type's grid. Raises GridConfigurationError
        if no grid serves that type."""
        agent_settings = agent_settings or AgentSettings()
        grid = self._grids.get_grid(agent_settings.agent_type)

        agent = Agent(
            position=Vector2(position),
            grid=grid,
            dispatcher=self._dispatcher,
            clock=self._clock,
            neighbor_query=self._neighbors,
            behavior=behavior or self.general_behavior,
            target=target or self.general_target,
            agent_settings=agent_settings,
            priority=self.next_priority(),
            event_bus=self._bus,
        )
        self._agents[agent.agent_id] = agent
        self._neighbors.insert(agent)

        logger.info("Spawned agent %d (type %s) at (%.2f, %.2f)", agent.agent_id,
                    agent_settings.agent_type, agent.position.x, agent.position.y)
        if self._bus:
            self._bus.publish("AGENT_SPAWNED", {"agent": agent})
        return agent

    def despawn(self, agent: Agent) -> bool:
        removed = self._agents.pop(agent.agent_id, None)
        if removed is None:
            return False
        removed.cancel_path_request()
        self._neighbors.rebuild(self._agents.values())
        if self._bus:
            self._bus.publish("AGENT_DESPAWNED", {"agent": removed})
        return True

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update(self, dt: float) -> None:
        self._neighbors.rebuild(self._agents.values())
        for agent in list(self._agents.values()):
            agent.update(dt)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def agents(self) -> list[Agent]:
        return list(self._agents.values())

    @property
    def neighbor_query(self) -> NeighborQuery:
        return self._neighbors

    def get_agents_of_type(self, agent_type: str) -> list[Agent]:
        return [a for a in self._agents.values() if a.agent_type == agent_type]

    def __len__(self) -> int:
        return len(self._agents)
