# agents/agent.py — an entity that follows a target along grid paths

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Protocol, TYPE_CHECKING

from pygame.math import Vector2

from swarmpath import settings as defaults
from swarmpath.behaviors.behavior import is_zero
from swarmpath.pathing.request import PathRequest
from swarmpath.paths.path import Path, smooth_path, straight_path
from swarmpath.settings import AgentSettings

if TYPE_CHECKING:
    from swarmpath.agents.neighbors import NeighborQuery
    from swarmpath.behaviors.behavior import Behavior
    from swarmpath.core.clock import SimClock
    from swarmpath.core.event_bus import EventBus
    from swarmpath.pathing.dispatcher import PathRequestDispatcher
    from swarmpath.world.grid import Grid
    from swarmpath.world.node import Node

logger = logging.getLogger(__name__)


class Targetable(Protocol):
    position: Vector2


@dataclass(eq=False)
class StaticTarget:
    """A point to walk to. Move it by assigning `position`."""
    position: Vector2

    def __post_init__(self) -> None:
        self.position = Vector2(self.position)


class AgentState(Enum):
    IDLE            = auto()   # no target, or no path yet and nothing requested
    REQUESTING_PATH = auto()   # waiting on a search, no path to follow yet
    FOLLOWING       = auto()   # has a path (a background refresh may be pending)
    REPLANNING      = auto()   # waiting on a forced search


class Agent:
    """
    Follows `target` on its type's grid.

    Each tick (update): request a path if none is pending, ask the
    behavior for a velocity, move, advance the path cursor and update
    priority. Path results arrive through on_path_result(), called by the
    dispatcher's drain() on the tick thread.

    Priority is only used by avoidance. A stationary agent parks its
    priority in priority_cache and drops to 0 so moving agents may pass.
    """

    _next_id: int = 0

    def __init__(
        self,
        position,
        grid: Grid,
        dispatcher: PathRequestDispatcher,
        clock: SimClock,
        neighbor_query: Optional[NeighborQuery] = None,
        behavior: Optional[Behavior] = None,
        target: Optional[Targetable] = None,
        agent_settings: Optional[AgentSettings] = None,
        priority: int = defaults.FIRST_AGENT_PRIORITY,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.agent_id = Agent._next_id
        Agent._next_id += 1

        self.settings = agent_settings or AgentSettings()
        self.position = Vector2(position)
        self.rotation: float = 0.0              # degrees, 0 = facing +x
        self.target = target
        self.behavior = behavior
        self.grid = grid

        self._dispatcher = dispatcher
        self._clock = clock
        self._neighbors = neighbor_query
        self._bus = event_bus

        # Path
        self.path: Optional[Path] = None
        self._pending: Optional[PathRequest] = None
        self._pending_forced = False
        self._end_node_cache: Optional[Node] = None
        self.requests_sent = 0

        # Movement / priority
        self.priority = priority
        self.priority_cache = 0
        self.move_direction_cache = Vector2()
        self.is_moving = False
        self.last_step = 0.0                    # distance moved during the last tick
        self.tracked = False                    # path cursor still advancing

        self.state: AgentState = AgentState.IDLE

    # ------------------------------------------------------------------
    # Main update
    # ------------------------------------------------------------------

    def update(self, dt: float) -> None:
        self.send_path_request()
        self.move(dt)
        self.update_path_index()
        self.update_priority()

    @property
    def delta_time(self) -> float:
        return self._clock.delta_time

    @property
    def is_path_request_sent(self) -> bool:
        return self._pending is not None

    @property
    def end_node_cache(self) -> Optional[Node]:
        return self._end_node_cache

    @property
    def agent_type(self) -> str:
        return self.settings.agent_type

    # ------------------------------------------------------------------
    # Getting a path
    # ------------------------------------------------------------------

    def send_path_request(self) -> bool:
        """
        Ask for a path to the target unless one is already on its way, the
        target is missing, the simulation just started, or the target is
        still in the cell of the previous request. Returns True if sent.
        """
        if self._pending is not None or self.target is None:
            return False
        if not self._first_request_delay_elapsed():
            return False

        end_node = self.grid.get_node_from_world_position(self.target.position)
        if end_node is self._end_node_cache:
            return False

        self._submit(forced=False)
        return True

    def force_send_path_request(self) -> bool:
        """Ask for a path even if the target's cell hasn't changed,
        abandoning any pending normal request."""
        if self._pending is not None:
            if self._pending_forced:
                return False
            self._pending.cancel_token.cancel()
            self._pending = None

        if self.target is None or not self._first_request_delay_elapsed():
            self._refresh_state()
            return False

        self._submit(forced=True)
        return True

    def set_target(self, target: Optional[Targetable]) -> None:
        """Switch targets; a pending search for the old target is dropped."""
        self.target = target
        if target is None:
            self.cancel_path_request()
        else:
            self.force_send_path_request()

    def cancel_path_request(self) -> None:
        if self._pending is not None:
            self._pending.cancel_token.cancel()
            self._pending = None
            self._pending_forced = False
        self._refresh_state()

    def _submit(self, forced: bool) -> None:
        request = PathRequest(
            start=self.position,
            end=self.target.position,
            grid=self.grid,
            callback=self.on_path_result,
            end_node_cache=None if forced else self._end_node_cache,
        )
        self._pending = request
        self._pending_forced = forced
        self.requests_sent += 1
        self._refresh_state()
        if self._bus:
            self._bus.publish("PATH_REQUESTED", {"agent": self, "request": request})
        self._dispatcher.request_path(request)

    def _first_request_delay_elapsed(self) -> bool:
        # The first frames tend to have a huge delta time
        delay = self.settings.first_request_delay
        if delay is None:
            delay = defaults.FIRST_REQUEST_DELAY
        return self._clock.time_since_start >= delay

    def on_path_result(self, waypoints: list[Vector2], success: bool, end_node: Optional[Node]) -> None:
        """Dispatcher callback. A failed search keeps the current path."""
        self._pending = None
        self._pending_forced = False
        self._end_node_cache = end_node

        if success:
            self.path = self.create_path(waypoints)
            self.path.update_index(self.position)
        else:
            logger.debug("Agent %d: no path to %s, keeping current path", self.agent_id,
                         end_node.grid_position if end_node is not None else None)
        self._refresh_state()

    def create_path(self, waypoints: list[Vector2]) -> Path:
        exact_target = None
        if self.settings.reach_exact_target and self.target is not None:
            exact_target = Vector2(self.target.position)

        if self.settings.use_smooth_path:
            return smooth_path(waypoints, self.position, self.settings.turning_distance,
                               self.settings.stopping_distance, exact_target)
        return straight_path(waypoints, self.settings.stopping_distance, exact_target,
                             starting_position=self.position)

    # ------------------------------------------------------------------
    # Moving
    # ------------------------------------------------------------------

    def move(self, dt: float) -> Vector2:
        """Evaluate the behavior and move by velocity × dt."""
        self.last_step = 0.0
        if self.behavior is None:
            self.is_moving = False
            return Vector2()

        destination = self.path.current_waypoint if self.path is not None else Vector2()
        velocity = self.behavior.evaluate(self, self.get_neighbors(), Vector2(destination))

        self.is_moving = not is_zero(velocity)
        if self.is_moving:
            self.position += velocity * dt
            self.last_step = velocity.length() * dt
            if self.settings.rotate_with_movement:
                self.rotation = math.degrees(math.atan2(velocity.y, velocity.x))
        return velocity

    def get_neighbors(self) -> list[Agent]:
        if self._neighbors is None:
            return []
        return self._neighbors.find_neighbors(
            self.position, self.settings.detection_radius, self.settings.layer, exclude=self
        )

    def update_path_index(self) -> None:
        self.tracked = self.path is not None and not self.path.reached_end
        if self.tracked:
            self.path.update_index(self.position, self.last_step)

    def update_priority(self) -> None:
        if not self.is_moving:
            if self.priority != 0:
                self.priority_cache = self.priority
                self.priority = 0
        elif self.priority_cache != 0:
            self.priority = self.priority_cache
            self.priority_cache = 0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def _refresh_state(self) -> None:
        if self._pending is not None and self._pending_forced:
            self.state = AgentState.REPLANNING
        elif self.path is not None:
            self.state = AgentState.FOLLOWING
        elif self._pending is not None:
            self.state = AgentState.REQUESTING_PATH
        else:
            self.state = AgentState.IDLE

    def __repr__(self) -> str:
        return (f"Agent({self.agent_id} {self.state.name} "
                f"at=({self.position.x:.2f}, {self.position.y:.2f}) priority={self.priority})")
