# behaviors/follow_path.py — steer toward the current waypoint of the agent's path

from __future__ import annotations
from typing import Sequence, TYPE_CHECKING

from pygame.math import Vector2

from swarmpath.behaviors.behavior import safe_normalize
from swarmpath.settings import MIN_SPEED_PERCENT

if TYPE_CHECKING:
    from swarmpath.agents.agent import Agent


class FollowPathBehavior:
    """
    Heads for `destination` at the agent's speed, slowing down linearly
    over the last stopping_distance of the path.

    With smoothing on, the heading turns toward the destination at
    turning_speed per second instead of snapping to it.
    """

    def evaluate(self, agent: Agent, neighbors: Sequence[Agent], destination: Vector2) -> Vector2:
        path = agent.path
        if path is None or (path.reached_end and not agent.settings.keep_following_last_waypoint):
            return Vector2()

        speed_percent = self._slow_down_percent(agent)
        if speed_percent <= MIN_SPEED_PERCENT:
            speed_percent = 0.0
        return self._direction(agent, destination) * agent.settings.speed_multiplier * speed_percent

    @staticmethod
    def _slow_down_percent(agent: Agent) -> float:
        path = agent.path
        stopping_distance = agent.settings.stopping_distance
        if path.current_index >= path.stopping_index and stopping_distance > 0:
            remaining = path.remaining_distance(agent.position)
            return max(0.0, min(1.0, remaining / stopping_distance))
        return 1.0

    @staticmethod
    def _direction(agent: Agent, destination: Vector2) -> Vector2:
        target_direction = safe_normalize(Vector2(destination) - agent.position)
        if not agent.settings.use_smooth_path:
            return target_direction

        t = max(0.0, min(1.0, agent.delta_time * agent.settings.turning_speed))
        agent.move_direction_cache = safe_normalize(agent.move_direction_cache.lerp(target_direction, t))
        return Vector2(agent.move_direction_cache)
