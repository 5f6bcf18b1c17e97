# behaviors/avoidance.py — boids-style separation from neighboring agents

from __future__ import annotations
import random
from typing import Optional, Sequence, TYPE_CHECKING

from pygame.math import Vector2

from swarmpath.behaviors.behavior import is_zero, safe_normalize
from swarmpath.settings import USE_CONGESTION_CONTROL

if TYPE_CHECKING:
    from swarmpath.agents.agent import Agent


class AvoidanceBehavior:
    """
    Steers away from every neighbor: the average of the vectors pointing
    from each neighbor to the agent, normalized, at the agent's speed.

    Congestion control makes an agent ignore neighbors of lower priority,
    so two agents contesting one destination don't push each other
    forever. A moving agent that meets a stationary neighbor (priority 0)
    whose cached priority outranks its own takes that priority and hands
    its own priority to the neighbor's cache: whoever got there first
    keeps right of way once it moves again.
    """

    def __init__(self, use_congestion_control: bool = USE_CONGESTION_CONTROL,
                 rng: Optional[random.Random] = None) -> None:
        self.use_congestion_control = use_congestion_control
        self._rng = rng or random.Random()

    def evaluate(self, agent: Agent, neighbors: Sequence[Agent], destination: Vector2) -> Vector2:
        if not neighbors:
            return Vector2()

        total = Vector2()
        for neighbor in neighbors:
            if neighbor.priority == 0 and agent.priority != 0:
                if neighbor.priority_cache > agent.priority:
                    self._swap_priority(agent, neighbor)
                    continue

            if self.use_congestion_control and neighbor.priority < agent.priority:
                continue

            away = agent.position - neighbor.position
            total += away if not is_zero(away) else self._random_direction()

        return safe_normalize(total / len(neighbors)) * agent.settings.speed_multiplier

    @staticmethod
    def _swap_priority(agent: Agent, other: Agent) -> None:
        agent.priority, other.priority_cache = other.priority_cache, agent.priority

    def _random_direction(self) -> Vector2:
        # Colocated agents have no "away"; pick one at random
        return safe_normalize(Vector2(self._rng.uniform(-1, 1), self._rng.uniform(-1, 1)))
