# behaviors/composite.py — weighted blend of several behaviors

from __future__ import annotations
from typing import Sequence, TYPE_CHECKING

from pygame.math import Vector2

from swarmpath.behaviors.behavior import Behavior, is_zero, safe_normalize
from swarmpath.core.errors import BehaviorConfigurationError

if TYPE_CHECKING:
    from swarmpath.agents.agent import Agent


class CompositeBehavior:
    """
    Blends child behaviors: the weighted average of their non-zero
    directions, normalized, times the average of their non-zero speeds.
    weights[i] belongs to behaviors[i].
    """

    def __init__(self, behaviors: Sequence[Behavior], weights: Sequence[float]) -> None:
        self.behaviors = list(behaviors)
        self.weights = list(weights)

    def evaluate(self, agent: Agent, neighbors: Sequence[Agent], destination: Vector2) -> Vector2:
        if len(self.behaviors) != len(self.weights):
            raise BehaviorConfigurationError(
                f"{len(self.weights)} weights for {len(self.behaviors)} behaviors"
            )

        direction_sum = Vector2()
        speed_sum = 0.0
        direction_count = 0
        speed_count = 0

        for behavior, weight in zip(self.behaviors, self.weights):
            velocity = behavior.evaluate(agent, neighbors, destination)
            if is_zero(velocity):
                continue
            direction_sum += velocity.normalize() * weight
            direction_count += 1
            speed = velocity.length()
            if speed != 0:
                speed_sum += speed
                speed_count += 1

        if direction_count == 0 or speed_count == 0:
            return Vector2()

        direction = safe_normalize(direction_sum / direction_count)
        return direction * (speed_sum / speed_count)
