# behaviors/behavior.py — contract shared by every steering behavior

from __future__ import annotations
from typing import Protocol, Sequence, TYPE_CHECKING

from pygame.math import Vector2

if TYPE_CHECKING:
    from swarmpath.agents.agent import Agent


class Behavior(Protocol):
    """
    Turns an agent's state, its neighbors and its current destination
    (usually the current waypoint) into a velocity: direction × speed.
    """

    def evaluate(self, agent: Agent, neighbors: Sequence[Agent], destination: Vector2) -> Vector2:
        ...


def is_zero(v: Vector2) -> bool:
    return v.x == 0 and v.y == 0


def safe_normalize(v: Vector2) -> Vector2:
    """Unit vector of v, or the zero vector when v has no length."""
    return v.normalize() if v.length_squared() > 0 else Vector2()
