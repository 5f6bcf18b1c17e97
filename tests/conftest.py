import os

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest
from pygame.math import Vector2

from swarmpath.pathing.pathfinder import AStar
from swarmpath.settings import AgentSettings
from swarmpath.world.grid import Grid
from swarmpath.world.obstacles import OpenField, RectObstacleMap


class FakeAgent:
    """Just the fields behaviors read and write."""

    def __init__(self, position=(0, 0), priority=1, priority_cache=0, path=None,
                 delta_time=0.0, **settings):
        self.position = Vector2(position)
        self.priority = priority
        self.priority_cache = priority_cache
        self.path = path
        self.delta_time = delta_time
        self.move_direction_cache = Vector2()
        self.settings = AgentSettings(**settings)


def make_grid(oracle=None, size=10, cell_radius=0.5):
    # Bottom-left corner at the world origin: node (x, y) sits at (x + r, y + r)
    # for unit cells
    grid = Grid(
        oracle or OpenField(),
        center=(size / 2, size / 2),
        world_size=(size, size),
        cell_radius=cell_radius,
    )
    grid.activate()
    return grid


@pytest.fixture
def open_grid():
    return make_grid()


@pytest.fixture
def obstacles():
    return RectObstacleMap()


@pytest.fixture
def pathfinder():
    return AStar()


@pytest.fixture
def fake_agent():
    return FakeAgent
