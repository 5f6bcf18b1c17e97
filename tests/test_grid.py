import pytest
from pygame.math import Vector2

from swarmpath.core.errors import ConfigurationError, GridConfigurationError, GridNotActiveError
from swarmpath.core.event_bus import EventBus
from swarmpath.settings import GridSettings
from swarmpath.world.grid import Grid
from swarmpath.world.grid_registry import GridRegistry
from swarmpath.world.obstacles import OpenField

from conftest import make_grid


def test_world_size_snaps_to_whole_cells():
    grid = Grid(OpenField(), center=(0, 0), world_size=(10.3, 9.7), cell_radius=0.5)
    grid.activate()

    assert (grid.count_x, grid.count_y) == (10, 10)
    assert grid.world_size == Vector2(10, 10)
    assert grid.count_x * grid.cell_diameter == grid.world_size.x
    assert grid.max_size == 100


def test_node_world_positions_start_bottom_left(open_grid):
    assert open_grid.get_node(0, 0).world_position == Vector2(0.5, 0.5)
    assert open_grid.get_node(9, 9).world_position == Vector2(9.5, 9.5)
    assert open_grid.get_node(3, 4).world_position == Vector2(3.5, 4.5)


def test_neighbor_counts_have_no_wraparound(open_grid):
    assert len(open_grid.get_node(0, 0).neighbors) == 3
    assert len(open_grid.get_node(0, 5).neighbors) == 5
    assert len(open_grid.get_node(5, 5).neighbors) == 8
    corner = {n.grid_position for n in open_grid.get_node(9, 9).neighbors}
    assert corner == {(8, 8), (8, 9), (9, 8)}


def test_world_position_lookup(open_grid):
    assert open_grid.get_node_from_world_position((3.5, 4.5)).grid_position == (3, 4)
    assert open_grid.get_node_from_world_position((3.01, 4.99)).grid_position == (3, 4)
    assert open_grid.get_node_from_world_position((10.0, 10.0)).grid_position == (9, 9)


@pytest.mark.parametrize("position, expected", [
    ((-100, -100), (0, 0)),
    ((100, 100), (9, 9)),
    ((-5, 5.5), (0, 5)),
    ((5.5, 1000), (5, 9)),
])
def test_world_position_lookup_clamps_outside_points(open_grid, position, expected):
    assert open_grid.get_node_from_world_position(position).grid_position == expected


def test_offset_grid_lookup():
    grid = Grid(OpenField(), center=(-3, 7), world_size=(4, 2), cell_radius=0.5)
    grid.activate()
    assert grid.bottom_left == Vector2(-5, 6)
    assert grid.get_node_from_world_position((-4.5, 6.5)).grid_position == (0, 0)
    assert grid.get_node_from_world_position((-1.5, 7.5)).grid_position == (3, 1)


def test_obstacles_mark_cells_unwalkable(obstacles):
    obstacles.add_box(2, 2, 2, 1)
    grid = make_grid(obstacles)

    blocked = {n.grid_position for n in grid.iter_nodes() if not n.walkable}
    assert blocked == {(2, 2), (3, 2)}


def test_update_grid_section_refreshes_only_that_area(obstacles):
    grid = make_grid(obstacles)
    obstacles.add_box(1, 1, 1, 1)
    obstacles.add_box(7, 7, 1, 1)

    grid.update_grid_section((0.5, 0.5), (2.5, 2.5))
    assert not grid.get_node(1, 1).walkable
    assert grid.get_node(7, 7).walkable

    grid.update_grid()
    assert not grid.get_node(7, 7).walkable


def test_walkability_refresh_keeps_topology(obstacles):
    grid = make_grid(obstacles)
    node = grid.get_node(4, 4)
    neighbors = node.neighbors

    obstacles.add_box(4, 4, 1, 1)
    grid.update_grid()

    assert grid.get_node(4, 4) is node
    assert node.neighbors is neighbors
    assert not node.walkable


def test_inactive_grid_refuses_queries(open_grid):
    open_grid.deactivate()
    assert not open_grid.active
    with pytest.raises(GridNotActiveError):
        open_grid.get_node_from_world_position((1, 1))


def test_world_smaller_than_a_cell_is_rejected():
    grid = Grid(OpenField(), world_size=(0.2, 0.2), cell_radius=0.5)
    with pytest.raises(ConfigurationError):
        grid.activate()


def test_registry_serves_grids_by_agent_type():
    bus = EventBus()
    activated = []
    bus.subscribe("GRID_ACTIVATED", lambda data: activated.append(data["grid"]))

    registry = GridRegistry.build(
        [GridSettings("A", (0, 0), (10, 10), 0.5), GridSettings("B", (0, 0), (10, 10), 1.0)],
        OpenField(),
        bus,
    )

    assert registry.get_grid("A").count_x == 10
    assert registry.get_grid("B").count_x == 5
    assert registry.global_max_size == 100
    assert len(activated) == 2
    with pytest.raises(GridConfigurationError):
        registry.get_grid("C")


def test_removing_a_box_reopens_its_cells(obstacles):
    box = obstacles.add_box(3, 3, 1, 1)
    grid = make_grid(obstacles)
    assert not grid.get_node(3, 3).walkable

    obstacles.remove_box(box)
    obstacles.remove_box(box)
    grid.update_grid_section((3.5, 3.5), (3.5, 3.5))

    assert grid.get_node(3, 3).walkable


def test_nodes_are_reachable_by_arena_index(open_grid):
    node = open_grid.get_node(4, 7)
    assert open_grid.node_at(node.index) is node
    assert [n.index for n in open_grid.iter_nodes()] == list(range(open_grid.max_size))
