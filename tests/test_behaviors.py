import math
import random

import pytest
from pygame.math import Vector2

from swarmpath.behaviors.avoidance import AvoidanceBehavior
from swarmpath.behaviors.composite import CompositeBehavior
from swarmpath.behaviors.follow_path import FollowPathBehavior
from swarmpath.core.errors import BehaviorConfigurationError
from swarmpath.paths.path import smooth_path, straight_path


class Constant:
    def __init__(self, x, y):
        self.velocity = Vector2(x, y)

    def evaluate(self, agent, neighbors, destination):
        return Vector2(self.velocity)


# --- Avoidance ---

def test_avoidance_without_neighbors_is_zero(fake_agent):
    assert AvoidanceBehavior().evaluate(fake_agent(), [], Vector2()) == Vector2()


def test_avoidance_points_away_at_agent_speed(fake_agent):
    agent = fake_agent((0, 0), speed_multiplier=2.0)
    other = fake_agent((1, 0))

    assert AvoidanceBehavior().evaluate(agent, [other], Vector2()) == Vector2(-2, 0)


def test_avoidance_averages_neighbors(fake_agent):
    agent = fake_agent((0, 0))
    neighbors = [fake_agent((1, 0)), fake_agent((0, 1))]

    velocity = AvoidanceBehavior().evaluate(agent, neighbors, Vector2())

    assert velocity.x == pytest.approx(-math.sqrt(0.5))
    assert velocity.y == pytest.approx(-math.sqrt(0.5))


def test_colocated_neighbor_pushes_in_some_direction(fake_agent):
    agent = fake_agent((3, 3))
    other = fake_agent((3, 3))

    velocity = AvoidanceBehavior(rng=random.Random(7)).evaluate(agent, [other], Vector2())

    assert velocity.length() == pytest.approx(1.0)


def test_congestion_control_ignores_lower_priorities(fake_agent):
    agent = fake_agent((0, 0), priority=5)
    lower = fake_agent((1, 0), priority=3)

    assert AvoidanceBehavior(use_congestion_control=True).evaluate(agent, [lower], Vector2()) == Vector2()
    assert AvoidanceBehavior(use_congestion_control=False).evaluate(agent, [lower], Vector2()) != Vector2()


def test_moving_agent_takes_priority_of_stationary_neighbor(fake_agent):
    agent = fake_agent((0, 0), priority=5)
    parked = fake_agent((0.5, 0), priority=0, priority_cache=8)

    velocity = AvoidanceBehavior().evaluate(agent, [parked], Vector2())

    assert agent.priority == 8
    assert parked.priority_cache == 5
    assert parked.priority == 0
    assert velocity == Vector2()


def test_no_swap_when_parked_priority_is_lower(fake_agent):
    agent = fake_agent((0, 0), priority=5)
    parked = fake_agent((0.5, 0), priority=0, priority_cache=3)

    velocity = AvoidanceBehavior().evaluate(agent, [parked], Vector2())

    assert agent.priority == 5
    assert parked.priority_cache == 3
    assert velocity == Vector2(-1, 0)


# --- Composite ---

def test_composite_blends_directions_and_averages_speed(fake_agent):
    composite = CompositeBehavior([Constant(2, 0), Constant(0, 2)], [1.0, 1.0])

    velocity = composite.evaluate(fake_agent(), [], Vector2())

    assert velocity.x == pytest.approx(math.sqrt(2))
    assert velocity.y == pytest.approx(math.sqrt(2))


def test_composite_weights_bend_direction(fake_agent):
    composite = CompositeBehavior([Constant(1, 0), Constant(0, 1)], [3.0, 1.0])

    velocity = composite.evaluate(fake_agent(), [], Vector2())

    assert velocity.length() == pytest.approx(1.0)
    assert velocity.angle_to(Vector2(3, 1)) == pytest.approx(0, abs=1e-6)


def test_composite_skips_zero_children(fake_agent):
    composite = CompositeBehavior([Constant(0, 0), Constant(0, 3)], [1.0, 1.0])
    assert composite.evaluate(fake_agent(), [], Vector2()) == Vector2(0, 3)


def test_composite_of_zero_children_is_zero(fake_agent):
    composite = CompositeBehavior([Constant(0, 0), Constant(0, 0)], [1.0, 1.0])
    assert composite.evaluate(fake_agent(), [], Vector2()) == Vector2()


def test_composite_weight_count_must_match(fake_agent):
    composite = CompositeBehavior([Constant(1, 0), Constant(0, 1)], [1.0])
    with pytest.raises(BehaviorConfigurationError):
        composite.evaluate(fake_agent(), [], Vector2())


# --- Follow path ---

def test_follow_path_without_path_is_zero(fake_agent):
    assert FollowPathBehavior().evaluate(fake_agent(), [], Vector2(5, 5)) == Vector2()


def test_follow_path_heads_for_destination_at_full_speed(fake_agent):
    path = straight_path([(1, 0), (2, 0), (3, 0), (4, 0)], stopping_distance=1.5)
    agent = fake_agent((0, 0), path=path, speed_multiplier=3.0, stopping_distance=1.5)

    assert FollowPathBehavior().evaluate(agent, [], Vector2(1, 0)) == Vector2(3, 0)


def test_follow_path_slows_down_near_the_end(fake_agent):
    path = straight_path([(10, 0)], stopping_distance=2.0)
    agent = fake_agent((9, 0), path=path, stopping_distance=2.0)

    velocity = FollowPathBehavior().evaluate(agent, [], path.current_waypoint)

    assert velocity.x == pytest.approx(0.5)
    assert velocity.y == pytest.approx(0)


def test_follow_path_stops_when_almost_there(fake_agent):
    path = straight_path([(10, 0)], stopping_distance=2.0)
    agent = fake_agent((9.999, 0), path=path, stopping_distance=2.0)

    assert FollowPathBehavior().evaluate(agent, [], path.current_waypoint) == Vector2()


def test_follow_path_after_end_depends_on_setting(fake_agent):
    path = straight_path([(5, 0)], stopping_distance=0)
    path.increment_path_index()
    assert path.reached_end

    keep = fake_agent((0, 0), path=path, stopping_distance=0)
    stop = fake_agent((0, 0), path=path, stopping_distance=0, keep_following_last_waypoint=False)

    assert FollowPathBehavior().evaluate(keep, [], path.current_waypoint) == Vector2(1, 0)
    assert FollowPathBehavior().evaluate(stop, [], path.current_waypoint) == Vector2()


def test_smooth_follow_turns_gradually(fake_agent):
    path = smooth_path([(0, 5)], starting_position=(0, 0), turning_distance=0, stopping_distance=0)
    agent = fake_agent((0, 0), path=path, delta_time=0.1, use_smooth_path=True,
                       turning_speed=4.5, stopping_distance=0)
    agent.move_direction_cache = Vector2(1, 0)

    velocity = FollowPathBehavior().evaluate(agent, [], Vector2(0, 5))

    assert velocity.x > 0 and velocity.y > 0
    assert velocity.length() == pytest.approx(1.0)
    assert agent.move_direction_cache == velocity


def test_smooth_follow_snaps_when_turn_completes_in_one_step(fake_agent):
    path = smooth_path([(0, 5)], starting_position=(0, 0), turning_distance=0, stopping_distance=0)
    agent = fake_agent((0, 0), path=path, delta_time=1.0, use_smooth_path=True,
                       turning_speed=4.5, stopping_distance=0)
    agent.move_direction_cache = Vector2(1, 0)

    velocity = FollowPathBehavior().evaluate(agent, [], Vector2(0, 5))

    assert velocity.x == pytest.approx(0)
    assert velocity.y == pytest.approx(1)
