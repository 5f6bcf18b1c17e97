# paths/path.py — waypoint sequence followed by an agent, straight or smoothed

from __future__ import annotations
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from pygame.math import Vector2

from swarmpath.paths.line import Line
from swarmpath.settings import WAYPOINT_REACHED_EPSILON


class PathKind(Enum):
    STRAIGHT = "STRAIGHT"   # head straight at each waypoint until touching it
    SMOOTH   = "SMOOTH"     # start turning when a waypoint's boundary is crossed


@dataclass
class Path:
    """
    Waypoints returned by A* (start cell excluded) plus a cursor.

    A fresh Path is built for every successful search; an agent never
    edits its old path in place.
    """
    kind: PathKind
    waypoints: list[Vector2]
    stopping_index: int                 # deceleration starts at this waypoint
    current_index: int = 0
    reached_end: bool = False
    turning_boundaries: list[Line] = field(default_factory=list)   # SMOOTH only
    origin: Optional[Vector2] = None    # where the agent stood when the path was made

    @property
    def last_index(self) -> int:
        return len(self.waypoints) - 1

    @property
    def current_waypoint(self) -> Vector2:
        return self.waypoints[self.current_index]

    @property
    def final_waypoint(self) -> Vector2:
        return self.waypoints[-1]

    def increment_path_index(self) -> bool:
        """Move the cursor to the next waypoint. Returns False once the
        cursor has run past the last one (it stays on the last index)."""
        if self.reached_end:
            return False
        self.current_index += 1
        if self.current_index > self.last_index:
            self.reached_end = True
            self.current_index -= 1
            return False
        return True

    def update_index(self, position, step: float = 0.0) -> None:
        """
        Advance the cursor past every waypoint the position has reached.
        `step` is how far the agent moved this tick; a straight-path
        waypoint within that distance, or already passed, counts as reached.
        """
        if self.kind == PathKind.SMOOTH:
            while self.turning_boundaries[self.current_index].has_crossed_line(position):
                if self.reached_end:
                    break
                self.increment_path_index()
        else:
            while not self.reached_end and self._waypoint_reached(position, step):
                self.increment_path_index()

    def _waypoint_reached(self, position, step: float) -> bool:
        waypoint = self.current_waypoint
        if waypoint.distance_to(position) < max(WAYPOINT_REACHED_EPSILON, step):
            return True

        previous = self.waypoints[self.current_index - 1] if self.current_index > 0 else self.origin
        if previous is None:
            return False
        segment = waypoint - previous
        # Past the waypoint once it lies behind the agent along its segment
        return segment.length_squared() > 0 and segment.dot(waypoint - Vector2(position)) <= 0

    def remaining_distance(self, position) -> float:
        """Distance left to the end of the path."""
        if self.kind == PathKind.SMOOTH:
            squared = self.turning_boundaries[self.last_index].get_distance_from_point(position)
            return math.sqrt(squared)
        return self.final_waypoint.distance_to(position)

    def __repr__(self) -> str:
        return (f"Path({self.kind.value} {self.current_index + 1}/{len(self.waypoints)}"
                f"{' end' if self.reached_end else ''})")


# ----------------------------------------------------------------------
# Construction
# ----------------------------------------------------------------------

def straight_path(
    waypoints: Sequence,
    stopping_distance: float,
    exact_target: Optional[Vector2] = None,
    starting_position=None,
) -> Path:
    points = _prepare_waypoints(waypoints, exact_target)
    return Path(
        kind=PathKind.STRAIGHT,
        waypoints=points,
        stopping_index=get_stopping_index(points, stopping_distance),
        origin=Vector2(starting_position) if starting_position is not None else None,
    )


def smooth_path(
    waypoints: Sequence,
    starting_position,
    turning_distance: float,
    stopping_distance: float,
    exact_target: Optional[Vector2] = None,
) -> Path:
    points = _prepare_waypoints(waypoints, exact_target)
    return Path(
        kind=PathKind.SMOOTH,
        waypoints=points,
        stopping_index=get_stopping_index(points, stopping_distance),
        turning_boundaries=build_turning_boundaries(points, starting_position, turning_distance),
        origin=Vector2(starting_position),
    )


def build_turning_boundaries(points: list[Vector2], starting_position,
                             turning_distance: float) -> list[Line]:
    """
    One boundary per waypoint, pulled back toward the previous point by
    turning_distance. The last boundary sits on its waypoint.
    """
    boundaries = []
    previous = Vector2(starting_position)
    last = len(points) - 1
    for i, point in enumerate(points):
        offset = point - previous
        direction = offset.normalize() if offset.length_squared() > 0 else Vector2()
        turning_point = point if i == last else point - direction * turning_distance
        # The previous point, pushed back by the same amount, marks the
        # approach side even when turning_distance exceeds the segment
        boundaries.append(Line(turning_point, previous - direction * turning_distance))
        previous = point
    return boundaries


def get_stopping_index(points: Sequence[Vector2], stopping_distance: float) -> int:
    """Index of the waypoint at which the agent should start slowing down."""
    distance_from_end = 0.0
    for i in range(len(points) - 1, 0, -1):
        distance_from_end += points[i].distance_to(points[i - 1])
        if distance_from_end > stopping_distance:
            return i
    return len(points) - 1


def _prepare_waypoints(waypoints: Sequence, exact_target: Optional[Vector2]) -> list[Vector2]:
    if not waypoints:
        raise ValueError("a path needs at least one waypoint")
    points = [Vector2(p) for p in waypoints]
    if exact_target is not None:
        points[-1] = Vector2(exact_target)
    return points
