# paths/line.py — turning boundary crossed by agents following a smooth path

from __future__ import annotations
from enum import Enum

from pygame.math import Vector2

from swarmpath.settings import VERTICAL_LINE_GRADIENT


class Side(Enum):
    ABOVE = "ABOVE"
    BELOW = "BELOW"


class Line:
    """
    Infinite line through `point_on_line`, perpendicular to the segment
    from `point_perpendicular` to `point_on_line`.

    The side `point_perpendicular` lies on is the approach side; a point
    on the other side has crossed the line.
    """

    __slots__ = ("gradient", "gradient_perpendicular", "y_intercept",
                 "point_on_line_1", "point_on_line_2", "approach_side")

    def __init__(self, point_on_line, point_perpendicular) -> None:
        point_on_line = Vector2(point_on_line)
        point_perpendicular = Vector2(point_perpendicular)
        dx = point_on_line.x - point_perpendicular.x
        dy = point_on_line.y - point_perpendicular.y

        self.gradient_perpendicular = dy / dx if dx != 0 else VERTICAL_LINE_GRADIENT
        self.gradient = (-1 / self.gradient_perpendicular
                         if self.gradient_perpendicular != 0 else VERTICAL_LINE_GRADIENT)
        self.y_intercept = point_on_line.y - self.gradient * point_on_line.x

        # Any two points on the line are enough for the side test
        self.point_on_line_1 = point_on_line
        self.point_on_line_2 = point_on_line + Vector2(1, self.gradient)

        self.approach_side = Side.ABOVE
        self.approach_side = self.get_side(point_perpendicular)

    @property
    def center(self) -> Vector2:
        return Vector2(self.point_on_line_1)

    def get_side(self, point) -> Side:
        p1, p2 = self.point_on_line_1, self.point_on_line_2
        cross = (point[0] - p1.x) * (p2.y - p1.y) - (point[1] - p1.y) * (p2.x - p1.x)
        return Side.ABOVE if cross > 0 else Side.BELOW

    def has_crossed_line(self, point) -> bool:
        return self.get_side(point) != self.approach_side

    def get_distance_from_point(self, point) -> float:
        """Squared distance from a point to its foot on this line."""
        x, y = point[0], point[1]
        y_intercept_perpendicular = y - self.gradient_perpendicular * x
        intersect_x = ((y_intercept_perpendicular - self.y_intercept)
                       / (self.gradient - self.gradient_perpendicular))
        intersect_y = self.gradient * intersect_x + self.y_intercept
        return (Vector2(x, y) - Vector2(intersect_x, intersect_y)).length_squared()

    def __repr__(self) -> str:
        return (f"Line(through={tuple(self.point_on_line_1)} "
                f"gradient={self.gradient:.3f} approach={self.approach_side.value})")
