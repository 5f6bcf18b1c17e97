# pathing/request.py — value objects handed across the path worker boundary

from __future__ import annotations
import threading
import uuid
from dataclasses import dataclass, field
from typing import Callable, Optional, TYPE_CHECKING

from pygame.math import Vector2

if TYPE_CHECKING:
    from swarmpath.world.grid import Grid
    from swarmpath.world.node import Node

# callback(waypoints, success, end_node)
PathCallback = Callable[[list[Vector2], bool, Optional["Node"]], None]


class CancelToken:
    """Set once a request is superseded; workers and drain() check it."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class PathRequest:
    start: Vector2
    end: Vector2
    grid: Grid
    callback: PathCallback
    end_node_cache: Optional[Node] = None   # end node of the previous request
    cancel_token: CancelToken = field(default_factory=CancelToken)
    request_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])

    def __post_init__(self) -> None:
        # Copy so later moves of the agent/target don't leak into the search
        self.start = Vector2(self.start)
        self.end = Vector2(self.end)

    def __repr__(self) -> str:
        return (f"PathRequest({self.request_id} {tuple(self.start)} -> "
                f"{tuple(self.end)} on {self.grid!r})")


@dataclass
class PathResult:
    waypoints: list[Vector2]
    success: bool
    end_node: Optional[Node]
    callback: PathCallback
    request_id: str          = ""
    searched: bool           = True    # False when the end-node cache skipped the search
    elapsed_ms: float        = 0.0
    cancel_token: Optional[CancelToken] = None

    def invoke(self) -> None:
        self.callback(self.waypoints, self.success, self.end_node)

    def __repr__(self) -> str:
        status = "ok" if self.success else ("skipped" if not self.searched else "failed")
        return f"PathResult({self.request_id} {status} waypoints={len(self.waypoints)})"
