# settings.py — single source of truth for all constants

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

# --- Simulation ---
FPS = 60
FIRST_REQUEST_DELAY = 0.3    # sim seconds before an agent may send its first path request
SPEED_STEPS = [0, 1, 2, 4]   # 0 = paused

# --- Grid ---
CELL_RADIUS = 0.5            # half of a cell's width, world units
WORLD_SIZE = (20.0, 20.0)    # snapped to a multiple of the cell diameter on activation

# --- Pathfinding ---
STRAIGHT_STEP_COST = 10
DIAGONAL_STEP_COST = 14
PATH_WORKERS = 4             # size of the path search worker pool
LOG_SEARCH_TIME = False      # log how long each A* search takes

# --- Path following ---
WAYPOINT_REACHED_EPSILON = 0.01   # straight paths advance inside this distance
MIN_SPEED_PERCENT = 0.01          # deceleration below this snaps to a full stop
VERTICAL_LINE_GRADIENT = 1e5      # stands in for an infinite slope

# --- Agent ---
AGENT_SPEED = 1.0
AGENT_STOPPING_DISTANCE = 1.0
AGENT_DETECTION_RADIUS = 1.0
AGENT_TURNING_DISTANCE = 0.0
AGENT_TURNING_SPEED = 4.5
AGENT_LAYER = "agents"
FIRST_AGENT_PRIORITY = 1     # 0 is reserved for stationary agents

# --- Behaviors ---
USE_CONGESTION_CONTROL = False
FOLLOW_PATH_WEIGHT = 1.0
AVOIDANCE_WEIGHT = 1.0


@dataclass
class GridSettings:
    """Placement and resolution of one pathfinding grid."""
    agent_type: str = "A"
    center: tuple[float, float] = (0.0, 0.0)
    world_size: tuple[float, float] = WORLD_SIZE
    cell_radius: float = CELL_RADIUS


@dataclass
class AgentSettings:
    """
    Per-agent options. Defaults mirror the module constants above.
    """
    agent_type: str = "A"
    speed_multiplier: float = AGENT_SPEED
    stopping_distance: float = AGENT_STOPPING_DISTANCE
    detection_radius: float = AGENT_DETECTION_RADIUS
    use_smooth_path: bool = False
    turning_distance: float = AGENT_TURNING_DISTANCE
    turning_speed: float = AGENT_TURNING_SPEED
    reach_exact_target: bool = False
    keep_following_last_waypoint: bool = True
    rotate_with_movement: bool = False
    layer: str = AGENT_LAYER
    first_request_delay: Optional[float] = None   # None = FIRST_REQUEST_DELAY

    def __post_init__(self) -> None:
        if self.speed_multiplier < 0:
            raise ValueError("speed_multiplier must be >= 0")
        if self.detection_radius < 0:
            raise ValueError("detection_radius must be >= 0")
        if self.turning_distance < 0:
            raise ValueError("turning_distance must be >= 0")
        if self.turning_speed < 0:
            raise ValueError("turning_speed must be >= 0")
