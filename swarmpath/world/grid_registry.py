# world/grid_registry.py — grids available for pathfinding, one per agent type

from __future__ import annotations
from typing import Iterable, Optional, TYPE_CHECKING

from swarmpath.core.errors import GridConfigurationError
from swarmpath.world.grid import Grid

if TYPE_CHECKING:
    from swarmpath.core.event_bus import EventBus
    from swarmpath.settings import GridSettings
    from swarmpath.world.obstacles import ObstacleOracle


class GridRegistry:
    """
    Maps agent types to the grid their paths are searched on.
    Agents of different sizes use differently sized cells, hence one
    grid per type.
    """

    def __init__(self) -> None:
        self._grids: dict[str, Grid] = {}

    @classmethod
    def build(
        cls,
        grid_settings: Iterable[GridSettings],
        oracle: ObstacleOracle,
        event_bus: Optional[EventBus] = None,
    ) -> GridRegistry:
        """Create and activate one grid per settings entry."""
        registry = cls()
        for gs in grid_settings:
            grid = Grid.from_settings(gs, oracle, event_bus)
            grid.activate()
            registry.register(grid)
        return registry

    def register(self, grid: Grid) -> None:
        self._grids[grid.agent_type] = grid

    def get_grid(self, agent_type: str) -> Grid:
        grid = self._grids.get(agent_type)
        if grid is None:
            raise GridConfigurationError(agent_type)
        return grid

    @property
    def grids(self) -> list[Grid]:
        return list(self._grids.values())

    @property
    def global_max_size(self) -> int:
        """Node count of the largest grid."""
        return max((g.max_size for g in self._grids.values()), default=0)

    def __contains__(self, agent_type: str) -> bool:
        return agent_type in self._grids

    def __len__(self) -> int:
        return len(self._grids)
