# core/errors.py — exception types raised for fatal setup problems

class SwarmPathError(Exception):
    """Base class for every error raised by swarmpath."""


class ConfigurationError(SwarmPathError):
    """The simulation was wired up with settings that cannot work."""


class GridConfigurationError(ConfigurationError):
    """No grid is registered for an agent's type."""

    def __init__(self, agent_type: str) -> None:
        super().__init__(f"No grid set for agent of type {agent_type}")
        self.agent_type = agent_type


class BehaviorConfigurationError(ConfigurationError):
    """A composite behavior has a different number of weights than behaviors."""


class GridNotActiveError(SwarmPathError):
    """A grid was queried before activate() or after deactivate()."""
