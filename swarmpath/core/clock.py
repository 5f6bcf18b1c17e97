# core/clock.py — simulation time and speed control

from swarmpath.settings import SPEED_STEPS


class SimClock:
    """
    Converts real elapsed seconds into simulation seconds.

    Each real second × speed multiplier is added to the sim time.
    Agents read `delta_time` for integration and smoothing, and
    `time_since_start` to hold back their first path request.
    """

    def __init__(self, speed_index: int = 1) -> None:
        self._speed_index = speed_index
        self.time_since_start: float = 0.0
        self.delta_time: float = 0.0
        self.frame: int = 0

    # --- Speed control ---

    @property
    def speed(self) -> int:
        return SPEED_STEPS[self._speed_index]

    @property
    def paused(self) -> bool:
        return self.speed == 0

    def cycle_speed(self) -> None:
        self._speed_index = (self._speed_index + 1) % len(SPEED_STEPS)

    def set_speed_index(self, index: int) -> None:
        if 0 <= index < len(SPEED_STEPS):
            self._speed_index = index

    # --- Tick ---

    def tick(self, dt: float) -> float:
        """Advance simulation time. dt = real seconds since last frame.
        Returns the scaled sim delta (0 while paused)."""
        self.delta_time = 0.0 if self.paused else dt * self.speed
        self.time_since_start += self.delta_time
        self.frame += 1
        return self.delta_time
