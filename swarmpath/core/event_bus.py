# core/event_bus.py — lightweight publish/subscribe event system

from collections import defaultdict
from typing import Callable, Optional


class EventBus:
    """
    Decouples modules by letting them communicate through named events.
    Any module can publish without knowing who is listening.

    Events used across the system:
      "GRID_ACTIVATED"    data: {"grid": Grid}
      "PATH_REQUESTED"    data: {"agent": Agent, "request": PathRequest}
      "PATH_FOUND"        data: {"result": PathResult}
      "PATH_FAILED"       data: {"result": PathResult}
      "PATH_SKIPPED"      data: {"result": PathResult}
      "AGENT_SPAWNED"     data: {"agent": Agent}
      "AGENT_DESPAWNED"   data: {"agent": Agent}

    Publishing is not thread-safe. Path workers never publish; the
    dispatcher publishes from drain() on the tick thread.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: str, callback: Callable) -> None:
        self._listeners[event_type].append(callback)

    def unsubscribe(self, event_type: str, callback: Callable) -> None:
        listeners = self._listeners[event_type]
        if callback in listeners:
            listeners.remove(callback)

    def publish(self, event_type: str, data: Optional[dict] = None) -> None:
        for callback in list(self._listeners[event_type]):
            callback(data or {})
