# pathing/dispatcher.py — runs path searches off the tick and hands results back

from __future__ import annotations
import logging
import threading
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Optional, TYPE_CHECKING

from swarmpath import settings
from swarmpath.pathing.pathfinder import AStar

if TYPE_CHECKING:
    from swarmpath.core.event_bus import EventBus
    from swarmpath.pathing.request import PathRequest, PathResult

logger = logging.getLogger(__name__)


class PathRequestDispatcher:
    """
    Decouples asking for a path from consuming it.

    request_path() hands the search to a bounded worker pool. Finished
    results go onto a queue guarded by one lock. drain(), called once per
    tick on the simulation thread, pops every queued result and calls its
    callback there, in the order the searches completed.

    A request whose cancel token is set is dropped, either before its
    search starts or before its callback would run.
    """

    def __init__(
        self,
        pathfinder: Optional[AStar] = None,
        event_bus: Optional[EventBus] = None,
        max_workers: int = settings.PATH_WORKERS,
    ) -> None:
        self._pathfinder = pathfinder or AStar()
        self._bus = event_bus
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix="path-worker")
        self._results: deque[PathResult] = deque()
        self._lock = threading.Lock()
        self._futures: set[Future] = set()
        self._futures_lock = threading.Lock()

    @property
    def pathfinder(self) -> AStar:
        return self._pathfinder

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def request_path(self, request: PathRequest) -> Future:
        """Submit a search. The returned future resolves to True when a
        result was queued, False when the request was dropped."""
        future = self._executor.submit(self._process, request)
        with self._futures_lock:
            self._futures.add(future)
        future.add_done_callback(self._forget)
        return future

    def _process(self, request: PathRequest) -> bool:
        if request.cancel_token.cancelled:
            logger.debug("%s cancelled before search", request.request_id)
            return False
        try:
            result = self._pathfinder.find_path(request)
        except Exception:
            # The future carries the exception; nothing is queued
            logger.exception("Path search %s crashed", request.request_id)
            raise
        result.cancel_token = request.cancel_token
        self._finish(result)
        return True

    def _finish(self, result: PathResult) -> None:
        with self._lock:
            self._results.append(result)

    def _forget(self, future: Future) -> None:
        with self._futures_lock:
            self._futures.discard(future)

    # ------------------------------------------------------------------
    # Consumer side (simulation thread)
    # ------------------------------------------------------------------

    def drain(self) -> int:
        """Invoke the callback of every queued result. Returns how many ran."""
        if not self._results:
            return 0

        with self._lock:
            ready = list(self._results)
            self._results.clear()

        # Callbacks run outside the lock so workers can keep queueing
        invoked = 0
        for result in ready:
            if result.cancel_token is not None and result.cancel_token.cancelled:
                logger.debug("%s cancelled, result dropped", result.request_id)
                continue
            result.invoke()
            invoked += 1
            self._publish(result)
        return invoked

    def _publish(self, result: PathResult) -> None:
        if not self._bus:
            return
        if not result.searched:
            self._bus.publish("PATH_SKIPPED", {"result": result})
        elif result.success:
            self._bus.publish("PATH_FOUND", {"result": result})
        else:
            self._bus.publish("PATH_FAILED", {"result": result})

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def pending_results(self) -> int:
        with self._lock:
            return len(self._results)

    @property
    def in_flight(self) -> int:
        with self._futures_lock:
            return len(self._futures)

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until every submitted search finished. False on timeout."""
        with self._futures_lock:
            futures = list(self._futures)
        _, not_done = wait(futures, timeout=timeout)
        return not not_done

    def shutdown(self, wait_for_searches: bool = True) -> None:
        self._executor.shutdown(wait=wait_for_searches, cancel_futures=not wait_for_searches)
