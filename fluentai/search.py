"""Debounced, epoch-tagged article search.

Every criteria change bumps the epoch and restarts the debounce timer. A
response is applied only if its epoch is still current; older responses are
dropped, not aborted (the transport cannot cancel a request).

    Idle -> Pending -> InFlight -> (Idle | InFlight)
"""

import asyncio
from enum import Enum
from typing import Callable, Optional

from .api import ApiError, log_event
from .content_service import ContentService
from .models import Article, SearchCriteria

DEBOUNCE_SECONDS = 0.3


class SearchState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    IN_FLIGHT = "in_flight"


class SearchQueryController:
    """Turns a stream of SearchCriteria into at most one live list query."""

    def __init__(
        self,
        service: ContentService,
        on_results: Optional[Callable[[list[Article]], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
        debounce: float = DEBOUNCE_SECONDS,
        criteria: Optional[SearchCriteria] = None,
    ):
        self.service = service
        self.on_results = on_results
        self.on_error = on_error
        self.debounce = debounce
        self.criteria = criteria or SearchCriteria()
        self.epoch = 0
        self.state = SearchState.IDLE
        self.results: list[Article] = []
        self.error: Optional[str] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._tasks: set[asyncio.Task] = set()
        self._idle = asyncio.Event()
        self._idle.set()

    def update(self, criteria: SearchCriteria) -> int:
        """Replace the criteria and (re)start the debounce timer.

        Must be called from the event loop thread.

        Returns:
            The new epoch
        """
        self.criteria = criteria
        self.epoch += 1
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.debounce, self._fire, self.epoch, criteria)
        self.state = SearchState.PENDING
        self._idle.clear()
        log_event("search", f"epoch {self.epoch}: {criteria.params() or 'all'} (debounce {self.debounce:.2f}s)")
        return self.epoch

    def refresh(self) -> int:
        """Reload the current criteria (no caching across queries)."""
        return self.update(self.criteria)

    def close(self) -> None:
        """Drop the pending timer and ignore any response still in flight."""
        self._cancel_timer()
        self.epoch += 1
        self.state = SearchState.IDLE
        self._idle.set()

    async def wait_idle(self) -> None:
        """Wait until the current epoch has settled (results or error)."""
        await self._idle.wait()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, epoch: int, criteria: SearchCriteria) -> None:
        self._timer = None
        if epoch != self.epoch:
            return
        self.state = SearchState.IN_FLIGHT
        task = asyncio.get_running_loop().create_task(self._run(epoch, criteria))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, epoch: int, criteria: SearchCriteria) -> None:
        try:
            results = await self.service.list(criteria)
        except ApiError as e:
            if epoch != self.epoch:
                log_event("search", f"epoch {epoch} failed after being superseded, ignored")
                return
            self._settle([], e.message)
            return

        if epoch != self.epoch:
            log_event("search", f"epoch {epoch} superseded by {self.epoch}, {len(results)} results dropped")
            return
        self._settle(results, None)

    def _settle(self, results: list[Article], error: Optional[str]) -> None:
        self.results = results
        self.error = error
        self.state = SearchState.IDLE
        self._idle.set()
        log_event("search", f"epoch {self.epoch}: " + (f"error: {error}" if error else f"{len(results)} results"))
        if self.on_results:
            self.on_results(results)
        if error and self.on_error:
            self.on_error(error)
