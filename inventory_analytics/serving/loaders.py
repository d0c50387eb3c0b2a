"""
View Load Coordination

Each view load runs as a task tagged with a monotonically increasing
sequence number. Starting a load cancels the one in flight, and a result
is applied only when its sequence number is still the latest issued, so
the last request wins regardless of which response resolves first.

A failed load keeps the previously applied data and records the error.
"""

import asyncio
from datetime import datetime
from typing import Awaitable, Callable, Generic, Optional, TypeVar

import structlog
from pydantic import BaseModel, computed_field

from inventory_analytics.exceptions import InventoryAnalyticsError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ViewState(BaseModel, Generic[T]):
    """
    What a view currently shows.

    ``sequence`` is the load that produced ``data`` (0 before any load
    succeeded). ``error`` is set when the latest load failed, in which case
    ``data`` is the last good result, or the empty default on first load.
    """
    data: T
    sequence: int = 0
    loaded_at: Optional[datetime] = None
    error: Optional[str] = None

    @computed_field
    @property
    def stale(self) -> bool:
        return self.error is not None and self.sequence > 0


class LoadCoordinator(Generic[T]):
    """
    Serialises loads of one view with last-request-wins semantics.

    Example:
        dashboard = LoadCoordinator("dashboard", DashboardData())
        state = await dashboard.load(lambda: load_dashboard(data_access, store_id))
    """

    def __init__(self, name: str, initial: T):
        self.name = name
        self.state: ViewState[T] = ViewState[type(initial)](data=initial)
        self._latest = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def latest_sequence(self) -> int:
        return self._latest

    async def _run(self, sequence: int, loader: Callable[[], Awaitable[T]]) -> None:
        try:
            data = await loader()
        except asyncio.CancelledError:
            logger.debug("Superseded load cancelled", view=self.name, sequence=sequence)
            raise
        except InventoryAnalyticsError as e:
            if sequence == self._latest:
                logger.warning("View load failed, keeping previous data", view=self.name, sequence=sequence, error=str(e))
                self.state = self.state.model_copy(update={"error": str(e)})
            return

        if sequence != self._latest:
            logger.debug("Discarding stale load result", view=self.name, sequence=sequence, latest=self._latest)
            return

        self.state = self.state.model_copy(
            update={
                "data": data,
                "sequence": sequence,
                "loaded_at": datetime.now(),
                "error": None,
            }
        )
        logger.debug("View loaded", view=self.name, sequence=sequence)

    async def load(self, loader: Callable[[], Awaitable[T]]) -> ViewState[T]:
        """
        Start a load, superseding any load in flight, and return the state
        once the latest load has settled.

        Backend failures are reported through ``ViewState.error``; any other
        exception raised by ``loader`` propagates.
        """
        self._latest += 1
        sequence = self._latest

        if self._task is not None and not self._task.done():
            self._task.cancel()

        task = asyncio.create_task(self._run(sequence, loader))
        self._task = task

        state = await self.settled()
        if task.done() and not task.cancelled() and task.exception() is not None:
            raise task.exception()
        return state

    async def settled(self) -> ViewState[T]:
        """Wait until no load is in flight and return the applied state"""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self.state
