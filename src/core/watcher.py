"""Polling loop for the fissure watcher.

Each tick enforces a strict order:
1) Fetch the full remote collection
2) Reconcile it against the held snapshot by id
3) Filter the added fissures and notify (immediate + deferred)
4) Filter the full snapshot for display
5) Publish one event for the tick

The watcher is the only writer of the held snapshot. Configuration is read
from the shared store at each step, so settings changed mid-flight apply to
the next read rather than to the whole tick.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Tuple, Union

from core.config import SharedConfig
from core.errors import FetchError
from core.filters import apply_filters, explain
from core.models import Fissure
from core.ports import FissureSource
from core.reconciler import reconcile
from core.scheduler import NotificationScheduler

LOGGER = logging.getLogger(__name__)

EVENT_QUEUE_SIZE = 20


@dataclass(frozen=True)
class FissuresEvent:
    """The snapshot changed; carries the full and filtered views."""

    fissures: Tuple[Fissure, ...]
    filtered_fissures: Tuple[Fissure, ...]
    new_count: int
    removed_count: int = 0


@dataclass(frozen=True)
class NoNewFissuresEvent:
    """The fetch succeeded and nothing was added or removed."""


@dataclass(frozen=True)
class ErrorEvent:
    """The tick failed; the held snapshot is unchanged."""

    message: str


WatcherEvent = Union[FissuresEvent, NoNewFissuresEvent, ErrorEvent]


class WatcherState(enum.Enum):
    IDLE = "idle"
    POLLING = "polling"


class FissureWatcher:
    """Owns the fissure snapshot and drives reconcile, filter and notify."""

    def __init__(
        self,
        source: FissureSource,
        scheduler: NotificationScheduler,
        config: SharedConfig,
        *,
        queue_size: int = EVENT_QUEUE_SIZE,
    ) -> None:
        self._source = source
        self._scheduler = scheduler
        self._config = config
        self._fissures: Tuple[Fissure, ...] = ()
        self._state = WatcherState.IDLE
        self.events: asyncio.Queue[WatcherEvent] = asyncio.Queue(maxsize=queue_size)

    @property
    def fissures(self) -> Tuple[Fissure, ...]:
        return self._fissures

    @property
    def state(self) -> WatcherState:
        return self._state

    async def tick(self) -> WatcherEvent:
        """Run one polling cycle and publish its event."""

        self._state = WatcherState.POLLING
        try:
            event = await self._poll()
        finally:
            self._state = WatcherState.IDLE
        # Publishing blocks when the consumer falls behind; events are never dropped.
        await self.events.put(event)
        return event

    async def run(self) -> None:
        """Poll forever: first tick immediately, then every refresh_rate seconds.

        The next deadline is computed after each tick completes and clamped
        to now, so a slow tick delays the schedule instead of queuing ticks.
        """

        loop = asyncio.get_running_loop()
        deadline = loop.time()
        LOGGER.info("Fissure watcher started")
        while True:
            delay = deadline - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                LOGGER.exception("Error while polling fissures")
                await self.events.put(ErrorEvent(message=f"Unexpected error: {exc}"))
            refresh_rate = self._config.current().refresh_rate
            deadline = max(deadline + refresh_rate, loop.time())

    async def _poll(self) -> WatcherEvent:
        try:
            current = await self._source.fetch_fissures()
        except FetchError as exc:
            LOGGER.warning("Failed to fetch fissures: %s", exc)
            return ErrorEvent(message=f"Failed to fetch fissures: {exc}")

        result = reconcile(self._fissures, current)
        self._fissures = result.fissures

        if not result.changed:
            LOGGER.debug("No fissure changes (%s held)", len(self._fissures))
            return NoNewFissuresEvent()

        LOGGER.info(
            "Fissures updated: %s new, %s removed, %s held",
            result.added_count,
            result.removed_count,
            len(self._fissures),
        )

        if result.added:
            config = self._config.current()
            matching_new = apply_filters(result.added, config)
            if LOGGER.isEnabledFor(logging.DEBUG):
                for fissure in result.added:
                    rejected_by = explain(fissure, config)
                    if rejected_by:
                        LOGGER.debug("%s filtered out by %s", fissure, ", ".join(rejected_by))
            if matching_new:
                LOGGER.info("%s new fissure(s) match the filters", len(matching_new))
                await self._scheduler.notify_new(matching_new)

        if result.removed and self._scheduler.cancel_on_removal:
            self._scheduler.cancel(fissure.id for fissure in result.removed)

        filtered = apply_filters(self._fissures, self._config.current())
        return FissuresEvent(
            fissures=self._fissures,
            filtered_fissures=tuple(filtered),
            new_count=result.added_count,
            removed_count=result.removed_count,
        )
