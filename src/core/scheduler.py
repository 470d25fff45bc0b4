"""Immediate and deferred fissure notifications.

Every tick that finds matching new fissures sends one batched notification,
then schedules one independent task per fissure that fires shortly before
that fissure expires.

Deferred tasks are not cancelled when their fissure disappears from the
remote collection unless ``cancel_on_removal`` is enabled; by default a
notification can fire for a fissure that is no longer tracked.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional, Sequence

from core.config import SharedConfig
from core.errors import NotifyError
from core.models import Fissure
from core.ports import NotifierPort

LOGGER = logging.getLogger(__name__)

NEW_FISSURES_SUMMARY = "New Fissures"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def expiry_summary(lead_seconds: int) -> str:
    return f"Fissure is Expiring In {lead_seconds} Seconds"


class NotificationScheduler:
    """Sends new-fissure notifications and tracks deferred expiry tasks."""

    def __init__(
        self,
        notifier: NotifierPort,
        config: SharedConfig,
        *,
        clock: Callable[[], datetime] = utc_now,
        cancel_on_removal: bool = False,
    ) -> None:
        self._notifier = notifier
        self._config = config
        self._clock = clock
        self._cancel_on_removal = cancel_on_removal
        # Strong references keep running tasks from being garbage collected.
        self._tasks: set[asyncio.Task] = set()
        self._tasks_by_id: dict[str, asyncio.Task] = {}

    @property
    def pending(self) -> frozenset[asyncio.Task]:
        return frozenset(self._tasks)

    @property
    def cancel_on_removal(self) -> bool:
        return self._cancel_on_removal

    async def notify_new(self, fissures: Sequence[Fissure]) -> None:
        """Notify about matching new fissures and schedule their expiry alerts."""

        if not fissures:
            return

        body = "\n".join(str(fissure) for fissure in fissures)
        await self._deliver(NEW_FISSURES_SUMMARY, body)

        for fissure in fissures:
            self.schedule_expiry(fissure)

    def schedule_expiry(self, fissure: Fissure) -> Optional[asyncio.Task]:
        """Schedule the expiry notification for one fissure.

        The lead time is read from the shared config at scheduling time. If
        the notification instant has already passed, nothing is scheduled.
        """

        lead = self._config.current().time_before_expiry_notification
        fire_at = fissure.expiry - timedelta(seconds=lead)
        delay = (fire_at - self._clock()).total_seconds()
        if delay <= 0:
            LOGGER.debug("Skipping expiry notification for %s (%.0fs late)", fissure.id, -delay)
            return None

        task = asyncio.create_task(
            self._notify_expiry(fissure, lead, delay),
            name=f"expiry-notification:{fissure.id}",
        )
        self._tasks.add(task)
        if self._cancel_on_removal:
            self._tasks_by_id[fissure.id] = task
        task.add_done_callback(self._forget)
        LOGGER.debug("Expiry notification for %s in %.0fs", fissure.id, delay)
        return task

    def cancel(self, fissure_ids: Iterable[str]) -> int:
        """Cancel pending expiry notifications for the given fissure ids.

        Only tasks registered while ``cancel_on_removal`` is enabled can be
        cancelled. Returns how many tasks were cancelled.
        """

        cancelled = 0
        for fissure_id in fissure_ids:
            task = self._tasks_by_id.pop(fissure_id, None)
            if task is not None and not task.done():
                task.cancel()
                cancelled += 1
        if cancelled:
            LOGGER.info("Cancelled %s expiry notification(s) for removed fissures", cancelled)
        return cancelled

    async def shutdown(self) -> None:
        """Cancel every outstanding expiry task and wait for them to finish."""

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _forget(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        for fissure_id, tracked in list(self._tasks_by_id.items()):
            if tracked is task:
                del self._tasks_by_id[fissure_id]

    async def _notify_expiry(self, fissure: Fissure, lead: int, delay: float) -> None:
        await asyncio.sleep(delay)
        await self._deliver(expiry_summary(lead), str(fissure))

    async def _deliver(self, summary: str, body: str) -> bool:
        # Delivery failures are never retried and never propagate to the
        # poll loop or to other expiry tasks.
        try:
            await self._notifier.send(summary, body)
        except NotifyError as exc:
            LOGGER.warning("Notification %r failed: %s", summary, exc)
            return False
        except Exception:
            LOGGER.exception("Unexpected notifier error for %r", summary)
            return False
        return True
