"""Ports (interfaces) used by the core watcher.

Ports define the minimal contracts for the fissure source and notification
adapters so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import List, Protocol

from core.models import Fissure


class FissureSource(Protocol):
    """Read access to the full current fissure collection."""

    async def fetch_fissures(self) -> List[Fissure]:
        """Return every active fissure or raise FetchError."""
        ...


class NotifierPort(Protocol):
    """Notification operations required by the scheduler."""

    async def send(self, summary: str, body: str) -> None:
        """Deliver one notification or raise NotifyError."""
        ...
