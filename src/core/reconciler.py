"""Snapshot reconciliation (core domain).

Fissures are diffed by id only. A fissure present in both snapshots keeps
the held instance even if the remote copy changed; update detection is
deliberately absent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from core.models import Fissure


@dataclass(frozen=True)
class Reconciliation:
    """Result of diffing the held snapshot against a fresh fetch."""

    fissures: Tuple[Fissure, ...]
    added: Tuple[Fissure, ...]
    removed: Tuple[Fissure, ...]

    @property
    def added_count(self) -> int:
        return len(self.added)

    @property
    def removed_count(self) -> int:
        return len(self.removed)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


def reconcile(held: Sequence[Fissure], current: Iterable[Fissure]) -> Reconciliation:
    """Diff ``held`` against ``current`` by id.

    The new snapshot keeps untouched fissures in their held order and appends
    added ones at the end, in fetch order. An empty ``current`` is treated as
    "everything expired".
    """

    current_by_id: dict[str, Fissure] = {}
    for fissure in current:
        # First occurrence wins when the source repeats an id.
        current_by_id.setdefault(fissure.id, fissure)

    held_ids = {fissure.id for fissure in held}
    kept = tuple(fissure for fissure in held if fissure.id in current_by_id)
    removed = tuple(fissure for fissure in held if fissure.id not in current_by_id)
    added = tuple(fissure for fid, fissure in current_by_id.items() if fid not in held_ids)

    return Reconciliation(fissures=kept + added, added=added, removed=removed)
