from __future__ import annotations

from datetime import datetime, timedelta, timezone

from core.models import Faction, Fissure, MissionType, Tier
from core.reconciler import reconcile

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def _fissure(fissure_id: str, *, node: str = "Hepit (Void)") -> Fissure:
    return Fissure(
        id=fissure_id,
        activation=NOW,
        expiry=NOW + timedelta(hours=1),
        mission_type=MissionType.CAPTURE,
        tier=Tier.LITH,
        faction=Faction.OROKIN,
        node=node,
    )


def test_added_and_removed_by_id() -> None:
    a, b, c = _fissure("a"), _fissure("b"), _fissure("c")

    result = reconcile([a, b], [b, c])

    assert [f.id for f in result.added] == ["c"]
    assert [f.id for f in result.removed] == ["a"]
    assert result.added_count == 1
    assert result.removed_count == 1
    assert len(result.fissures) == 2 - 1 + 1


def test_untouched_order_kept_and_added_appended() -> None:
    held = [_fissure("a"), _fissure("b"), _fissure("c")]
    current = [_fissure("d"), _fissure("c"), _fissure("a"), _fissure("e")]

    result = reconcile(held, current)

    assert [f.id for f in result.fissures] == ["a", "c", "d", "e"]
    # Added fissures form the suffix of the new snapshot.
    assert result.fissures[-result.added_count :] == result.added


def test_reconcile_against_itself_has_no_changes() -> None:
    held = [_fissure("a"), _fissure("b")]

    result = reconcile(held, list(held))

    assert result.added_count == 0
    assert result.removed_count == 0
    assert not result.changed
    assert result.fissures == tuple(held)


def test_persisting_fissure_is_not_refreshed() -> None:
    old = _fissure("a", node="Old Node")
    updated = _fissure("a", node="New Node")

    result = reconcile([old], [updated])

    assert not result.changed
    assert result.fissures[0].node == "Old Node"


def test_empty_fetch_removes_everything() -> None:
    held = [_fissure("a"), _fissure("b")]

    result = reconcile(held, [])

    assert result.removed_count == 2
    assert result.fissures == ()


def test_duplicate_ids_in_fetch_collapse_to_first() -> None:
    first = _fissure("a", node="First")
    second = _fissure("a", node="Second")

    result = reconcile([], [first, second])

    assert result.added == (first,)
