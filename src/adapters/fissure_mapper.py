"""Warframestat JSON to core fissure mapping adapter.

This keeps the remote API's field names and formats out of the core.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from core.errors import FetchError
from core.models import Faction, Fissure, MissionType, Tier

LOGGER = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed) into aware UTC."""

    if not isinstance(value, str):
        raise ValueError(f"expected ISO-8601 string, got {value!r}")
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def fissure_from_json(record: dict[str, Any]) -> Optional[Fissure]:
    """Build a Fissure from one API record.

    Returns None when the record uses a mission type, tier or faction the
    watcher does not know (new game content). Raises FetchError when the
    record is structurally broken.
    """

    try:
        fissure_id = str(record["id"])
        activation = parse_timestamp(record["activation"])
        expiry = parse_timestamp(record["expiry"])
        raw_mission = record["missionType"]
        raw_tier = record["tier"]
        raw_enemy = record["enemy"]
    except (KeyError, TypeError, ValueError) as exc:
        raise FetchError(f"malformed fissure record: {exc}") from exc

    try:
        mission_type = MissionType(raw_mission)
        tier = Tier(raw_tier)
        faction = Faction(raw_enemy)
    except ValueError as exc:
        LOGGER.warning("Skipping fissure %s: %s", fissure_id, exc)
        return None

    return Fissure(
        id=fissure_id,
        activation=activation,
        expiry=expiry,
        mission_type=mission_type,
        tier=tier,
        faction=faction,
        node=str(record.get("node", "")),
        is_storm=bool(record.get("isStorm", False)),
        is_hard=bool(record.get("isHard", False)),
    )


def parse_fissures(payload: Any) -> List[Fissure]:
    """Map the ``/fissures`` payload to core fissures, in payload order."""

    if not isinstance(payload, list):
        raise FetchError(f"expected a list of fissures, got {type(payload).__name__}")

    fissures: List[Fissure] = []
    for record in payload:
        if not isinstance(record, dict):
            raise FetchError(f"expected a fissure object, got {type(record).__name__}")
        fissure = fissure_from_json(record)
        if fissure is not None:
            fissures.append(fissure)
    return fissures
