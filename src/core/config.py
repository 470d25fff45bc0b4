"""Core configuration dataclasses.

We keep config file parsing outside the core, but these dataclasses define
the shape the core expects so settings and frontend layers can build safely.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Type, TypeVar

from core.errors import ConfigError
from core.models import ExclusivityFilter, Faction, MissionType, Tier

E = TypeVar("E", bound=Enum)


def _parse_enum(enum_cls: Type[E], raw: Any, field_name: str) -> E:
    try:
        return enum_cls(raw)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigError(f"{field_name}: {raw!r} is not one of {allowed}") from None


def _parse_enum_set(enum_cls: Type[E], raw: Any, field_name: str) -> frozenset[E]:
    if not isinstance(raw, list):
        raise ConfigError(f"{field_name} must be a list")
    return frozenset(_parse_enum(enum_cls, item, field_name) for item in raw)


def _parse_seconds(raw: Any, field_name: str, minimum: int) -> int:
    # bool is an int subclass; reject it explicitly.
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ConfigError(f"{field_name} must be an integer number of seconds")
    if raw < minimum:
        raise ConfigError(f"{field_name} must be >= {minimum}")
    return raw


def _sorted_values(members: Iterable[Enum], enum_cls: Type[Enum]) -> list[str]:
    order = list(enum_cls)
    return [member.value for member in sorted(members, key=order.index)]


@dataclass(frozen=True)
class WatcherConfig:
    """Filter and timing settings read by the poll loop and scheduler."""

    mission_filter: frozenset[MissionType]
    tier_filter: frozenset[Tier]
    faction_filter: frozenset[Faction]
    void_storm_filter: ExclusivityFilter
    refresh_rate: int
    time_before_expiry_notification: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WatcherConfig":
        """Build a config from the flat config.json keys.

        Raises ConfigError on unknown enum names, wrong types, or a refresh
        rate below one second.
        """

        try:
            return cls(
                mission_filter=_parse_enum_set(MissionType, data["mission_filter"], "mission_filter"),
                tier_filter=_parse_enum_set(Tier, data["tier_filter"], "tier_filter"),
                faction_filter=_parse_enum_set(Faction, data["faction_filter"], "faction_filter"),
                void_storm_filter=_parse_enum(
                    ExclusivityFilter, data["void_storm_filter"], "void_storm_filter"
                ),
                refresh_rate=_parse_seconds(data["refresh_rate"], "refresh_rate", 1),
                time_before_expiry_notification=_parse_seconds(
                    data["time_before_expiry_notification"],
                    "time_before_expiry_notification",
                    0,
                ),
            )
        except KeyError as exc:
            raise ConfigError(f"missing config key: {exc.args[0]}") from None

    def to_dict(self) -> dict[str, Any]:
        return {
            "mission_filter": _sorted_values(self.mission_filter, MissionType),
            "tier_filter": _sorted_values(self.tier_filter, Tier),
            "faction_filter": _sorted_values(self.faction_filter, Faction),
            "void_storm_filter": self.void_storm_filter.value,
            "refresh_rate": self.refresh_rate,
            "time_before_expiry_notification": self.time_before_expiry_notification,
        }

    def describe(self) -> str:
        """Human-readable summary printed at startup."""

        data = self.to_dict()
        lines = [
            f"Refresh Rate: {self.refresh_rate}s",
            f"Time Before Expiry Notification: {self.time_before_expiry_notification}s",
            f"Tier Filter: {', '.join(data['tier_filter'])}",
            f"Mission Filter: {', '.join(data['mission_filter'])}",
            f"Faction Filter: {', '.join(data['faction_filter'])}",
            f"Void Storm Filter: {self.void_storm_filter}",
        ]
        return "\n".join(lines)


class SharedConfig:
    """Lock-guarded holder for the active WatcherConfig.

    Readers get an immutable snapshot, so the lock is only held for the
    pointer swap and never across an await.
    """

    def __init__(self, config: WatcherConfig) -> None:
        self._lock = threading.Lock()
        self._config = config

    def current(self) -> WatcherConfig:
        with self._lock:
            return self._config

    def replace(self, config: WatcherConfig) -> None:
        with self._lock:
            self._config = config
