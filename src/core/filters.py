"""Filter evaluation (core domain).

A fissure passes when every configured dimension accepts it:
- mission type, tier and faction are set-membership checks,
- void storms use the three-state exclusivity selector.

An empty set for any membership dimension rejects every fissure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Collection, Iterable, List

from core.config import WatcherConfig
from core.models import Fissure


@dataclass(frozen=True)
class MembershipFilter:
    """Set-membership predicate over one fissure attribute."""

    name: str
    extractor: Callable[[Fissure], Any]
    allowed: Callable[[WatcherConfig], Collection[Any]]

    def matches(self, fissure: Fissure, config: WatcherConfig) -> bool:
        return self.extractor(fissure) in self.allowed(config)


MISSION = MembershipFilter("mission", lambda f: f.mission_type, lambda c: c.mission_filter)
TIER = MembershipFilter("tier", lambda f: f.tier, lambda c: c.tier_filter)
FACTION = MembershipFilter("faction", lambda f: f.faction, lambda c: c.faction_filter)

MEMBERSHIP_FILTERS = (MISSION, TIER, FACTION)


def passes(fissure: Fissure, config: WatcherConfig) -> bool:
    """Return True when the fissure satisfies every filter dimension."""

    return all(f.matches(fissure, config) for f in MEMBERSHIP_FILTERS) and (
        config.void_storm_filter.allows(fissure.is_storm)
    )


def apply_filters(fissures: Iterable[Fissure], config: WatcherConfig) -> List[Fissure]:
    """Return the passing fissures, preserving input order."""

    return [fissure for fissure in fissures if passes(fissure, config)]


def explain(fissure: Fissure, config: WatcherConfig) -> List[str]:
    """Return the names of the dimensions that reject the fissure."""

    failed = [f.name for f in MEMBERSHIP_FILTERS if not f.matches(fissure, config)]
    if not config.void_storm_filter.allows(fissure.is_storm):
        failed.append("void_storm")
    return failed
