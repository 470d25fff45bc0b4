"""Core domain models.

These types are shared across the core and adapters to avoid tight coupling
to the remote API's JSON shape. Enum values double as display strings and as
the names used in config.json.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List


class MissionType(Enum):
    CAPTURE = "Capture"
    DEFENSE = "Defense"
    EXCAVATION = "Excavation"
    EXTERMINATION = "Extermination"
    INTERCEPTION = "Interception"
    MOBILE_DEFENSE = "Mobile Defense"
    RESCUE = "Rescue"
    SABOTAGE = "Sabotage"
    SURVIVAL = "Survival"
    SPY = "Spy"
    HIJACK = "Hijack"
    ASSAULT = "Assault"
    DEFECTION = "Defection"
    INFESTED_SALVAGE = "Infested Salvage"
    DISRUPTION = "Disruption"
    SANCTUARY_ONSLAUGHT = "Sanctuary Onslaught"
    FREE_ROAM = "Free Roam"
    ARENA = "Arena"
    SKIRMISH = "Skirmish"
    ORPHIX = "Orphix"
    VOLATILE = "Volatile"
    HIVE = "Hive"
    ASSASSINATION = "Assassination"
    RUSH = "Rush"
    PURSUIT = "Pursuit"
    DECEPTION = "Deception"
    CROSSFIRE = "Crossfire"

    def __str__(self) -> str:
        return self.value


class Tier(Enum):
    """Relic tier, listed by increasing rarity. Only compared by equality."""

    LITH = "Lith"
    MESO = "Meso"
    NEO = "Neo"
    AXI = "Axi"
    REQUIEM = "Requiem"

    def __str__(self) -> str:
        return self.value


class Faction(Enum):
    OROKIN = "Orokin"
    GRINEER = "Grineer"
    CORPUS = "Corpus"
    INFESTED = "Infested"
    NARMER = "Narmer"
    CROSSFIRE = "Crossfire"

    def __str__(self) -> str:
        return self.value


class ExclusivityFilter(Enum):
    """Whether to exclude, include or exclusively keep a boolean attribute."""

    EXCLUDE = "Exclude"
    INCLUDE = "Include"
    EXCLUSIVE = "Exclusive"

    def allows(self, value: bool) -> bool:
        if self is ExclusivityFilter.EXCLUDE:
            return not value
        if self is ExclusivityFilter.EXCLUSIVE:
            return value
        return True

    def __str__(self) -> str:
        return self.value


TABLE_HEADERS = ["SP", "Tier", "Mission Type", "Node (Region)", "Faction"]


@dataclass(frozen=True)
class Fissure:
    """A void fissure as tracked by the watcher.

    Fissures are immutable. A fissure that stays in the remote collection is
    never refreshed from newer data; only additions and removals are tracked.
    """

    id: str
    activation: datetime
    expiry: datetime
    mission_type: MissionType
    tier: Tier
    faction: Faction
    node: str
    is_storm: bool = False
    is_hard: bool = False

    def __str__(self) -> str:
        prefix = "SP " if self.is_hard else ""
        return f"{prefix}{self.tier} {self.mission_type} on {self.node}"

    def table_row(self) -> List[str]:
        return [
            "SP" if self.is_hard else "",
            str(self.tier),
            str(self.mission_type),
            self.node,
            str(self.faction),
        ]
