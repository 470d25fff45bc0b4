from __future__ import annotations

import pytest

from core.config import SharedConfig, WatcherConfig
from core.errors import ConfigError
from core.models import ExclusivityFilter, Faction, MissionType, Tier


def _raw(**overrides) -> dict:
    raw = {
        "mission_filter": ["Capture", "Mobile Defense"],
        "tier_filter": ["Axi"],
        "faction_filter": ["Grineer", "Corpus"],
        "void_storm_filter": "Exclusive",
        "refresh_rate": 30,
        "time_before_expiry_notification": 0,
    }
    raw.update(overrides)
    return raw


def test_from_dict_parses_display_names() -> None:
    config = WatcherConfig.from_dict(_raw())

    assert config.mission_filter == {MissionType.CAPTURE, MissionType.MOBILE_DEFENSE}
    assert config.tier_filter == {Tier.AXI}
    assert config.faction_filter == {Faction.GRINEER, Faction.CORPUS}
    assert config.void_storm_filter is ExclusivityFilter.EXCLUSIVE
    assert config.refresh_rate == 30
    assert config.time_before_expiry_notification == 0


def test_to_dict_round_trip_uses_declaration_order() -> None:
    config = WatcherConfig.from_dict(_raw(faction_filter=["Corpus", "Grineer"]))

    data = config.to_dict()

    assert data["faction_filter"] == ["Grineer", "Corpus"]
    assert WatcherConfig.from_dict(data) == config


def test_empty_filter_lists_are_valid() -> None:
    config = WatcherConfig.from_dict(_raw(mission_filter=[]))

    assert config.mission_filter == frozenset()


@pytest.mark.parametrize(
    "overrides",
    [
        {"tier_filter": ["Omnia"]},
        {"mission_filter": "Capture"},
        {"void_storm_filter": "Sometimes"},
        {"refresh_rate": 0},
        {"refresh_rate": True},
        {"time_before_expiry_notification": -1},
        {"time_before_expiry_notification": "60"},
    ],
)
def test_from_dict_rejects_invalid_values(overrides: dict) -> None:
    with pytest.raises(ConfigError):
        WatcherConfig.from_dict(_raw(**overrides))


def test_from_dict_rejects_missing_key() -> None:
    raw = _raw()
    del raw["refresh_rate"]

    with pytest.raises(ConfigError, match="refresh_rate"):
        WatcherConfig.from_dict(raw)


def test_describe_lists_every_setting() -> None:
    text = WatcherConfig.from_dict(_raw()).describe()

    assert "Refresh Rate: 30s" in text
    assert "Mission Filter: Capture, Mobile Defense" in text
    assert "Void Storm Filter: Exclusive" in text


def test_shared_config_replace_is_seen_by_readers() -> None:
    first = WatcherConfig.from_dict(_raw())
    second = WatcherConfig.from_dict(_raw(refresh_rate=5))
    shared = SharedConfig(first)

    assert shared.current() is first
    shared.replace(second)
    assert shared.current().refresh_rate == 5
