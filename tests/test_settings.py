from __future__ import annotations

import json

import settings
from core.models import ExclusivityFilter, Tier


def test_missing_file_is_created_with_defaults(tmp_path) -> None:
    path = tmp_path / "config.json"

    loaded = settings.load_config(str(path))

    assert path.exists()
    assert json.loads(path.read_text(encoding="utf-8")) == settings.DEFAULT_CONFIG
    assert loaded.watcher.refresh_rate == settings.DEFAULT_CONFIG["refresh_rate"]
    assert "created default config" in loaded.message


def test_invalid_json_falls_back_to_defaults_without_touching_file(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    loaded = settings.load_config(str(path))

    assert path.read_text(encoding="utf-8") == "{not json"
    assert loaded.data == settings.DEFAULT_CONFIG
    assert "Error parsing config file" in loaded.message


def test_invalid_values_fall_back_to_defaults(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"tier_filter": ["Omnia"]}), encoding="utf-8")

    loaded = settings.load_config(str(path))

    assert loaded.data == settings.DEFAULT_CONFIG
    assert "Omnia" in loaded.message


def test_partial_file_is_merged_with_defaults(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "tier_filter": ["Axi"],
                "void_storm_filter": "Exclusive",
                "notifications": {"notification_method": "bot"},
            }
        ),
        encoding="utf-8",
    )

    loaded = settings.load_config(str(path))

    assert loaded.watcher.tier_filter == {Tier.AXI}
    assert loaded.watcher.void_storm_filter is ExclusivityFilter.EXCLUSIVE
    notifications = settings.section(loaded.data, "notifications")
    assert notifications["notification_method"] == "bot"
    assert notifications["cancel_on_removal"] is False


def test_save_then_load_round_trip(tmp_path) -> None:
    path = tmp_path / "nested" / "config.json"
    data = settings.default_config()
    data["refresh_rate"] = 15

    settings.save_config(data, str(path))
    loaded = settings.load_config(str(path))

    assert loaded.watcher.refresh_rate == 15
    assert loaded.message.startswith("Loaded config file")
