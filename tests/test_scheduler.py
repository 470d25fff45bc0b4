from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

from core.config import SharedConfig, WatcherConfig
from core.errors import NotifyError
from core.models import ExclusivityFilter, Faction, Fissure, MissionType, Tier
from core.scheduler import NEW_FISSURES_SUMMARY, NotificationScheduler, expiry_summary

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
LEAD = 60


class FakeNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    async def send(self, summary: str, body: str) -> None:
        self.sent.append((summary, body))


class FailingNotifier:
    def __init__(self) -> None:
        self.calls = 0

    async def send(self, summary: str, body: str) -> None:
        self.calls += 1
        raise NotifyError("no notification daemon")


def _shared_config(lead: int = LEAD) -> SharedConfig:
    return SharedConfig(
        WatcherConfig(
            mission_filter=frozenset(MissionType),
            tier_filter=frozenset(Tier),
            faction_filter=frozenset(Faction),
            void_storm_filter=ExclusivityFilter.INCLUDE,
            refresh_rate=60,
            time_before_expiry_notification=lead,
        )
    )


def _fissure(fissure_id: str, expiry: datetime, *, is_hard: bool = False) -> Fissure:
    return Fissure(
        id=fissure_id,
        activation=NOW - timedelta(minutes=10),
        expiry=expiry,
        mission_type=MissionType.EXTERMINATION,
        tier=Tier.AXI,
        faction=Faction.CORPUS,
        node="Olympus (Mars)",
        is_hard=is_hard,
    )


def _scheduler(notifier, **kwargs) -> NotificationScheduler:
    return NotificationScheduler(notifier, _shared_config(), clock=lambda: NOW, **kwargs)


def test_notify_new_sends_one_batch_with_every_fissure() -> None:
    notifier = FakeNotifier()
    fissures = [
        _fissure("a", NOW + timedelta(hours=1)),
        _fissure("b", NOW + timedelta(hours=1), is_hard=True),
    ]

    async def scenario() -> int:
        scheduler = _scheduler(notifier)
        await scheduler.notify_new(fissures)
        pending = len(scheduler.pending)
        await scheduler.shutdown()
        return pending

    pending = asyncio.run(scenario())

    assert notifier.sent == [
        (NEW_FISSURES_SUMMARY, "Axi Extermination on Olympus (Mars)\nSP Axi Extermination on Olympus (Mars)")
    ]
    assert pending == 2


def test_notify_new_with_no_fissures_does_nothing() -> None:
    notifier = FakeNotifier()

    async def scenario() -> int:
        scheduler = _scheduler(notifier)
        await scheduler.notify_new([])
        return len(scheduler.pending)

    assert asyncio.run(scenario()) == 0
    assert notifier.sent == []


def test_expiry_notification_fires_after_delay() -> None:
    notifier = FakeNotifier()
    fissure = _fissure("a", NOW + timedelta(seconds=LEAD, milliseconds=20))

    async def scenario() -> None:
        scheduler = _scheduler(notifier)
        task = scheduler.schedule_expiry(fissure)
        assert task is not None
        await asyncio.gather(*scheduler.pending)
        assert not scheduler.pending

    asyncio.run(scenario())

    assert notifier.sent == [(expiry_summary(LEAD), "Axi Extermination on Olympus (Mars)")]
    assert notifier.sent[0][0] == "Fissure is Expiring In 60 Seconds"


def test_expiry_in_the_past_is_skipped() -> None:
    notifier = FakeNotifier()
    fissure = _fissure("a", NOW + timedelta(seconds=LEAD - 1))

    async def scenario():
        scheduler = _scheduler(notifier)
        return scheduler.schedule_expiry(fissure), len(scheduler.pending)

    task, pending = asyncio.run(scenario())

    assert task is None
    assert pending == 0
    assert notifier.sent == []


def test_lead_time_is_read_when_scheduling() -> None:
    notifier = FakeNotifier()
    shared = _shared_config(lead=LEAD)
    fissure = _fissure("a", NOW + timedelta(seconds=30))

    async def scenario():
        scheduler = NotificationScheduler(notifier, shared, clock=lambda: NOW)
        skipped = scheduler.schedule_expiry(fissure)
        shared.replace(WatcherConfig.from_dict({**shared.current().to_dict(), "time_before_expiry_notification": 0}))
        scheduled = scheduler.schedule_expiry(fissure)
        await scheduler.shutdown()
        return skipped, scheduled

    skipped, scheduled = asyncio.run(scenario())

    assert skipped is None
    assert scheduled is not None


def test_notifier_failures_are_swallowed() -> None:
    notifier = FailingNotifier()
    fissure = _fissure("a", NOW + timedelta(seconds=LEAD, milliseconds=10))

    async def scenario() -> None:
        scheduler = _scheduler(notifier)
        await scheduler.notify_new([fissure])
        results = await asyncio.gather(*scheduler.pending, return_exceptions=True)
        assert results == [None]

    asyncio.run(scenario())

    # Immediate batch and deferred expiry alert both attempted.
    assert notifier.calls == 2


def test_removed_fissure_still_notified_by_default() -> None:
    notifier = FakeNotifier()
    fissure = _fissure("a", NOW + timedelta(seconds=LEAD, milliseconds=20))

    async def scenario() -> int:
        scheduler = _scheduler(notifier)
        scheduler.schedule_expiry(fissure)
        cancelled = scheduler.cancel(["a"])
        await asyncio.gather(*scheduler.pending)
        return cancelled

    assert asyncio.run(scenario()) == 0
    assert len(notifier.sent) == 1


def test_cancel_on_removal_cancels_pending_task() -> None:
    notifier = FakeNotifier()
    fissure = _fissure("a", NOW + timedelta(hours=1))

    async def scenario():
        scheduler = _scheduler(notifier, cancel_on_removal=True)
        task = scheduler.schedule_expiry(fissure)
        cancelled = scheduler.cancel(["a", "unknown"])
        await asyncio.gather(task, return_exceptions=True)
        return cancelled, task.cancelled(), len(scheduler.pending)

    cancelled, was_cancelled, pending = asyncio.run(scenario())

    assert cancelled == 1
    assert was_cancelled
    assert pending == 0
    assert notifier.sent == []
