"""Tests for the global cooldown gate."""

import asyncio
import threading
import time
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from domains.ask.cooldown import CooldownGate, COOLDOWN_JOB_ID


def test_first_command_admitted():
    """A fresh gate admits the first command."""
    gate = CooldownGate(cooldown_seconds=15)

    assert gate.admit(1000.0) is True
    assert gate.remaining(1000.0) == 0.0


def test_window_rejects_until_elapsed():
    """Commands inside [t0, t0 + D) are rejected, t0 + D onwards admitted."""
    gate = CooldownGate(cooldown_seconds=15)
    gate.mark_accepted(1000.0)

    for t in (1000.0, 1001.0, 1014.999):
        assert gate.admit(t) is False, f"should reject at {t}"

    assert gate.admit(1015.0) is True
    assert gate.admit(1100.0) is True

    stats = gate.get_stats()
    assert stats["total_accepted"] == 1
    assert stats["total_rejected"] == 3


def test_remaining_time():
    gate = CooldownGate(cooldown_seconds=15)
    gate.mark_accepted(1000.0)

    assert gate.remaining(1005.0) == pytest.approx(10.0)
    assert gate.remaining(1020.0) == 0.0


def test_new_acceptance_overwrites_window():
    gate = CooldownGate(cooldown_seconds=15)
    gate.mark_accepted(1000.0)
    gate.mark_accepted(1020.0)

    assert gate.last_accepted_at == 1020.0
    assert gate.admit(1030.0) is False


def test_deferred_clear_scheduled():
    """Acceptance schedules a clear at t0 + D, replacing any pending one."""
    scheduler = Mock()
    gate = CooldownGate(cooldown_seconds=15, scheduler=scheduler)

    generation = gate.mark_accepted(1000.0)

    scheduler.add_job.assert_called_once()
    kwargs = scheduler.add_job.call_args.kwargs
    assert kwargs["id"] == COOLDOWN_JOB_ID
    assert kwargs["replace_existing"] is True
    assert kwargs["args"] == [generation]
    assert kwargs["trigger"].run_date == datetime.fromtimestamp(1015.0, tz=timezone.utc)


@pytest.mark.asyncio
async def test_clear_reopens_window():
    gate = CooldownGate(cooldown_seconds=15, scheduler=Mock())
    generation = gate.mark_accepted(1000.0)

    await gate._clear(generation)

    assert gate.last_accepted_at is None
    assert gate.admit(1001.0) is True


@pytest.mark.asyncio
async def test_stale_clear_does_not_reopen_later_window():
    """A clear from an earlier acceptance must not undercut a later one."""
    gate = CooldownGate(cooldown_seconds=15, scheduler=Mock())
    first = gate.mark_accepted(1000.0)
    second = gate.mark_accepted(1014.0)

    await gate._clear(first)

    assert gate.last_accepted_at == 1014.0
    assert gate.admit(1016.0) is False

    await gate._clear(second)
    assert gate.last_accepted_at is None


def test_rate_limit_notice_flag():
    gate = CooldownGate(cooldown_seconds=15)
    assert gate.rate_limit_notice_sent is False

    gate.mark_rate_limit_notice()
    assert gate.rate_limit_notice_sent is True

    gate.record_success()
    assert gate.rate_limit_notice_sent is False


def test_invalid_cooldown():
    with pytest.raises(ValueError):
        CooldownGate(cooldown_seconds=0)


@pytest.mark.asyncio
async def test_scheduled_clear_runs_on_event_loop():
    """The real scheduler fires the clear on the loop thread and reopens the window."""
    loop_thread = threading.current_thread().name
    scheduler = AsyncIOScheduler()
    scheduler.start()

    gate = CooldownGate(cooldown_seconds=0.2, scheduler=scheduler)
    clear_threads = []
    clear = gate._clear

    async def recording_clear(generation):
        clear_threads.append(threading.current_thread().name)
        await clear(generation)

    gate._clear = recording_clear

    try:
        gate.mark_accepted(time.time())
        assert gate.last_accepted_at is not None

        await asyncio.sleep(0.6)
    finally:
        scheduler.shutdown(wait=False)

    assert clear_threads == [loop_thread]
    assert gate.last_accepted_at is None
    assert gate.admit() is True
