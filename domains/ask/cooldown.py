"""Global cooldown gate for the ask command.

One window for the whole bot (not per user): after a command is accepted,
every other command is rejected until the cooldown has elapsed.

The gate also owns the "rate-limit notice sent" flag so the bot only tells
chat to slow down once per rate-limit streak.

All access happens on the bot's event loop. Handlers can interleave at
awaits, so the window is claimed with mark_accepted() before the AI call.
"""

import time
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from logger import logger

COOLDOWN_JOB_ID = "ask-cooldown-clear"


class CooldownGate:
    """Single-window cooldown with a deferred clear.

    Usage:
        gate = CooldownGate(cooldown_seconds=15, scheduler=scheduler)

        now = time.time()
        if gate.admit(now):
            gate.mark_accepted(now)
            result = await call_ai()
        else:
            # Still cooling down, ignore the command
            ...
    """

    def __init__(
        self,
        cooldown_seconds: float,
        scheduler: Optional[AsyncIOScheduler] = None,
        name: str = "ask"
    ):
        """Initialize the gate.

        Args:
            cooldown_seconds: Length of the window opened by each accepted command
            scheduler: Scheduler for the deferred clear (window is still enforced
                by admit() when omitted)
            name: Name for logging purposes
        """
        if cooldown_seconds <= 0:
            raise ValueError(f"cooldown_seconds must be positive, got {cooldown_seconds}")

        self.cooldown_seconds = cooldown_seconds
        self.scheduler = scheduler
        self.name = name

        self.last_accepted_at: Optional[float] = None
        self.rate_limit_notice_sent = False

        # Bumped on every acceptance; a clear only applies to its own generation
        self._generation = 0

        # Stats for monitoring
        self._total_accepted = 0
        self._total_rejected = 0

    def admit(self, now: Optional[float] = None) -> bool:
        """Check whether a command arriving at `now` may proceed."""
        now = time.time() if now is None else now

        if self.last_accepted_at is None or now >= self.last_accepted_at + self.cooldown_seconds:
            return True

        self._total_rejected += 1
        return False

    def remaining(self, now: Optional[float] = None) -> float:
        """Seconds left in the current window (0 when open)."""
        now = time.time() if now is None else now
        if self.last_accepted_at is None:
            return 0.0
        return max(0.0, self.last_accepted_at + self.cooldown_seconds - now)

    def mark_accepted(self, now: Optional[float] = None) -> int:
        """Open a new window starting at `now` and schedule its clear.

        Returns:
            Generation number of the new window
        """
        now = time.time() if now is None else now

        self.last_accepted_at = now
        self._generation += 1
        self._total_accepted += 1

        if self.scheduler is not None:
            # Fixed job id: a new window replaces the pending clear of the old one
            self.scheduler.add_job(
                self._clear,
                trigger=DateTrigger(
                    run_date=datetime.fromtimestamp(now + self.cooldown_seconds, tz=timezone.utc)
                ),
                args=[self._generation],
                id=COOLDOWN_JOB_ID,
                name=f"cooldown:{self.name}",
                replace_existing=True
            )

        return self._generation

    async def _clear(self, generation: int) -> None:
        """Deferred clear; ignored if a later window has been opened since.

        A coroutine so the scheduler runs it on the event loop, not in its
        thread pool.
        """
        if generation != self._generation:
            logger.debug(f"Cooldown [{self.name}]: stale clear for generation {generation} ignored")
            return

        self.last_accepted_at = None
        logger.debug(f"Cooldown [{self.name}]: window cleared")

    def mark_rate_limit_notice(self) -> None:
        """Record that the slow-down notice has been posted."""
        self.rate_limit_notice_sent = True

    def record_success(self) -> None:
        """A completion came back without error; re-arm the rate-limit notice."""
        if self.rate_limit_notice_sent:
            logger.info(f"Cooldown [{self.name}]: provider recovered, rate-limit notice re-armed")
        self.rate_limit_notice_sent = False

    def get_stats(self) -> dict:
        """Get gate statistics."""
        return {
            "cooldown_seconds": self.cooldown_seconds,
            "last_accepted_at": self.last_accepted_at,
            "rate_limit_notice_sent": self.rate_limit_notice_sent,
            "total_accepted": self._total_accepted,
            "total_rejected": self._total_rejected,
        }
