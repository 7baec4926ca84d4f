"""Twitch OAuth token refresh.

Keeps the chat token valid: refreshes when the stored token is expired (or
about to be), persists each new token and notifies listeners so the
running bot can pick it up.
"""

import time
from typing import Awaitable, Callable, Optional

import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from logger import logger
from utils.log_sanitizer import sanitize_for_log
from .store import TokenRecord, save_token

TOKEN_URL = "https://id.twitch.tv/oauth2/token"

# Refresh this long before the token actually expires
EXPIRY_MARGIN_SECONDS = 300

RefreshListener = Callable[[TokenRecord], Awaitable[None]]


def _now_ms() -> int:
    return int(time.time() * 1000)


def is_expired(record: TokenRecord, now_ms: Optional[int] = None, margin_seconds: int = EXPIRY_MARGIN_SECONDS) -> bool:
    """Check whether a token is expired or inside the refresh margin."""
    if record.expires_in is None:
        return False
    now_ms = _now_ms() if now_ms is None else now_ms
    expires_at = record.obtainment_timestamp + record.expires_in * 1000
    return now_ms >= expires_at - margin_seconds * 1000


class TokenRefresher:
    """Holds the current Twitch token and refreshes it on demand."""

    def __init__(self, client_id: str, client_secret: str, record: TokenRecord):
        self.client_id = client_id
        self.client_secret = client_secret
        self.record = record
        self._listeners: list[RefreshListener] = []

    def on_refresh(self, listener: RefreshListener) -> None:
        """Register a coroutine called with each new token."""
        self._listeners.append(listener)

    async def refresh(self) -> Optional[TokenRecord]:
        """Exchange the refresh token for a new token pair.

        Returns:
            The new TokenRecord, or None if Twitch rejected the refresh
        """
        logger.info("Refreshing Twitch token...")
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    TOKEN_URL,
                    data={
                        "grant_type": "refresh_token",
                        "refresh_token": self.record.refresh_token,
                        "client_id": self.client_id,
                        "client_secret": self.client_secret
                    },
                    timeout=10
                )

            if response.status_code != 200:
                logger.error(
                    f"Twitch token refresh failed ({response.status_code}): "
                    f"{sanitize_for_log(response.text)}"
                )
                return None

            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Twitch token refresh error: {sanitize_for_log(str(e))}")
            return None

        self.record = TokenRecord(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token", self.record.refresh_token),
            expires_in=data.get("expires_in"),
            obtainment_timestamp=_now_ms()
        )
        logger.info(f"Twitch token refreshed (expires in {self.record.expires_in}s)")

        await save_token(self.record)
        for listener in self._listeners:
            await listener(self.record)

        return self.record

    async def refresh_if_needed(self) -> bool:
        """Refresh when the current token is expired or about to be.

        Returns:
            True if the current token is usable afterwards
        """
        if not is_expired(self.record):
            return True
        return await self.refresh() is not None


def register_token_refresh(scheduler: AsyncIOScheduler, refresher: TokenRefresher, minutes: int = 10):
    """Register the periodic token check with the scheduler."""
    scheduler.add_job(
        refresher.refresh_if_needed,
        'interval',
        minutes=minutes,
        id="twitch_token_refresh",
        replace_existing=True
    )
    logger.info(f"Registered Twitch token refresh check (every {minutes} min)")
