"""Supabase persistence for Twitch OAuth tokens.

Every refresh inserts a new row into `tokens`; the newest row (by
obtainment_timestamp) is the current token.
"""

from dataclasses import asdict, dataclass
from typing import Optional

import httpx

from config import SUPABASE_URL, SUPABASE_KEY
from logger import logger
from utils.log_sanitizer import sanitize_for_log

TOKENS_TABLE = "tokens"


class TokenStoreError(Exception):
    """The token table could not be read or holds no token."""


@dataclass
class TokenRecord:
    """Row of the tokens table."""
    access_token: str
    refresh_token: str
    expires_in: Optional[int]  # seconds, None = never expires
    obtainment_timestamp: int  # milliseconds since epoch

    @classmethod
    def from_row(cls, row: dict) -> "TokenRecord":
        return cls(
            access_token=row["access_token"],
            refresh_token=row["refresh_token"],
            expires_in=int(row["expires_in"]) if row.get("expires_in") is not None else None,
            obtainment_timestamp=int(row["obtainment_timestamp"])
        )

    def to_row(self) -> dict:
        return asdict(self)


def _headers():
    """Get headers for Supabase API calls."""
    return {
        "apikey": SUPABASE_KEY,
        "Authorization": f"Bearer {SUPABASE_KEY}",
        "Content-Type": "application/json",
        "Prefer": "return=representation"
    }


async def get_latest_token() -> TokenRecord:
    """Read the current token.

    Returns:
        Newest TokenRecord

    Raises:
        TokenStoreError: If Supabase is not configured, unreachable or empty
    """
    if not SUPABASE_URL or not SUPABASE_KEY:
        raise TokenStoreError("Supabase not configured (SUPABASE_URL / SUPABASE_KEY)")

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(
                f"{SUPABASE_URL}/rest/v1/{TOKENS_TABLE}",
                headers=_headers(),
                params={
                    "select": "*",
                    "order": "obtainment_timestamp.desc",
                    "limit": 1
                },
                timeout=10
            )
            response.raise_for_status()
            rows = response.json()
    except httpx.HTTPError as e:
        raise TokenStoreError(f"Failed to read tokens: {sanitize_for_log(str(e))}") from e

    if not rows:
        raise TokenStoreError("No token stored in the tokens table")

    return TokenRecord.from_row(rows[0])


async def save_token(record: TokenRecord) -> bool:
    """Insert a refreshed token.

    Args:
        record: Token obtained from a refresh

    Returns:
        True if saved successfully
    """
    if not SUPABASE_URL or not SUPABASE_KEY:
        logger.warning("Supabase not configured, refreshed token not persisted")
        return False

    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                f"{SUPABASE_URL}/rest/v1/{TOKENS_TABLE}",
                headers=_headers(),
                json=record.to_row(),
                timeout=10
            )
            response.raise_for_status()
            logger.info("Saved refreshed Twitch token to Supabase")
            return True
    except httpx.HTTPError as e:
        logger.error(f"Failed to save token: {sanitize_for_log(str(e))}")
        return False
