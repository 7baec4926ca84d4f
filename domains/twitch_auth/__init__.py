"""Twitch auth domain - token persistence and refresh."""

from .store import TokenRecord, TokenStoreError, get_latest_token, save_token
from .refresher import TokenRefresher, is_expired, register_token_refresh

__all__ = [
    "TokenRecord",
    "TokenRefresher",
    "TokenStoreError",
    "get_latest_token",
    "is_expired",
    "register_token_refresh",
    "save_token",
]
