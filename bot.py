"""Twitch Ask Bot - Main Bot.

Answers "!ask <question>" (alias "!ai") in Twitch chat with Gemini.
Chat tokens are read from Supabase and refreshed in the background.
"""

import asyncio
import sys

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from twitchio.ext import commands

from gemini_client import GeminiClient
from logger import logger
from config import (
    TWITCH_CLIENT_ID,
    TWITCH_CLIENT_SECRET,
    TWITCH_CHANNELS,
    GOOGLE_AI_KEY,
    GEMINI_MODEL,
    DATA_DIR,
)

import domains.ask.config as ask_config
from domains.ask import AskDispatcher, CooldownGate, SanitiseConfig, load_instructions
from domains.ask.instructions import InstructionLengthError
from domains.ask.emotes import load_emote_tokens
from domains.twitch_auth import (
    TokenRecord,
    TokenRefresher,
    TokenStoreError,
    get_latest_token,
    register_token_refresh,
)


class AskBot(commands.Bot):
    """Twitch chat connection feeding messages to the ask dispatcher."""

    def __init__(self, token: str, channels: list[str], dispatcher: AskDispatcher):
        super().__init__(token=token, prefix="!", initial_channels=channels)
        self.dispatcher = dispatcher

    async def event_ready(self):
        """Called when the bot has connected and joined its channels."""
        logger.info(f"[SYSTEM] Connected to Twitch as {self.nick}")

    async def event_message(self, message):
        """Handle incoming chat messages."""
        # Ignore our own messages
        if message.echo:
            return

        ctx = await self.get_context(message)
        await self.dispatcher.handle_message(
            message.content,
            message.channel.name,
            message.author.display_name or message.author.name,
            ctx.reply
        )

    async def event_error(self, error: Exception, data: str = None):
        """Handle errors."""
        logger.error(f"Bot error: {error}", exc_info=error)

    async def apply_token(self, record: TokenRecord):
        """Use a refreshed access token for API calls and reconnects."""
        # twitchio 2.x reads the token from these on every request/reconnect
        self._http.token = record.access_token
        self._connection._token = record.access_token
        logger.info("[SYSTEM] Applied refreshed Twitch token")


async def run():
    """Load configuration, restore the token and run the bot until stopped."""
    instructions = load_instructions(DATA_DIR)
    emote_tokens = load_emote_tokens(DATA_DIR / "emotes.txt")
    logger.info(f"[SYSTEM] Loaded {len(emote_tokens)} emotes")

    refresher = TokenRefresher(TWITCH_CLIENT_ID, TWITCH_CLIENT_SECRET, await get_latest_token())
    if not await refresher.refresh_if_needed():
        raise TokenStoreError("Stored Twitch token is expired and could not be refreshed")

    scheduler = AsyncIOScheduler()

    dispatcher = AskDispatcher(
        client=GeminiClient(
            api_key=GOOGLE_AI_KEY,
            model=GEMINI_MODEL,
            system_instruction=instructions,
            max_output_tokens=ask_config.MAX_OUTPUT_TOKENS,
            temperature=ask_config.TEMPERATURE
        ),
        gate=CooldownGate(ask_config.COOLDOWN_SECONDS, scheduler=scheduler),
        sanitise_config=SanitiseConfig(limit=ask_config.OUTPUT_LIMIT, emote_tokens=emote_tokens)
    )

    bot = AskBot(token=refresher.record.access_token, channels=TWITCH_CHANNELS, dispatcher=dispatcher)
    refresher.on_refresh(bot.apply_token)

    register_token_refresh(scheduler, refresher, minutes=ask_config.TOKEN_REFRESH_CHECK_MINUTES)
    scheduler.start()
    logger.info(f"[SYSTEM] Scheduler started with {len(scheduler.get_jobs())} jobs")

    try:
        await bot.start()
    finally:
        scheduler.shutdown(wait=False)
        logger.info(f"[SYSTEM] Shutting down, cooldown stats: {dispatcher.gate.get_stats()}")


def main():
    """Entry point."""
    missing = [
        name for name, value in (
            ("TWITCH_CLIENT_ID", TWITCH_CLIENT_ID),
            ("TWITCH_CLIENT_SECRET", TWITCH_CLIENT_SECRET),
            ("GOOGLE_AI_KEY", GOOGLE_AI_KEY),
        )
        if not value
    ]
    if missing:
        logger.error(f"Missing configuration: {', '.join(missing)}")
        sys.exit(1)

    logger.info(f"Starting Twitch Ask Bot for channels: {', '.join(TWITCH_CHANNELS)}")
    try:
        asyncio.run(run())
    except (InstructionLengthError, TokenStoreError) as e:
        logger.critical(f"Startup failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
