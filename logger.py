"""Logging configuration for the Twitch ask bot.

Chat traffic is logged with category prefixes ([SYSTEM], [QUESTION],
[ANSWER], [COOLDOWN]) so the daily file reads like the chat transcript.
"""

import logging
import sys
from datetime import datetime

from config import LOG_DIR, LOG_LEVEL


def setup_logging(level: str = LOG_LEVEL) -> logging.Logger:
    """Log to a dated file, and to the console when run interactively."""
    logger = logging.getLogger("ask_bot")
    logger.setLevel(level)
    logger.handlers.clear()

    log_file = LOG_DIR / f"ask-bot-{datetime.now():%Y-%m-%d}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(module)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    logger.addHandler(file_handler)

    # Library warnings land in the same file
    for name in ("twitchio", "httpx"):
        logging.getLogger(name).addHandler(file_handler)
        logging.getLogger(name).setLevel(logging.WARNING)

    if sys.stdout is not None and sys.stdout.isatty():
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter("%(asctime)s | %(message)s", datefmt="%H:%M:%S"))
        logger.addHandler(console_handler)

    return logger


# Global logger instance
logger = setup_logging()
