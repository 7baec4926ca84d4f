"""Ask command configuration - trigger, cooldown and reply limits."""

import os

# Trigger words (first is the command name, the rest are aliases)
TRIGGERS = tuple(
    t.strip().lower()
    for t in os.environ.get("ASK_TRIGGERS", "!ask,!ai").split(",")
    if t.strip()
)

# Global cooldown between accepted commands
COOLDOWN_SECONDS = float(os.environ.get("ASK_COOLDOWN_SECONDS", 15))

# Twitch drops messages over 500 chars; replies are kept well under that
OUTPUT_LIMIT = int(os.environ.get("ASK_OUTPUT_LIMIT", 400))

# Gemini generation settings
MAX_OUTPUT_TOKENS = int(os.environ.get("ASK_MAX_OUTPUT_TOKENS", 400))
TEMPERATURE = float(os.environ.get("ASK_TEMPERATURE", 1.0))

# Prefix the prompt with "<user> asked ..." so the model knows who is talking
PROMPT_WITH_USERNAME = os.environ.get("ASK_PROMPT_WITH_USERNAME", "true").lower() == "true"

# Sent once per rate-limit streak
RATE_LIMIT_NOTICE = os.environ.get(
    "ASK_RATE_LIMIT_NOTICE",
    "I'm getting too many questions right now, slow down and try again in a minute."
)

# System instruction budget (Gemini rejects longer instructions)
INSTRUCTION_LIMIT = 8192

# Placeholders substituted into instructions.txt
INSTRUCTION_PLACEHOLDERS = {
    "{{MODERATORS}}": "moderators.txt",
    "{{REGULARS}}": "regulars.txt",
    "{{EMOTES}}": "emotes.txt",
}

# Token refresh check interval
TOKEN_REFRESH_CHECK_MINUTES = int(os.environ.get("TOKEN_REFRESH_CHECK_MINUTES", 10))
