"""Global configuration for the Twitch ask bot."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Twitch
TWITCH_CLIENT_ID = os.getenv("TWITCH_CLIENT_ID")
TWITCH_CLIENT_SECRET = os.getenv("TWITCH_CLIENT_SECRET")
TWITCH_CHANNELS = [
    name.strip()
    for name in os.getenv("TWITCH_CHANNELS", "Gladd,xiBread_").split(",")
    if name.strip()
]

# Google AI
GOOGLE_AI_KEY = os.getenv("GOOGLE_AI_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-pro-latest")

# Supabase (token storage)
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Static instruction/emote files
DATA_DIR = Path(os.getenv("ASK_BOT_DATA_DIR", Path(__file__).parent / "data"))

# Logging
LOG_DIR = Path(os.getenv("ASK_BOT_LOG_DIR", Path(os.getenv("LOCALAPPDATA", ".")) / "ask-bot" / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)
LOG_LEVEL = os.getenv("ASK_BOT_LOG_LEVEL", "INFO").upper()
