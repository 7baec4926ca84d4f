"""Domain modules for the Twitch ask bot."""
