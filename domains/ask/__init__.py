"""Ask domain - answers "!ask" questions in Twitch chat with Gemini.

Messages go through a global cooldown gate, then Gemini, then the
sanitiser that fits the answer into a single chat line.
"""

from .cooldown import CooldownGate
from .dispatcher import AskDispatcher, ChatCommandInvocation, DispatchOutcome, parse_invocation
from .instructions import build_instructions, load_instructions
from .ratings import format_ratings
from .sanitiser import SanitiseConfig, sanitise

__all__ = [
    "AskDispatcher",
    "ChatCommandInvocation",
    "CooldownGate",
    "DispatchOutcome",
    "SanitiseConfig",
    "build_instructions",
    "format_ratings",
    "load_instructions",
    "parse_invocation",
    "sanitise",
]
