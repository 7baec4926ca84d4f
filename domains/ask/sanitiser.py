"""Sanitiser - turns raw Gemini output into a single chat-safe Twitch line.

Processing order matters; later stages assume the earlier normalisation:
1. Normalise - trim, newlines to spaces
2. Truncate - greedy whole-word fill up to the output limit
3. Sentence cut - drop a trailing incomplete sentence
4. Clean - strip emoji, unescape, space out glued emotes
5. Neutralise - keep replies from being read as chat commands

An empty result means there is nothing safe or complete to send.
"""

import re
from dataclasses import dataclass, field
from functools import cached_property

from .emotes import EMOJI_PATTERN, build_emote_pattern, ends_with_emoji

SENTENCE_TERMINATORS = ".?!"

# Chat transports treat lines starting with these as commands
COMMAND_PREFIXES = ("!", "/")

ZERO_WIDTH_SPACE = "\u200b"

_NEWLINES = re.compile(r"\r\n|\r|\n")
_TERMINATOR_SPLIT = re.compile(f"([{re.escape(SENTENCE_TERMINATORS)}])")
_ESCAPES = re.compile(r"\\(.)")


@dataclass(frozen=True)
class SanitiseConfig:
    """Output limit and known emote tokens, fixed for the process lifetime."""
    limit: int
    emote_tokens: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if self.limit <= 0:
            raise ValueError(f"limit must be positive, got {self.limit}")
        object.__setattr__(self, "emote_tokens", frozenset(self.emote_tokens))

    @cached_property
    def emote_pattern(self) -> re.Pattern | None:
        return build_emote_pattern(self.emote_tokens)


def normalise(text: str) -> str:
    """Trim and flatten to a single line."""
    return _NEWLINES.sub(" ", text.strip())


def truncate_words(text: str, limit: int) -> str:
    """Accumulate whole words while they fit in the limit.

    Stops at the first word that would overflow, so a single word longer
    than the limit yields an empty string.
    """
    result = ""
    for word in text.split():
        if len(result) + len(word) + 1 > limit:
            break
        result = f"{result} {word}" if result else word
    return result


def cut_to_sentence(text: str) -> str:
    """Drop the trailing fragment that does not end in a terminator.

    Text already ending in a terminator or an emoji is kept as-is. Otherwise
    the final fragment and the terminator in front of it are removed, e.g.
    "Nice! idk" -> "Nice". Text without any terminator becomes empty.
    """
    # The emoji ranges start at U+2011 and so cover curly quotes and the
    # ellipsis: 'He said “hi”' counts as complete. Keep the ranges as they are.
    if not text or text[-1] in SENTENCE_TERMINATORS or ends_with_emoji(text):
        return text

    parts = _TERMINATOR_SPLIT.split(text)
    return "".join(parts[:-2]).strip()


def strip_emoji(text: str) -> str:
    """Remove emoji and close the gaps they leave."""
    return " ".join(EMOJI_PATTERN.sub("", text).split())


def unescape(text: str) -> str:
    return _ESCAPES.sub(r"\1", text)


def space_emotes(text: str, config: SanitiseConfig) -> str:
    """Separate emote tokens from punctuation glued onto them."""
    pattern = config.emote_pattern
    if pattern is None:
        return text
    return pattern.sub(r"\1 \2", text)


def neutralise_commands(text: str) -> str:
    """Prefix a zero-width space so "!cmd" or "/cmd" is sent as plain text."""
    if text.startswith(COMMAND_PREFIXES):
        return ZERO_WIDTH_SPACE + text
    return text


def _run(text: str, budget: int, config: SanitiseConfig) -> str:
    result = cut_to_sentence(truncate_words(text, budget))
    result = strip_emoji(result)
    result = unescape(result)
    result = space_emotes(result, config)
    return neutralise_commands(result)


def sanitise(raw_text: str, config: SanitiseConfig) -> str:
    """Sanitise raw model output for a chat reply.

    Args:
        raw_text: Text returned by the model
        config: Output limit and emote tokens

    Returns:
        Chat-safe text no longer than config.limit, or "" when nothing
        complete fits
    """
    if not raw_text:
        return ""

    text = normalise(raw_text)
    budget = config.limit

    # Emote spacing and the zero-width prefix can grow the text; retry with a
    # smaller word budget until the final text fits.
    while budget > 0:
        result = _run(text, budget, config)
        overflow = len(result) - config.limit
        if overflow <= 0:
            return result
        budget -= overflow

    return ""
