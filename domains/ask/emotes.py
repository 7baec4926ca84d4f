"""Emote and emoji tables used by the sanitiser."""

import re
from pathlib import Path

# Emoji/pictograph code points. A generic emoji class would also match the
# ASCII digits, so the ranges are spelled out.
EMOJI_PATTERN = re.compile(
    '['
    '\u2011-\u26FF'          # punctuation, symbols, misc pictographs
    '\u2700-\u27BF'          # dingbats
    '\uE000-\uF8FF'          # private use area
    '\U0001F000-\U0001F7FF'  # mahjong .. geometric shapes extended
    '\U0001F910-\U0001F9FF'  # supplemental symbols and pictographs
    ']'
)

# Punctuation that stops the chat client from recognising a glued emote
EMOTE_PUNCTUATION = ".,!?"


def parse_emote_tokens(text: str) -> frozenset[str]:
    """Parse an emote list (one emote per line, "<token> <description>")."""
    tokens = set()
    for line in text.splitlines():
        parts = line.split()
        if parts:
            tokens.add(parts[0])
    return frozenset(tokens)


def load_emote_tokens(path: Path) -> frozenset[str]:
    """Load emote tokens from a file; a missing file means no emotes."""
    if not path.exists():
        return frozenset()
    return parse_emote_tokens(path.read_text(encoding="utf-8"))


def build_emote_pattern(tokens: frozenset[str]) -> re.Pattern | None:
    """Compile a matcher for an emote glued to trailing punctuation.

    Longer tokens are tried first so "KEKW" wins over "KEK".
    """
    if not tokens:
        return None
    alternation = "|".join(re.escape(t) for t in sorted(tokens, key=lambda t: (-len(t), t)))
    return re.compile(f"({alternation})([{re.escape(EMOTE_PUNCTUATION)}])")


def ends_with_emoji(text: str) -> bool:
    """Check whether the last character is an emoji/pictograph."""
    return bool(text) and EMOJI_PATTERN.fullmatch(text[-1]) is not None
