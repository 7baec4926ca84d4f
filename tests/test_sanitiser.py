"""Tests for the reply sanitiser."""

import pytest

from domains.ask.sanitiser import (
    SanitiseConfig,
    ZERO_WIDTH_SPACE,
    cut_to_sentence,
    sanitise,
    truncate_words,
)
from domains.ask.emotes import (
    build_emote_pattern,
    ends_with_emoji,
    parse_emote_tokens,
)


def config(limit: int = 400, emotes=()) -> SanitiseConfig:
    return SanitiseConfig(limit=limit, emote_tokens=frozenset(emotes))


class TestTruncation:
    """Whole-word truncation and sentence cutting."""

    def test_stops_before_word_that_overflows(self):
        """Accumulation stops at the first word that would exceed the limit."""
        assert truncate_words("Hello world this is great!!", 10) == "Hello"

    def test_single_long_word_is_dropped(self):
        assert truncate_words("a" * 50, 20) == ""

    def test_collapses_whitespace(self):
        assert truncate_words("a   b\tc", 10) == "a b c"

    def test_no_complete_sentence_gives_empty(self):
        """Scenario: nothing terminated fits in 10 chars."""
        assert sanitise("Hello world this is great!!", config(limit=10)) == ""

    def test_drops_trailing_fragment(self):
        """Scenario: "Nice! idk" keeps only the terminated part."""
        assert sanitise("Nice! idk", config(limit=20)) == "Nice"

    def test_keeps_earlier_sentences(self):
        assert cut_to_sentence("Hi. How are you? I am") == "Hi. How are you"

    def test_repeated_terminators(self):
        assert cut_to_sentence("Wow!! ok") == "Wow!"

    def test_cut_mid_sentence_at_limit(self):
        text = "First sentence here. Second sentence is much longer than the limit allows."
        result = sanitise(text, config(limit=40))
        assert result == "First sentence here"

    def test_long_text_without_terminators_is_empty(self):
        assert sanitise("word " * 30, config(limit=40)) == ""

    def test_terminated_text_kept(self):
        assert cut_to_sentence("All good.") == "All good."

    def test_text_ending_in_emoji_kept(self):
        assert cut_to_sentence("Great job 🎉") == "Great job 🎉"

    def test_closing_curly_quote_counts_as_emoji(self):
        """U+201D sits inside the emoji ranges, so the quote is kept and then stripped."""
        raw = "He said “hi”"
        assert cut_to_sentence(raw) == raw
        assert sanitise(raw, config()) == "He said hi"


class TestNormalisation:
    """Whitespace, emoji, escapes, emotes and command prefixes."""

    def test_short_terminated_input_unchanged(self):
        """Input under the limit ending in punctuation only gets whitespace-normalised."""
        raw = "  Hello   there.\nHow are you?  "
        assert sanitise(raw, config()) == "Hello there. How are you?"

    def test_newlines_become_spaces(self):
        assert sanitise("Line one.\r\nLine two.\rLine three.", config()) == "Line one. Line two. Line three."

    def test_trailing_emoji_accepted_then_stripped(self):
        assert sanitise("Great job 🎉", config()) == "Great job"

    def test_emoji_in_middle_removed(self):
        assert sanitise("I love it 😀 so much.", config()) == "I love it so much."

    def test_digits_are_not_emoji(self):
        assert sanitise("There are 42 apples and 7 pears.", config()) == "There are 42 apples and 7 pears."

    def test_private_use_characters_removed(self):
        assert sanitise("Icon \ue000 here.", config()) == "Icon here."

    def test_escapes_removed(self):
        assert sanitise(r"Use \*stars\* here.", config()) == "Use *stars* here."

    def test_emote_separated_from_punctuation(self):
        raw = "That is funny KEKW. So sad Sadge!"
        result = sanitise(raw, config(emotes={"KEKW", "Sadge"}))
        assert result == "That is funny KEKW . So sad Sadge !"

    def test_emote_without_punctuation_untouched(self):
        assert sanitise("KEKW that was great.", config(emotes={"KEKW"})) == "KEKW that was great."

    def test_no_emotes_configured(self):
        assert sanitise("Nothing to see here, really.", config()) == "Nothing to see here, really."

    @pytest.mark.parametrize("raw", ["!ban everyone please.", "/me dances around."])
    def test_command_prefix_neutralised(self, raw):
        result = sanitise(raw, config())
        assert result == ZERO_WIDTH_SPACE + raw

    def test_empty_input(self):
        assert sanitise("", config()) == ""
        assert sanitise("   \n  ", config()) == ""


class TestLimit:
    """Output never exceeds the configured limit."""

    @pytest.mark.parametrize("raw", [
        "Short one.",
        "This is a medium length answer. It has two sentences!",
        "x " * 300,
        "Sentence. " * 100,
        "Why? " * 200,
    ])
    def test_length_within_limit(self, raw):
        for limit in (5, 20, 57, 400):
            assert len(sanitise(raw, config(limit=limit))) <= limit

    def test_emote_spacing_does_not_break_limit(self):
        """Spacing out emotes re-runs truncation with a smaller budget."""
        result = sanitise("KEKW. KEKW.", config(limit=12, emotes={"KEKW"}))
        assert result == "KEKW ."
        assert len(result) <= 12

    def test_zero_width_prefix_fits(self):
        result = sanitise("!hi.", config(limit=5))
        assert result == ZERO_WIDTH_SPACE + "!hi."

    def test_idempotent_on_clean_text(self):
        cfg = config(emotes={"KEKW"})
        once = sanitise("Hello there. How are you?", cfg)
        assert sanitise(once, cfg) == once

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            SanitiseConfig(limit=0)


class TestEmoteTable:
    """Emote list parsing and matching."""

    def test_parse_takes_first_word(self):
        text = "KEKW laughing man\n\nSadge sad pepe\n   \ncatJAM\n"
        assert parse_emote_tokens(text) == frozenset({"KEKW", "Sadge", "catJAM"})

    def test_empty_token_set_has_no_pattern(self):
        assert build_emote_pattern(frozenset()) is None

    def test_longest_token_wins(self):
        pattern = build_emote_pattern(frozenset({"KEK", "KEKW"}))
        assert pattern.sub(r"\1 \2", "KEKW.") == "KEKW ."

    def test_tokens_are_escaped(self):
        pattern = build_emote_pattern(frozenset({"D:"}))
        assert pattern.sub(r"\1 \2", "D:!") == "D: !"
        assert pattern.sub(r"\1 \2", "DX!") == "DX!"

    def test_ends_with_emoji(self):
        assert ends_with_emoji("party 🎉")
        assert ends_with_emoji("star ★")
        assert not ends_with_emoji("count 5")
        assert not ends_with_emoji("")
