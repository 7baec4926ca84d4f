"""Tests for credential redaction in logs."""

from utils.log_sanitizer import sanitize_for_log, sanitize_log


class TestSanitizeLog:

    def test_chat_token(self):
        assert sanitize_log("PASS oauth:abc123def456") == "PASS oauth:[REDACTED]"

    def test_google_key(self):
        key = "AIza" + "B" * 35
        assert sanitize_log(f"key={key} failed") == "key=[GOOGLE_KEY] failed"

    def test_form_fields(self):
        result = sanitize_log("refresh_token=supersecretvalue&client_secret=anothersecret1")
        assert "supersecretvalue" not in result
        assert "anothersecret1" not in result
        assert "refresh_token=[REDACTED]" in result

    def test_json_field(self):
        result = sanitize_log('{"access_token": "verysecrettoken"}')
        assert "verysecrettoken" not in result

    def test_bearer_header(self):
        assert sanitize_log("Authorization: Bearer abc.def-ghi") == "Authorization: Bearer [REDACTED]"

    def test_bare_twitch_token(self):
        token = "a1b2c3d4e5" * 3
        assert sanitize_log(f"token {token} rejected") == "token [TOKEN] rejected"

    def test_plain_text_untouched(self):
        text = "viewer asked what the weather is like"
        assert sanitize_log(text) == text

    def test_empty(self):
        assert sanitize_log("") == ""


class TestSanitizeForLog:

    def test_none(self):
        assert sanitize_for_log(None) == "<None>"

    def test_bytes(self):
        assert sanitize_for_log(b"hello") == "hello"

    def test_truncates_long_values(self):
        result = sanitize_for_log("x " * 200, max_length=50)
        assert result.startswith("x x")
        assert result.endswith("... [400 chars total]")
