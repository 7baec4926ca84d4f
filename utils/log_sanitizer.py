"""Log sanitizer - removes credentials from log messages.

OAuth tokens, API keys and client secrets show up in provider error bodies
and must never reach the log files.
"""

import re
from typing import Union

# Patterns to detect and redact sensitive data
SENSITIVE_PATTERNS = [
    # IRC-style chat tokens
    (r'oauth:[A-Za-z0-9]+', 'oauth:[REDACTED]'),

    # Google API keys
    (r'AIza[0-9A-Za-z\-_]{35}', '[GOOGLE_KEY]'),

    # Form/JSON fields carrying secrets
    (r'(access_token|refresh_token|client_secret|api_key|apikey|password)(["\s:=]+)[^\s,&}"\']{8,}',
     r'\1\2[REDACTED]'),

    # Bearer tokens
    (r'(Bearer|OAuth)\s+[A-Za-z0-9\-_\.]+', r'\1 [REDACTED]'),

    # JWT tokens (three base64 segments separated by dots)
    (r'eyJ[A-Za-z0-9\-_]+\.eyJ[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+', '[JWT_TOKEN]'),

    # Bare Twitch access/refresh tokens (30 and 50 lowercase alphanumerics)
    (r'\b[a-z0-9]{30}\b|\b[a-z0-9]{50}\b', '[TOKEN]'),
]

# Compiled patterns for efficiency
_COMPILED_PATTERNS = [(re.compile(p), r) for p, r in SENSITIVE_PATTERNS]


def sanitize_log(text: str) -> str:
    """Remove credentials from text for safe logging.

    Args:
        text: The text to sanitize

    Returns:
        Sanitized text with secrets replaced by placeholders
    """
    if not text:
        return text

    result = text
    for pattern, replacement in _COMPILED_PATTERNS:
        result = pattern.sub(replacement, result)

    return result


def sanitize_for_log(value: Union[str, bytes, None], max_length: int = 200) -> str:
    """Sanitize and truncate a value for logging.

    Args:
        value: The value to sanitize (string or bytes)
        max_length: Maximum length of returned string

    Returns:
        Sanitized, truncated string safe for logging
    """
    if value is None:
        return "<None>"

    if isinstance(value, bytes):
        text = value.decode('utf-8', errors='replace')
    else:
        text = str(value)

    sanitized = sanitize_log(text)

    if len(sanitized) > max_length:
        return sanitized[:max_length] + f"... [{len(text)} chars total]"

    return sanitized
