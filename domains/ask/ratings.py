"""Safety rating summary, logged when a reply is withheld."""

from typing import Any, Iterable

# (label, keyword found in the provider's category name)
RATING_CATEGORIES = [
    ("Dangerous content", "DANGER"),
    ("Harassment", "HARASS"),
    ("Hate speech", "HATE"),
    ("Sexually explicit", "SEXUAL"),
]


def _label(value: Any) -> str:
    """Enum name/value or plain string, whichever the SDK handed back."""
    return str(getattr(value, "value", None) or getattr(value, "name", None) or value)


def format_ratings(ratings: Iterable[Any]) -> str:
    """Render one line per harm category in a fixed order.

    Args:
        ratings: Safety ratings with `category` and `probability` attributes

    Returns:
        Four indented lines: dangerous, harassment, hate, sexual

    Raises:
        LookupError: If any of the four categories is missing
    """
    ratings = list(ratings)
    lines = []
    for label, keyword in RATING_CATEGORIES:
        rating = next((r for r in ratings if keyword in _label(r.category)), None)
        if rating is None:
            raise LookupError(f"No safety rating for category containing {keyword!r}")
        lines.append(f"    - {label}: {_label(rating.probability)}")
    return "\n".join(lines)
