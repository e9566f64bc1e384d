from typing import Any, Optional, Tuple

MOOD_RATING_MIN = 1
MOOD_RATING_MAX = 10


def _as_integral(value: Any) -> Optional[int]:
    """Return *value* as an int if it is a whole number, else None. Booleans are not numbers here."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def validate_content(content: Any) -> Tuple[bool, Optional[str]]:
    """Entry text must be a non-blank string.

    Returns (is_valid, error_message)."""
    if content is None:
        return False, "Content is required"
    if not isinstance(content, str):
        return False, "Content must be a string"
    if not content.strip():
        return False, "Content must not be empty"
    return True, None


def validate_mood_rating(rating: Any) -> Tuple[bool, Optional[str]]:
    """Self-reported mood is optional; when given it is a whole number 1-10."""
    if rating is None:
        return True, None
    value = _as_integral(rating)
    if value is None:
        return False, "user_mood_rating must be a whole number"
    if not MOOD_RATING_MIN <= value <= MOOD_RATING_MAX:
        return False, f"user_mood_rating must be between {MOOD_RATING_MIN} and {MOOD_RATING_MAX}"
    return True, None


def validate_entry_payload(data: Any) -> Tuple[Optional[dict], Optional[str]]:
    """Validate a POST /api/entries body.

    Returns (cleaned, error_message); exactly one of them is None.
    """
    if not isinstance(data, dict):
        return None, "Request body must be a JSON object"

    ok, error = validate_content(data.get('content'))
    if not ok:
        return None, error

    rating = data.get('user_mood_rating')
    ok, error = validate_mood_rating(rating)
    if not ok:
        return None, error

    return {
        'content': data['content'],
        'user_mood_rating': _as_integral(rating) if rating is not None else None,
    }, None
