"""
smsverify/utils/sms_utils.py

Purpose: SMS message builders

- Splits long text into gateway-sized segments
- Builds the default confirmation message
- Checks text against the single-message limit
"""

from typing import List

from smsverify.utils.constants import SMS_MAX_LENGTH, DEFAULT_CONFIRMATION_TEMPLATE


def chunk_message(text: str, limit: int = SMS_MAX_LENGTH) -> List[str]:
    """
    Splits text into consecutive segments of at most `limit` characters.

    Segments cover the whole input in order with no gaps or overlaps.
    Newlines count as characters like any other.

    Args:
        text: Message text
        limit: Maximum segment length (default 160)

    Returns:
        List of segments, [] for empty text

    Example:
        chunk_message("a" * 400) -> lengths [160, 160, 80]
    """
    if limit <= 0:
        raise ValueError("Chunk limit must be positive")
    if not text:
        return []
    return [text[i:i + limit] for i in range(0, len(text), limit)]


def default_confirmation_message(code: str) -> str:
    """
    Builds the generic confirmation message.

    Args:
        code: Confirmation code, embedded verbatim

    Returns:
        Message text
    """
    return DEFAULT_CONFIRMATION_TEMPLATE.format(code=code)


def fits_single_message(text: str, limit: int = SMS_MAX_LENGTH) -> bool:
    return len(text or "") <= limit


def is_blank(text) -> bool:
    return text is None or not str(text).strip()
