"""
smsverify/utils/code_utils.py

Purpose: One-time confirmation codes

- Generates random codes with the secrets module
- Compares user-entered codes case-insensitively
"""

import secrets
from typing import Optional

from smsverify.utils.constants import CONFIRMATION_CODE_ALPHABET, CONFIRMATION_CODE_LENGTH


def generate_confirmation_code(
    length: int = CONFIRMATION_CODE_LENGTH,
    alphabet: str = CONFIRMATION_CODE_ALPHABET
) -> str:
    """
    Generates a random confirmation code.

    Args:
        length: Number of characters (default 6)
        alphabet: Characters to draw from (default decimal digits)

    Returns:
        Code such as "048213"
    """
    if length <= 0:
        raise ValueError("Confirmation code length must be positive")
    return "".join(secrets.choice(alphabet) for _ in range(length))


def codes_match(expected: Optional[str], supplied: Optional[str]) -> bool:
    """
    Case-insensitive code comparison. Surrounding whitespace is not
    ignored, and blank codes never match.
    """
    expected = str(expected or "")
    supplied = str(supplied or "")
    if not expected.strip() or not supplied.strip():
        return False
    return secrets.compare_digest(
        expected.lower().encode("utf-8"),
        supplied.lower().encode("utf-8")
    )
