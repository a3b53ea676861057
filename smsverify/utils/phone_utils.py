"""
smsverify/utils/phone_utils.py

Purpose: Phone number normalization

- Strips free-form user input down to digits
- Converts digit strings to an E.164-like "+<country><number>" form
- Never raises on bad input: returns "" / None instead
"""

import re
from typing import Optional

from smsverify.utils.constants import INTERNATIONAL_PREFIX, NANP_COUNTRY_CODE

_NON_DIGITS = re.compile(r"\D")


def numerize(value: Optional[str]) -> str:
    """
    Removes every character that is not a decimal digit.

    Args:
        value: Free-form phone number text, e.g. "(234) 567-8901"

    Returns:
        Digit string, "" for None
    """
    if value is None:
        return ""
    return _NON_DIGITS.sub("", str(value))


def internationalize(value: Optional[str]) -> Optional[str]:
    """
    Converts a phone number to its "+<digits>" dialable form.

    Rules:
    - 11 digits           -> "+" prefixed ("12345678901" -> "+12345678901")
    - 10 digits           -> "+1" prefixed (North American number)
    - "+" and 11 digits   -> returned as "+<digits>", i.e. unchanged
    - 12 digits, no "+"   -> None (not auto-prefixed)
    - anything else       -> None

    Args:
        value: Raw or partially normalized phone number

    Returns:
        International form, or None if the number is not usable
    """
    digits = numerize(value)

    if len(digits) == 11:
        return f"{INTERNATIONAL_PREFIX}{digits}"
    if len(digits) == 10:
        return f"{INTERNATIONAL_PREFIX}{NANP_COUNTRY_CODE}{digits}"

    return None


def normalize(value: Optional[str]) -> Optional[str]:
    """Normalizes user input to the form used when talking to the gateway."""
    return internationalize(value)


def is_valid_phone_number(value: Optional[str]) -> bool:
    return internationalize(value) is not None
