"""
smsverify/utils/constants.py

Purpose: Centralized static content

- SMS size limits
- Confirmation code settings
- Default confirmation message template

(Prevents hardcoding across the codebase)
"""

import string

# ============================================================
# SMS LIMITS
# ============================================================

# Characters a gateway accepts in a single message
SMS_MAX_LENGTH = 160

# ============================================================
# CONFIRMATION CODES
# ============================================================

CONFIRMATION_CODE_LENGTH = 6
CONFIRMATION_CODE_ALPHABET = string.digits

# Must contain {code}
DEFAULT_CONFIRMATION_TEMPLATE = (
    "Your confirmation code is {code}. "
    "Reply with this code to start receiving text messages."
)

# ============================================================
# PHONE NUMBERS
# ============================================================

INTERNATIONAL_PREFIX = "+"
NANP_COUNTRY_CODE = "1"

# Values read from storage that mean "blocked"
TRUTHY_STRINGS = ("true", "1", "t", "yes")
