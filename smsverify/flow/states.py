"""
smsverify/flow/states.py

Purpose: Defines the SMS states of a contact

- Enum for each stage (BLOCKED, UNCONFIRMED, CONFIRMATION_PENDING, CONFIRMED)
- States are derived from stored fields, never stored themselves
- Metadata for each state (which operations do something useful)
"""

from enum import Enum
from typing import Any, Dict, Optional
from dataclasses import dataclass

from smsverify.utils.constants import TRUTHY_STRINGS


class ContactSmsState(str, Enum):
    """
    SMS states of a contact, derived in this order of precedence:

    BLOCKED > CONFIRMED > CONFIRMATION_PENDING > UNCONFIRMED
    """

    # Gateway refuses delivery until unblocked
    BLOCKED = "BLOCKED"

    # No code issued, or the number changed since
    UNCONFIRMED = "UNCONFIRMED"

    # A code was sent and has not been confirmed yet
    CONFIRMATION_PENDING = "CONFIRMATION_PENDING"

    # confirmed_phone_number equals the current phone number
    CONFIRMED = "CONFIRMED"


@dataclass
class StateMetadata:
    """
    Metadata associated with each state.
    """
    name: ContactSmsState
    display_name: str
    can_send_messages: bool = False
    can_send_confirmation: bool = True
    can_unblock: bool = False


STATE_METADATA: Dict[ContactSmsState, StateMetadata] = {
    ContactSmsState.BLOCKED: StateMetadata(
        name=ContactSmsState.BLOCKED,
        display_name="Blocked",
        can_send_confirmation=False,
        can_unblock=True,
    ),
    ContactSmsState.UNCONFIRMED: StateMetadata(
        name=ContactSmsState.UNCONFIRMED,
        display_name="Unconfirmed",
    ),
    ContactSmsState.CONFIRMATION_PENDING: StateMetadata(
        name=ContactSmsState.CONFIRMATION_PENDING,
        display_name="Awaiting confirmation code",
    ),
    ContactSmsState.CONFIRMED: StateMetadata(
        name=ContactSmsState.CONFIRMED,
        display_name="Confirmed",
        can_send_messages=True,
    ),
}


def is_truthy(value: Any) -> bool:
    """
    Reads a stored flag. Accepts booleans and legacy string values ("true", "1", "t", "yes").
    """
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    return bool(value)


def is_confirmed(phone_number: Optional[str], confirmed_phone_number: Optional[str]) -> bool:
    """
    A number is confirmed when the confirmed number is set and equals the current one.
    """
    if not confirmed_phone_number:
        return False
    return confirmed_phone_number == phone_number


def derive_state(
    phone_number: Optional[str],
    blocked: Any,
    confirmation_code: Optional[str],
    confirmed_phone_number: Optional[str]
) -> ContactSmsState:
    """
    Computes the current state from stored contact fields.

    Args:
        phone_number: Current number
        blocked: Stored blocked flag
        confirmation_code: Last issued code
        confirmed_phone_number: Number last confirmed

    Returns:
        ContactSmsState
    """
    if is_truthy(blocked):
        return ContactSmsState.BLOCKED
    if is_confirmed(phone_number, confirmed_phone_number):
        return ContactSmsState.CONFIRMED
    if confirmation_code:
        return ContactSmsState.CONFIRMATION_PENDING
    return ContactSmsState.UNCONFIRMED


def get_state_metadata(state: ContactSmsState) -> StateMetadata:
    return STATE_METADATA[state]
