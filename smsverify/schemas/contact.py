"""
smsverify/schemas/contact.py

Purpose: Request/response models for the contacts API

- Contact creation and phone number updates
- Confirmation code submission
- Outbound message requests and per-segment results
- Number normalization
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from smsverify.flow.states import ContactSmsState


class NormalizeRequest(BaseModel):
    phone_number: Optional[str] = Field(default=None, description="Free-form phone number")


class NormalizeResponse(BaseModel):
    digits: str
    international: Optional[str] = None
    valid: bool


class CreateContactRequest(BaseModel):
    phone_number: str = Field(..., description="Phone number as entered by the user")
    contact_id: Optional[str] = Field(default=None, description="Caller-chosen id")


class UpdatePhoneNumberRequest(BaseModel):
    phone_number: str


class ContactResponse(BaseModel):
    """
    Public view of a contact. The confirmation code itself is never returned.
    """
    contact_id: str
    phone_number: Optional[str] = None
    blocked: bool
    confirmed: bool
    state: ContactSmsState
    state_display: str
    can_send_messages: bool
    can_send_confirmation: bool
    can_unblock: bool
    confirmation_attempted_at: Optional[datetime] = None


class ConfirmRequest(BaseModel):
    code: str = Field(..., min_length=1, description="Code the contact received")


class SendMessageRequest(BaseModel):
    text: str
    allow_multiple: bool = Field(
        default=False,
        description="Allow splitting text longer than one SMS into several messages"
    )


class OperationResponse(BaseModel):
    success: bool
    state: ContactSmsState


class SendMessageResponse(BaseModel):
    """
    sent is False when nothing was attempted. segments holds one entry per
    segment: its length if delivered, False if delivery failed.
    """
    sent: bool
    segments: List[Union[int, bool]] = Field(default_factory=list)
    failed_segments: int = 0
    state: ContactSmsState
