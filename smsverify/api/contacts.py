"""
smsverify/api/contacts.py

Purpose: Contacts REST API

- Phone number normalization
- Contact creation, lookup and number changes
- Confirmation code sending and verification
- Outbound messages and unblock requests

Endpoints are sync; FastAPI runs them in its threadpool.
No business logic here: everything goes through ContactService
and ContactSmsController.
"""

from fastapi import APIRouter, Depends, status

from smsverify.core.logging import LogContext
from smsverify.flow.states import get_state_metadata
from smsverify.schemas.contact import (
    ConfirmRequest,
    ContactResponse,
    CreateContactRequest,
    NormalizeRequest,
    NormalizeResponse,
    OperationResponse,
    SendMessageRequest,
    SendMessageResponse,
    UpdatePhoneNumberRequest,
)
from smsverify.services.contact_service import ContactService, get_contact_service
from smsverify.services.contact_sms import ContactSmsController
from smsverify.utils.phone_utils import internationalize, numerize

router = APIRouter()


def _contact_response(contact_id: str, controller: ContactSmsController) -> ContactResponse:
    state = controller.state
    metadata = get_state_metadata(state)
    return ContactResponse(
        contact_id=contact_id,
        phone_number=controller.phone_number,
        blocked=controller.blocked,
        confirmed=controller.is_confirmed,
        state=state,
        state_display=metadata.display_name,
        can_send_messages=metadata.can_send_messages,
        can_send_confirmation=metadata.can_send_confirmation,
        can_unblock=metadata.can_unblock,
        confirmation_attempted_at=controller.confirmation_attempted_at,
    )


@router.post("/numbers/normalize", response_model=NormalizeResponse)
def normalize_number(request: NormalizeRequest):
    """
    Normalizes a free-form phone number without storing anything.
    """
    international = internationalize(request.phone_number)
    return NormalizeResponse(
        digits=numerize(request.phone_number),
        international=international,
        valid=international is not None,
    )


@router.post("/contacts", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
def create_contact(
    request: CreateContactRequest,
    service: ContactService = Depends(get_contact_service)
):
    record = service.create_contact(request.phone_number, request.contact_id)
    return _contact_response(record.contact_id, service.controller_for(record))


@router.get("/contacts/{contact_id}", response_model=ContactResponse)
def get_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service)
):
    return _contact_response(contact_id, service.get_controller(contact_id))


@router.put("/contacts/{contact_id}/phone-number", response_model=ContactResponse)
def update_phone_number(
    contact_id: str,
    request: UpdatePhoneNumberRequest,
    service: ContactService = Depends(get_contact_service)
):
    record = service.update_phone_number(contact_id, request.phone_number)
    return _contact_response(contact_id, service.controller_for(record))


@router.post("/contacts/{contact_id}/confirmation", response_model=OperationResponse)
def send_confirmation(
    contact_id: str,
    service: ContactService = Depends(get_contact_service)
):
    """
    Sends a confirmation code to the contact (no-op success if already confirmed).
    """
    controller = service.get_controller(contact_id)
    with LogContext(contact_id=contact_id):
        result = controller.send_confirmation()
    return OperationResponse(success=bool(result), state=controller.state)


@router.post("/contacts/{contact_id}/confirm", response_model=OperationResponse)
def confirm(
    contact_id: str,
    request: ConfirmRequest,
    service: ContactService = Depends(get_contact_service)
):
    controller = service.get_controller(contact_id)
    with LogContext(contact_id=contact_id):
        result = controller.confirm(request.code)
    return OperationResponse(success=bool(result), state=controller.state)


@router.post("/contacts/{contact_id}/messages", response_model=SendMessageResponse)
def send_message(
    contact_id: str,
    request: SendMessageRequest,
    service: ContactService = Depends(get_contact_service)
):
    """
    Sends text to a confirmed contact. Oversized text without
    allow_multiple is rejected with MESSAGE_TOO_LONG.
    """
    controller = service.get_controller(contact_id)
    with LogContext(contact_id=contact_id):
        result = controller.send_message(request.text, request.allow_multiple)

    if result is False:
        return SendMessageResponse(sent=False, state=controller.state)

    return SendMessageResponse(
        sent=True,
        segments=result,
        failed_segments=sum(1 for segment in result if segment is False),
        state=controller.state,
    )


@router.post("/contacts/{contact_id}/unblock", response_model=OperationResponse)
def unblock(
    contact_id: str,
    service: ContactService = Depends(get_contact_service)
):
    controller = service.get_controller(contact_id)
    with LogContext(contact_id=contact_id):
        result = controller.unblock()
    return OperationResponse(success=bool(result), state=controller.state)
