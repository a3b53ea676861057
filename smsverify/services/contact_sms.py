"""
smsverify/services/contact_sms.py

Purpose: SMS lifecycle of a single contact

- Confirmation workflow: issue a code, verify the code the user sends back
- Outbound messages, split into 160-character segments when allowed
- Gateway unblock requests
- Optional phone number normalization before every save

Gateway failures come back as False (or False entries per segment).
Only oversized text raises (MessageTooLongError).

Not safe for concurrent use on the same record: callers serialize
operations per contact.
"""

from datetime import datetime
from typing import Any, Callable, List, Optional, Union

from smsverify.core.exceptions import MessageTooLongError
from smsverify.core.logging import get_logger, LogContext, mask_phone_number
from smsverify.flow.states import ContactSmsState, derive_state, is_confirmed, is_truthy
from smsverify.models.contact import (
    BLOCKED,
    CONFIRMATION_ATTEMPTED_AT,
    CONFIRMATION_CODE,
    CONFIRMED_PHONE_NUMBER,
    DEFAULT_FIELDS,
    PHONE_NUMBER,
    ContactFieldMap,
    ContactRecord,
)
from smsverify.services.gateway import GatewayClient
from smsverify.utils.code_utils import codes_match, generate_confirmation_code
from smsverify.utils.constants import CONFIRMATION_CODE_LENGTH, SMS_MAX_LENGTH
from smsverify.utils.phone_utils import numerize
from smsverify.utils.sms_utils import chunk_message, default_confirmation_message, fits_single_message, is_blank
from smsverify.utils.time_utils import utc_now

logger = get_logger(__name__)

SegmentResult = Union[int, bool]


def normalize_phone_number(record: Any, fields: ContactFieldMap = DEFAULT_FIELDS) -> None:
    """
    Replaces the record's phone number with its digits-only form.

    Call this before saving when the controller was not built with
    normalize_on_save=True.
    """
    fields.set(record, PHONE_NUMBER, numerize(fields.get(record, PHONE_NUMBER)))


class ContactSmsController:
    """
    Drives SMS confirmation, delivery and unblocking for one contact record.

    Args:
        record: Persisted contact exposing save()
        gateway: GatewayClient used for delivery and unblock requests
        fields: Where the five logical fields live on `record`
        confirmation_message: Builds the confirmation text from a code
        normalize_on_save: Numerize the phone number before every save
        max_length: Single-message character limit
        code_length: Length of generated confirmation codes
        clock: Returns "now" for confirmation timestamps

    Usage:
        controller = ContactSmsController(user, gateway)
        controller.send_confirmation()
        controller.confirm("123456")
        controller.send_message("Hello!")
    """

    def __init__(
        self,
        record: ContactRecord,
        gateway: GatewayClient,
        fields: ContactFieldMap = DEFAULT_FIELDS,
        confirmation_message: Callable[[str], str] = default_confirmation_message,
        normalize_on_save: bool = False,
        max_length: int = SMS_MAX_LENGTH,
        code_length: int = CONFIRMATION_CODE_LENGTH,
        clock: Callable[[], datetime] = utc_now
    ):
        if not isinstance(record, ContactRecord):
            raise TypeError("record must provide a save() method")
        self.record = record
        self.gateway = gateway
        self.fields = fields
        self.confirmation_message = confirmation_message
        self.normalize_on_save = normalize_on_save
        self.max_length = max_length
        self.code_length = code_length
        self.clock = clock

    # ------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------

    @property
    def phone_number(self) -> Optional[str]:
        return self.fields.get(self.record, PHONE_NUMBER)

    @property
    def blocked(self) -> bool:
        return is_truthy(self.fields.get(self.record, BLOCKED))

    @property
    def confirmation_code(self) -> Optional[str]:
        return self.fields.get(self.record, CONFIRMATION_CODE)

    @property
    def confirmation_attempted_at(self) -> Optional[datetime]:
        return self.fields.get(self.record, CONFIRMATION_ATTEMPTED_AT)

    @property
    def confirmed_phone_number(self) -> Optional[str]:
        return self.fields.get(self.record, CONFIRMED_PHONE_NUMBER)

    @property
    def is_confirmed(self) -> bool:
        """True if the current phone number has been confirmed by the user."""
        return is_confirmed(self.phone_number, self.confirmed_phone_number)

    @property
    def state(self) -> ContactSmsState:
        return derive_state(
            self.phone_number,
            self.fields.get(self.record, BLOCKED),
            self.confirmation_code,
            self.confirmed_phone_number
        )

    def _log_context(self) -> LogContext:
        return LogContext(
            phone_number=mask_phone_number(self.phone_number),
            state=self.state.value
        )

    def save(self) -> Any:
        """
        Persists the record, normalizing the phone number first if configured.

        Returns:
            Whatever the record's save() returns
        """
        if self.normalize_on_save:
            normalize_phone_number(self.record, self.fields)
        return self.record.save()

    # ------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------

    def send_message(self, text: str, allow_multiple: bool = False) -> Union[bool, List[SegmentResult]]:
        """
        Sends one or more SMS to the contact's confirmed number.

        Text longer than one message is only sent when allow_multiple is True;
        it is then split into segments delivered one after another.

        Args:
            text: Message text
            allow_multiple: Permit splitting into several messages

        Returns:
            False if nothing was sent (blank text, blocked, not confirmed),
            otherwise one entry per segment: its length if delivered, False if not

        Raises:
            MessageTooLongError: text exceeds the limit and allow_multiple is False
        """
        text = "" if text is None else str(text)

        if not fits_single_message(text, self.max_length) and not allow_multiple:
            raise MessageTooLongError(
                "SMS message is too long. Either allow multiple messages or shorten the text.",
                length=len(text),
                limit=self.max_length
            )

        with self._log_context():
            if is_blank(text) or self.blocked:
                logger.debug("Skipping SMS: blank text or blocked number")
                return False
            if not self.is_confirmed:
                logger.debug("Skipping SMS: phone number not confirmed")
                return False

            results: List[SegmentResult] = []
            for segment in chunk_message(text, self.max_length):
                response = self.gateway.deliver(segment, self.phone_number)
                if response.success:
                    results.append(len(segment))
                else:
                    logger.warning(f"SMS segment delivery failed: {response.error}")
                    results.append(False)

            logger.info(
                f"SMS sent: {sum(1 for r in results if r is not False)}/{len(results)} segments delivered"
            )
            return results

    def send_confirmation(self) -> Any:
        """
        Sends a new confirmation code to the contact's phone number.

        A successful delivery stores the code and the attempt time and clears
        any earlier confirmation.

        Returns:
            True if already confirmed, False if blocked, numberless or the
            delivery failed, otherwise the result of saving the record

        Raises:
            MessageTooLongError: the rendered confirmation message exceeds the limit
        """
        with self._log_context():
            if self.blocked:
                logger.debug("Not sending confirmation: number is blocked")
                return False
            if self.is_confirmed:
                logger.debug("Not sending confirmation: already confirmed")
                return True
            if is_blank(self.phone_number):
                logger.debug("Not sending confirmation: no phone number")
                return False

            code = generate_confirmation_code(self.code_length)
            message = str(self.confirmation_message(code))

            if not fits_single_message(message, self.max_length):
                raise MessageTooLongError(
                    f"SMS confirmation message is too long. Limit it to {self.max_length} characters.",
                    length=len(message),
                    limit=self.max_length
                )

            response = self.gateway.deliver(message, self.phone_number)
            if not response.success:
                logger.warning(f"Confirmation delivery failed: {response.error}")
                return False

            self.fields.set(self.record, CONFIRMATION_CODE, code)
            self.fields.set(self.record, CONFIRMATION_ATTEMPTED_AT, self.clock())
            self.fields.set(self.record, CONFIRMED_PHONE_NUMBER, None)

            saved = self.save()
            logger.info(f"Confirmation code sent (saved={bool(saved)})")
            return saved

    def confirm(self, code: str) -> Any:
        """
        Compares a user-supplied code with the stored one (case-insensitive).

        On a match the *current* phone number becomes the confirmed number,
        even if it changed after the code was sent.

        Args:
            code: Code the user sent back

        Returns:
            False on mismatch, otherwise the result of saving the record
        """
        with self._log_context():
            if not codes_match(self.confirmation_code, code):
                logger.info("Confirmation code mismatch")
                return False

            # The stored number must match what save() will persist
            if self.normalize_on_save:
                normalize_phone_number(self.record, self.fields)
            self.fields.set(self.record, CONFIRMED_PHONE_NUMBER, self.phone_number)
            saved = self.save()
            logger.info(f"Phone number confirmed (saved={bool(saved)})")
            return saved

    def unblock(self) -> Any:
        """
        Asks the gateway to unblock the contact's number.

        Returns:
            False if not blocked or the gateway refused, otherwise the
            result of saving the record with blocked cleared
        """
        with self._log_context():
            if not self.blocked:
                logger.debug("Not unblocking: number is not blocked")
                return False

            response = self.gateway.unblock(self.phone_number)
            if not response.success:
                logger.warning(f"Unblock request failed: {response.error}")
                return False

            self.fields.set(self.record, BLOCKED, False)
            saved = self.save()
            logger.info(f"Phone number unblocked (saved={bool(saved)})")
            return saved
