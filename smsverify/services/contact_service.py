"""
smsverify/services/contact_service.py

Purpose: Contact data management

- Create contacts with a normalized phone number
- Retrieve contacts by id or phone number
- Change a contact's phone number (implicitly un-confirms it)
- Build an SMS controller bound to a stored contact
"""

import uuid
from typing import Optional

from pymongo.errors import DuplicateKeyError

from smsverify.core.config import settings
from smsverify.core.exceptions import ResourceNotFoundError, ValidationError
from smsverify.core.logging import get_logger, LogContext, mask_phone_number
from smsverify.db.mongo import get_contacts_collection
from smsverify.models.contact import DOCUMENT_FIELDS, PHONE_NUMBER, MongoContactRecord
from smsverify.services.contact_sms import ContactSmsController
from smsverify.services.gateway import GatewayClient, get_gateway_client
from smsverify.utils.phone_utils import is_valid_phone_number, numerize

logger = get_logger(__name__)


class ContactService:
    """
    Contacts stored in MongoDB, plus the SMS controller for each of them.

    Args:
        collection: pymongo collection holding contact documents
        gateway: Gateway used by the controllers this service builds
    """

    def __init__(self, collection, gateway: GatewayClient):
        self.collection = collection
        self.gateway = gateway

    def create_contact(self, phone_number: str, contact_id: Optional[str] = None) -> MongoContactRecord:
        """
        Creates a contact.

        Args:
            phone_number: Number as entered by the user
            contact_id: Optional caller-chosen id (random if omitted)

        Returns:
            The stored contact

        Raises:
            ValidationError: The number is unusable or the id is taken
        """
        if not is_valid_phone_number(phone_number):
            raise ValidationError(
                "Invalid phone number",
                details={"phone_number": phone_number}
            )

        contact_id = contact_id or uuid.uuid4().hex
        with LogContext(contact_id=contact_id):
            record = MongoContactRecord.new(self.collection, contact_id, numerize(phone_number))

            try:
                self.collection.insert_one(dict(record))
            except DuplicateKeyError:
                logger.warning("Contact already exists")
                raise ValidationError(
                    "Contact already exists",
                    details={"contact_id": contact_id}
                )

            logger.info(f"Contact created for {mask_phone_number(record[PHONE_NUMBER])}")
            return record

    def get_contact(self, contact_id: str) -> MongoContactRecord:
        """
        Retrieves a contact by id.

        Raises:
            ResourceNotFoundError: No such contact
        """
        document = self.collection.find_one({"contact_id": contact_id})
        if not document:
            raise ResourceNotFoundError(
                "Contact not found",
                details={"contact_id": contact_id}
            )
        return MongoContactRecord(self.collection, document)

    def find_by_phone_number(self, phone_number: str) -> Optional[MongoContactRecord]:
        """
        Looks a contact up by phone number, in any format the user typed it.
        """
        document = self.collection.find_one({PHONE_NUMBER: numerize(phone_number)})
        if not document:
            return None
        return MongoContactRecord(self.collection, document)

    def update_phone_number(self, contact_id: str, phone_number: str) -> MongoContactRecord:
        """
        Replaces a contact's phone number. The contact is no longer
        confirmed afterwards unless the number is unchanged.

        Raises:
            ValidationError: The number is unusable
            ResourceNotFoundError: No such contact
        """
        if not is_valid_phone_number(phone_number):
            raise ValidationError(
                "Invalid phone number",
                details={"phone_number": phone_number}
            )

        record = self.get_contact(contact_id)
        with LogContext(contact_id=contact_id):
            controller = self.controller_for(record)
            record[PHONE_NUMBER] = phone_number
            controller.save()
            logger.info(f"Phone number changed to {mask_phone_number(record[PHONE_NUMBER])}")
        return record

    def controller_for(self, record: MongoContactRecord) -> ContactSmsController:
        return ContactSmsController(
            record,
            self.gateway,
            fields=DOCUMENT_FIELDS,
            normalize_on_save=True,
            max_length=settings.SMS_MAX_LENGTH,
            code_length=settings.CONFIRMATION_CODE_LENGTH
        )

    def get_controller(self, contact_id: str) -> ContactSmsController:
        """
        Builds the SMS controller for a stored contact.

        Raises:
            ResourceNotFoundError: No such contact
        """
        return self.controller_for(self.get_contact(contact_id))


def get_contact_service() -> ContactService:
    """
    FastAPI dependency: contact service bound to the live collection and gateway.
    """
    return ContactService(get_contacts_collection(), get_gateway_client())
