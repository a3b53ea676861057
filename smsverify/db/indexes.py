"""
smsverify/db/indexes.py

Purpose: Database index management

- Creates unique and lookup indexes on contacts
- Safe to run multiple times
"""

from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from smsverify.db.mongo import get_contacts_collection
from smsverify.core.logging import get_logger

logger = get_logger(__name__)


def create_indexes(contacts=None):
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.

    Args:
        contacts: Collection to index (defaults to the configured contacts collection)
    """
    contacts = contacts if contacts is not None else get_contacts_collection()

    try:
        logger.info("Creating database indexes...")

        # Unique index on contact_id (primary identifier)
        contacts.create_index(
            [("contact_id", ASCENDING)],
            unique=True,
            name="contact_id_unique"
        )
        logger.debug("Created unique index on contacts.contact_id")

        # Lookup by phone number (inbound replies carry only the number)
        contacts.create_index(
            [("phone_number", ASCENDING)],
            name="phone_number_idx"
        )
        logger.debug("Created index on contacts.phone_number")

        # Pending confirmations by attempt time
        contacts.create_index(
            [("confirmation_attempted_at", ASCENDING)],
            name="confirmation_attempted_at_idx"
        )
        logger.debug("Created index on contacts.confirmation_attempted_at")

        logger.info("✅ Database indexes created")

    except PyMongoError as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise
