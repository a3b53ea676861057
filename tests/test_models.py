import pytest

from smsverify.core.exceptions import ResourceNotFoundError, ValidationError
from smsverify.db.indexes import create_indexes
from smsverify.flow.states import ContactSmsState, derive_state, get_state_metadata, is_truthy
from smsverify.models.contact import ContactFieldMap, MongoContactRecord
from smsverify.services.contact_service import ContactService


@pytest.mark.parametrize("fields, expected", [
    (("2345678901", True, "123456", "2345678901"), ContactSmsState.BLOCKED),
    (("2345678901", False, "123456", "2345678901"), ContactSmsState.CONFIRMED),
    (("2345678901", False, "123456", None), ContactSmsState.CONFIRMATION_PENDING),
    (("7345678901", False, "123456", "2345678901"), ContactSmsState.CONFIRMATION_PENDING),
    (("2345678901", False, None, None), ContactSmsState.UNCONFIRMED),
    (("", False, None, ""), ContactSmsState.UNCONFIRMED),
])
def test_derive_state(fields, expected):
    assert derive_state(*fields) == expected


def test_only_confirmed_state_can_send():
    assert get_state_metadata(ContactSmsState.CONFIRMED).can_send_messages
    assert not get_state_metadata(ContactSmsState.CONFIRMATION_PENDING).can_send_messages
    assert get_state_metadata(ContactSmsState.BLOCKED).can_unblock


def test_is_truthy_reads_legacy_strings():
    assert is_truthy("true")
    assert is_truthy("T")
    assert is_truthy("1")
    assert not is_truthy("false")
    assert not is_truthy(None)
    assert is_truthy(True)


def test_field_map_rejects_unknown_fields():
    with pytest.raises(ValueError):
        ContactFieldMap.for_attributes(mobile="phone")


def test_document_field_map_with_renamed_key():
    fields = ContactFieldMap.for_document(phone_number="msisdn")
    document = {"msisdn": "2345678901"}

    assert fields.get(document, "phone_number") == "2345678901"
    fields.set(document, "blocked", True)
    assert document["blocked"] is True


def test_mongo_record_save_upserts(collection):
    record = MongoContactRecord.new(collection, "c-9", "2345678901")
    record["_id"] = "ignored"

    assert record.save() is True
    stored = collection.find_one({"contact_id": "c-9"})
    assert stored["phone_number"] == "2345678901"
    assert "_id" not in stored
    assert stored["updated_at"] is not None


def test_create_indexes(collection):
    create_indexes(collection)
    names = [options["name"] for _, options in collection.indexes]
    assert names == ["contact_id_unique", "phone_number_idx", "confirmation_attempted_at_idx"]


def test_contact_service_lookup(collection, gateway):
    service = ContactService(collection, gateway)
    service.create_contact("+1 (234) 567-8901", contact_id="c-2")

    assert service.get_contact("c-2")["phone_number"] == "12345678901"
    assert service.find_by_phone_number("1.234.567.8901").contact_id == "c-2"
    assert service.find_by_phone_number("9999999999") is None

    with pytest.raises(ResourceNotFoundError):
        service.get_contact("nope")
    with pytest.raises(ValidationError):
        service.update_phone_number("c-2", "12")


def test_contact_service_controller_normalizes(collection, gateway):
    service = ContactService(collection, gateway)
    service.create_contact("2345678901", contact_id="c-3")

    controller = service.get_controller("c-3")
    assert controller.normalize_on_save
    assert controller.send_confirmation() is True

    stored = collection.find_one({"contact_id": "c-3"})
    assert len(stored["confirmation_code"]) == 6
    assert stored["confirmed_phone_number"] is None
