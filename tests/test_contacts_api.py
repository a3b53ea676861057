import pytest
from fastapi.testclient import TestClient

from smsverify.main import app
from smsverify.services.contact_service import ContactService, get_contact_service

client = TestClient(app)

API = "/api/v1"


@pytest.fixture
def service(collection, gateway):
    service = ContactService(collection, gateway)
    app.dependency_overrides[get_contact_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


def create_contact(phone_number="(234) 567-8901", contact_id="c-1"):
    response = client.post(f"{API}/contacts", json={"phone_number": phone_number, "contact_id": contact_id})
    assert response.status_code == 201
    return response.json()


def test_normalize_endpoint():
    response = client.post(f"{API}/numbers/normalize", json={"phone_number": "234-567-8901"})
    assert response.status_code == 200
    assert response.json() == {
        "digits": "2345678901",
        "international": "+12345678901",
        "valid": True,
    }


def test_normalize_endpoint_invalid_number():
    data = client.post(f"{API}/numbers/normalize", json={"phone_number": "what?"}).json()
    assert data["international"] is None
    assert data["valid"] is False


def test_create_contact_stores_digits(service, collection):
    data = create_contact()
    assert data["contact_id"] == "c-1"
    assert data["phone_number"] == "2345678901"
    assert data["state"] == "UNCONFIRMED"
    assert data["confirmed"] is False
    assert collection.documents[0]["phone_number"] == "2345678901"


def test_create_contact_rejects_invalid_number(service):
    response = client.post(f"{API}/contacts", json={"phone_number": "1234"})
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_create_duplicate_contact(service):
    create_contact()
    response = client.post(f"{API}/contacts", json={"phone_number": "2345678901", "contact_id": "c-1"})
    assert response.status_code == 422
    assert response.json()["error"] == "Contact already exists"


def test_unknown_contact_is_404(service):
    response = client.get(f"{API}/contacts/missing")
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_confirmation_flow(service, gateway, collection):
    create_contact()

    response = client.post(f"{API}/contacts/c-1/confirmation")
    assert response.json() == {"success": True, "state": "CONFIRMATION_PENDING"}

    code = collection.documents[0]["confirmation_code"]
    assert code in gateway.deliveries[0]["body"]

    response = client.post(f"{API}/contacts/c-1/confirm", json={"code": "wrong!"})
    assert response.json()["success"] is False

    response = client.post(f"{API}/contacts/c-1/confirm", json={"code": code})
    assert response.json() == {"success": True, "state": "CONFIRMED"}

    data = client.get(f"{API}/contacts/c-1").json()
    assert data["confirmed"] is True
    assert data["can_send_messages"] is True
    assert "confirmation_code" not in data


def test_send_message_to_unconfirmed_contact(service, gateway):
    create_contact()
    response = client.post(f"{API}/contacts/c-1/messages", json={"text": "hello"})
    assert response.status_code == 200
    assert response.json()["sent"] is False
    assert gateway.deliveries == []


def confirm_contact(collection):
    document = collection.documents[0]
    document["confirmation_code"] = "abc123"
    document["confirmed_phone_number"] = document["phone_number"]


def test_send_long_message(service, gateway, collection):
    create_contact()
    confirm_contact(collection)

    response = client.post(
        f"{API}/contacts/c-1/messages",
        json={"text": "m" * 400, "allow_multiple": True}
    )

    data = response.json()
    assert data["sent"] is True
    assert data["segments"] == [160, 160, 80]
    assert data["failed_segments"] == 0
    assert len(gateway.deliveries) == 3


def test_send_too_long_message_without_consent(service, gateway, collection):
    create_contact()
    confirm_contact(collection)

    response = client.post(f"{API}/contacts/c-1/messages", json={"text": "m" * 165})

    assert response.status_code == 422
    assert response.json()["code"] == "MESSAGE_TOO_LONG"
    assert response.json()["details"] == {"length": 165, "limit": 160}
    assert gateway.deliveries == []


def test_send_message_gateway_failure(service, gateway, collection):
    create_contact()
    confirm_contact(collection)
    gateway.configure(should_succeed=False)

    data = client.post(f"{API}/contacts/c-1/messages", json={"text": "hello"}).json()
    assert data["sent"] is True
    assert data["segments"] == [False]
    assert data["failed_segments"] == 1


def test_changing_number_unconfirms_contact(service, collection):
    create_contact()
    confirm_contact(collection)

    response = client.put(f"{API}/contacts/c-1/phone-number", json={"phone_number": "734.567.8901"})

    data = response.json()
    assert data["phone_number"] == "7345678901"
    assert data["state"] == "CONFIRMATION_PENDING"
    assert data["confirmed"] is False


def test_contact_reports_available_operations(service, collection):
    data = create_contact()
    assert data["can_send_confirmation"] is True
    assert data["can_unblock"] is False

    collection.documents[0]["blocked"] = True
    data = client.get(f"{API}/contacts/c-1").json()
    assert data["state"] == "BLOCKED"
    assert data["can_send_confirmation"] is False
    assert data["can_unblock"] is True
    assert data["can_send_messages"] is False


def test_unblock(service, gateway, collection):
    create_contact()

    response = client.post(f"{API}/contacts/c-1/unblock")
    assert response.json()["success"] is False

    collection.documents[0]["blocked"] = True
    response = client.post(f"{API}/contacts/c-1/unblock")
    assert response.json() == {"success": True, "state": "UNCONFIRMED"}
    assert collection.documents[0]["blocked"] is False
    assert gateway.unblocks == ["2345678901"]
