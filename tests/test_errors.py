from fastapi.testclient import TestClient
from smsverify.main import app

client = TestClient(app, raise_server_exceptions=False)


def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert "error" in data
    assert "code" in data
    assert data["code"] == "HTTP_ERROR"


def test_validation_error_structure():
    response = client.post("/api/v1/numbers/normalize", json={"phone_number": ["not", "a", "string"]})
    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert "details" in data
    assert len(data["details"]) > 0


def test_custom_exception():
    from smsverify.core.exceptions import ResourceNotFoundError

    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise ResourceNotFoundError(message="Item not found")

    response = client.get("/test-custom-error")
    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "NOT_FOUND"
    assert data["error"] == "Item not found"


def test_message_too_long_error():
    from smsverify.core.exceptions import MessageTooLongError

    @app.get("/test-too-long")
    def trigger_too_long():
        raise MessageTooLongError(length=200, limit=160)

    response = client.get("/test-too-long")
    assert response.status_code == 422
    assert response.json()["code"] == "MESSAGE_TOO_LONG"
    assert response.json()["details"] == {"length": 200, "limit": 160}


def test_unhandled_exception_is_500():
    @app.get("/test-unhandled")
    def trigger_unhandled():
        raise RuntimeError("kaboom")

    response = client.get("/test-unhandled")
    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"


def test_wrong_method_is_http_error():
    response = client.get("/api/v1/numbers/normalize")
    assert response.status_code == 405
    assert response.json()["code"] == "HTTP_ERROR"
    assert response.json()["details"] is None
