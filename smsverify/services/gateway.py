"""
smsverify/services/gateway.py

Purpose: SMS gateway clients

- GatewayClient: interface the SMS controller talks to (deliver, unblock)
- HttpGatewayClient: posts to the gateway's HTTP API with httpx
- TestGatewayClient: records deliveries in memory (test mode / test suite)
- Gateway failures are returned as unsuccessful responses, never raised
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from smsverify.core.config import settings
from smsverify.core.logging import get_logger, mask_phone_number
from smsverify.utils.phone_utils import internationalize

logger = get_logger(__name__)


@dataclass
class GatewayResponse:
    """
    Outcome of a gateway request.
    """
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def failed(cls, error: str, status_code: Optional[int] = None) -> "GatewayResponse":
        return cls(success=False, error=error, status_code=status_code)


class GatewayClient(ABC):
    """Upstream SMS delivery / unblock provider."""

    @abstractmethod
    def deliver(self, message: str, phone_number: str) -> GatewayResponse:
        """Sends one SMS to phone_number."""

    @abstractmethod
    def unblock(self, phone_number: str) -> GatewayResponse:
        """Asks the gateway to lift a block on phone_number."""

    def close(self) -> None:
        pass


class HttpGatewayClient(GatewayClient):
    """
    Gateway client for a JSON-over-HTTP SMS provider.

    POST {base_url}/messages  {"to": "+1...", "from": sender, "body": text}
    POST {base_url}/unblock   {"to": "+1..."}

    Any 200/201/202 response is a success.
    """

    SUCCESS_CODES = (200, 201, 202)

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        sender: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.sender = sender
        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport
        )

    def deliver(self, message: str, phone_number: str) -> GatewayResponse:
        """
        Sends an SMS via the gateway.

        Args:
            message: Message text (one segment)
            phone_number: Recipient, any format internationalize() accepts

        Returns:
            GatewayResponse with the provider message id on success
        """
        to = internationalize(phone_number)
        if to is None:
            logger.warning(f"Refusing to deliver to invalid number {mask_phone_number(phone_number)}")
            return GatewayResponse.failed("Invalid phone number")

        payload: Dict[str, Any] = {"to": to, "body": message}
        if self.sender:
            payload["from"] = self.sender

        logger.info(f"📤 Sending SMS to {mask_phone_number(to)} ({len(message)} chars)")
        return self._post("/messages", payload)

    def unblock(self, phone_number: str) -> GatewayResponse:
        """
        Requests that the gateway unblock a number.

        Args:
            phone_number: Blocked number

        Returns:
            GatewayResponse
        """
        to = internationalize(phone_number)
        if to is None:
            logger.warning(f"Refusing to unblock invalid number {mask_phone_number(phone_number)}")
            return GatewayResponse.failed("Invalid phone number")

        logger.info(f"Requesting unblock for {mask_phone_number(to)}")
        return self._post("/unblock", {"to": to})

    def _post(self, path: str, payload: Dict[str, Any]) -> GatewayResponse:
        try:
            response = self._client.post(path, json=payload)
        except httpx.TimeoutException:
            logger.error(f"SMS gateway timeout on {path}")
            return GatewayResponse.failed("SMS gateway timeout")
        except httpx.HTTPError as e:
            logger.error(f"SMS gateway request failed on {path}: {e}")
            return GatewayResponse.failed(str(e))

        if response.status_code not in self.SUCCESS_CODES:
            logger.error(f"❌ SMS gateway error: {response.status_code} - {response.text}")
            return GatewayResponse.failed(
                f"SMS gateway error: {response.status_code}",
                status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError:
            data = {}

        message_id = None
        if isinstance(data, dict):
            message_id = data.get("id") or data.get("message_id")
        logger.info(f"✅ SMS gateway accepted request: id={message_id}")

        return GatewayResponse(
            success=True,
            message_id=message_id,
            status_code=response.status_code
        )

    def close(self) -> None:
        self._client.close()


class TestGatewayClient(GatewayClient):
    """
    Gateway that records messages in memory instead of sending them.
    """

    __test__ = False

    def __init__(self):
        self.deliveries: List[Dict[str, str]] = []
        self.unblocks: List[str] = []
        self.should_succeed = True
        self.failure_reason = "SMS delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "SMS delivery failed"):
        """Configure the fake gateway behavior."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def deliver(self, message: str, phone_number: str) -> GatewayResponse:
        if not self.should_succeed:
            return GatewayResponse.failed(self.failure_reason)

        message_id = f"sms-{uuid.uuid4().hex[:12]}"
        self.deliveries.append({
            "message_id": message_id,
            "to": phone_number,
            "body": message,
        })
        logger.debug(f"Recorded test delivery {message_id} to {mask_phone_number(phone_number)}")
        return GatewayResponse(success=True, message_id=message_id)

    def unblock(self, phone_number: str) -> GatewayResponse:
        if not self.should_succeed:
            return GatewayResponse.failed(self.failure_reason)

        self.unblocks.append(phone_number)
        return GatewayResponse(success=True)

    def reset(self):
        """Clear recorded traffic (useful between tests)."""
        self.deliveries.clear()
        self.unblocks.clear()
        self.should_succeed = True
        self.failure_reason = "SMS delivery failed"


# Process-wide gateway instance
_gateway: Optional[GatewayClient] = None


def get_gateway_client() -> GatewayClient:
    """
    Returns the configured gateway, creating it on first use.

    SMS_GATEWAY_MODE=live -> HttpGatewayClient
    SMS_GATEWAY_MODE=test -> TestGatewayClient
    """
    global _gateway

    if _gateway is None:
        if settings.SMS_GATEWAY_MODE == "live":
            _gateway = HttpGatewayClient(
                base_url=settings.SMS_GATEWAY_URL,
                api_key=settings.SMS_GATEWAY_API_KEY,
                sender=settings.SMS_GATEWAY_SENDER,
                timeout=settings.SMS_GATEWAY_TIMEOUT
            )
        else:
            _gateway = TestGatewayClient()
        logger.info(f"SMS gateway initialized in {settings.SMS_GATEWAY_MODE} mode")

    return _gateway


def close_gateway_client():
    """
    Closes the gateway client.
    Called during application shutdown.
    """
    global _gateway

    if _gateway is not None:
        _gateway.close()
        _gateway = None
