from typing import Optional, Any


class SmsVerifyError(Exception):
    """
    Base exception for the smsverify application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ResourceNotFoundError(SmsVerifyError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)


class ValidationError(SmsVerifyError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)


class MessageTooLongError(SmsVerifyError, ValueError):
    """
    Raised when message or confirmation text exceeds the single-SMS limit
    and splitting was not requested (or is not allowed).
    """
    def __init__(self, message: str = "SMS message is too long", length: Optional[int] = None, limit: Optional[int] = None):
        details = None
        if length is not None:
            details = {"length": length, "limit": limit}
        super().__init__(message, code="MESSAGE_TOO_LONG", status_code=422, details=details)
        self.length = length
        self.limit = limit


InputTooLongError = MessageTooLongError

