"""Error types for the events service."""
from enum import Enum
from typing import Iterable


class ErrorCode(Enum):
    """Error codes surfaced to API callers."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    MALFORMED_RECORD = "MALFORMED_RECORD"
    STORE_ERROR = "STORE_ERROR"


class EventsError(Exception):
    """Base error with a code and a user-safe message."""

    code: ErrorCode = ErrorCode.STORE_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(EventsError):
    """Raised when request input fails validation."""

    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class EventNotFoundError(EventsError):
    """Raised when a single event lookup finds nothing."""

    code = ErrorCode.EVENT_NOT_FOUND

    def __init__(self, zip_code: str, event_id: str):
        super().__init__("Event not found")
        self.zip_code = zip_code
        self.event_id = event_id


class MalformedRecordError(EventsError):
    """Raised when a stored item cannot be mapped to an Event."""

    code = ErrorCode.MALFORMED_RECORD

    def __init__(self, reason: str, missing_fields: Iterable[str] = ()):
        super().__init__(f"Stored event record is malformed: {reason}")
        self.reason = reason
        self.missing_fields = tuple(missing_fields)


class StoreError(EventsError):
    """Raised when a DynamoDB call fails (network, throttling, permissions, ...)."""

    code = ErrorCode.STORE_ERROR

    def __init__(self, operation: str, error_code: str = ""):
        super().__init__(f"Event store {operation} failed")
        self.operation = operation
        self.error_code = error_code
