"""Error taxonomy for the verification core.

Every caller-facing failure maps to a stable code, an HTTP status and an
outcome class the UI can show:
- "rejected": nothing happened (auth, validation, missing or wrong-state entity)
- "retry": the action did not take effect, try again (persistence, storage, races)

Notification delivery failures never reach the caller as errors; they are
collected per recipient into the fan-out result instead.
"""

from typing import Any


class VerifyError(RuntimeError):
    """Base class for errors raised by the verification core."""

    code = "VERIFY_ERROR"
    http_status = 400
    outcome = "rejected"

    def __init__(self, message: str, detail: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "detail": {"outcome": self.outcome, **self.detail},
            }
        }


class Unauthenticated(VerifyError):
    code = "UNAUTHENTICATED"
    http_status = 401


class Forbidden(VerifyError):
    code = "FORBIDDEN"
    http_status = 403


class ValidationError(VerifyError):
    code = "VALIDATION_ERROR"
    http_status = 422


class NotFound(VerifyError):
    code = "NOT_FOUND"
    http_status = 404


class InvalidState(VerifyError):
    code = "INVALID_STATE"
    http_status = 409


class InvalidTransition(InvalidState):
    code = "INVALID_TRANSITION"


class ConcurrentModification(InvalidState):
    """Conditional update matched no row: someone else changed it first."""

    code = "CONCURRENT_MODIFICATION"
    outcome = "retry"


class PersistenceError(VerifyError):
    code = "PERSISTENCE_ERROR"
    http_status = 503
    outcome = "retry"


class StorageError(VerifyError):
    code = "STORAGE_ERROR"
    http_status = 502
    outcome = "retry"


class NotificationDeliveryError(VerifyError):
    """Single-recipient send failure. Recovered inside the fan-out."""

    code = "NOTIFICATION_DELIVERY_FAILED"
    http_status = 502
    outcome = "partial"
