"""
Application error taxonomy.

Every error the API reports deliberately is an AppError subclass. The
exception handlers registered in app.main turn them into JSON bodies of the
form {"error": <message>, "code": <code>, ...details}, so clients can branch
on "code" (and on "gate"/"reason" for entitlement denials) without matching
on the human-readable message.
"""
from typing import Any, Dict, Optional

from app.core.messages import message


class AppError(Exception):
    """Base class for errors that map to an HTTP status."""

    status_code: int = 500
    code: str = "internal_error"
    message_key: str = "internal_error"

    def __init__(
        self,
        message_text: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message_text or message(self.message_key)
        super().__init__(self.message)
        if code:
            self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        body = {"error": self.message, "code": self.code}
        body.update(self.details)
        return body


class UnauthenticatedError(AppError):
    """No credential, or no credential that resolves to an existing user."""

    status_code = 401
    code = "unauthenticated"
    message_key = "unauthenticated"


class ForbiddenError(AppError):
    """Valid credential, but the role or entitlement does not allow the action."""

    status_code = 403
    code = "forbidden"
    message_key = "forbidden"


class DriverGateError(ForbiddenError):
    """Driver accounts never see the driver directory."""

    code = "driver"
    message_key = "driver_gate"

    def __init__(self):
        super().__init__(details={"gate": "driver"})


class SubscriptionRequiredError(ForbiddenError):
    """Owner has no active subscription."""

    code = "no_subscription"
    message_key = "no_subscription"

    def __init__(self, message_key: str = "no_subscription"):
        super().__init__(
            message(message_key),
            details={"gate": "no_subscription", "reason": "no_subscription"},
        )


class QuotaExceededError(ForbiddenError):
    """Owner reached the job limit of the active subscription."""

    code = "quota_exceeded"

    def __init__(self, limit: int, used: int, plan: Optional[str] = None):
        super().__init__(
            message("quota_exceeded", limit=limit),
            details={
                "reason": "quota_exceeded",
                "plan": plan,
                "limit": limit,
                "used": used,
                "remaining": 0,
            },
        )


class NotFoundError(AppError):
    """Referenced entity does not exist."""

    status_code = 404
    code = "not_found"
    message_key = "user_not_found"

    def __init__(self, message_key: Optional[str] = None):
        super().__init__(message(message_key or self.message_key))


class ConflictError(AppError):
    """Unique field already taken, or a concurrent write won."""

    status_code = 409
    code = "conflict"
    message_key = "email_taken"


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = 400
    code = "validation_error"
    message_key = "validation_error"


class InvalidTransitionError(ValidationError):
    """Requested subscription status change is not allowed by the state machine."""

    code = "invalid_transition"

    def __init__(self, current: str, target: str):
        super().__init__(
            message("invalid_transition", current=current, target=target),
            details={"current": current, "target": target},
        )


class InternalError(AppError):
    """Unexpected failure. The caller only ever sees the generic message."""

    status_code = 500
    code = "internal_error"
    message_key = "internal_error"
