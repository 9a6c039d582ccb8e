"""
core/errors.py -- Error taxonomy shared by every layer.

Two families:

  AppError and its subclasses are client-visible. Each carries the HTTP status,
  a machine-readable code, and a fixed message. api/main.py renders them into
  the standard error envelope. Their messages are safe to show to anyone.

  StoreError, HashingError, and TokenError are internal. They may carry library
  or database text and must never reach a response body. Flows translate them
  at their boundary (see auth/registration.py and posts/service.py).

Layer rule: no imports outside the standard library.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Client-visible errors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldViolation:
    """One failed validation rule for one request field."""

    field: str
    message: str


class AppError(Exception):
    """Base class for errors rendered directly into an HTTP response."""

    status_code: int = 500
    code: str = "internal_error"
    message: str = "Server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    """Request body failed one or more field rules.

    violations is exhaustive and ordered by field declaration -- every violated
    rule is reported, never just the first one.
    """

    code = "validation_error"
    message = "Request validation failed."

    def __init__(self, violations: list[FieldViolation], status_code: int = 422) -> None:
        super().__init__()
        self.violations = list(violations)
        self.status_code = status_code


class ConflictError(AppError):
    """A record with the same unique key already exists.

    The message is deliberately generic: it does not say which field clashed.
    """

    status_code = 400
    code = "conflict"
    message = "User already exists"


class AuthError(AppError):
    """The request is not authenticated.

    reason is for server-side logs only ("missing", "invalid", "expired",
    "unknown_subject"). The client always sees the same message.
    """

    status_code = 401
    code = "unauthorized"
    message = "Authentication required."

    def __init__(self, reason: str = "invalid") -> None:
        super().__init__()
        self.reason = reason


class ServerError(AppError):
    """Unexpected failure. The cause is chained and logged, never rendered."""

    status_code = 500
    code = "internal_error"
    message = "Server error"


# ---------------------------------------------------------------------------
# Internal errors
# ---------------------------------------------------------------------------


class StoreError(Exception):
    """Persistence-layer failure (connection loss, constraint violation, ...)."""


class DuplicateRecordError(StoreError):
    """Insert rejected by a UNIQUE constraint."""


class HashingError(Exception):
    """The password hashing library failed."""


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenInvalid(TokenError):
    """Bad signature, malformed token, or missing subject claim."""


class TokenExpired(TokenError):
    """Signature is valid but the token is past its expiry."""
