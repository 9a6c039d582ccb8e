"""
auth/dependencies.py -- The auth gate and its FastAPI Depends() helper.

AuthGate.authenticate() is the pure part: given the raw header value it
returns an AuthResult that either names the subject or says why the request
was rejected. It never raises and never touches the request object.

require_subject() is the FastAPI adapter: it reads the x-auth-token header,
runs the gate, logs the rejection reason, and raises AuthError (401) on any
rejection. Missing, invalid, and expired tokens all produce the same 401 body;
the reason only appears in the server log.

Layer rule: no imports from api/ or posts/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Request

from auth.tokens import TokenIssuer
from core.errors import AuthError, TokenExpired, TokenInvalid

logger = logging.getLogger("postboard.auth")

AUTH_HEADER = "x-auth-token"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of one gate check: subject_id on success, reason on rejection."""

    subject_id: Any = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None


class AuthGate:
    """Stateless token check. One instance serves every request."""

    def __init__(self, tokens: TokenIssuer) -> None:
        self.tokens = tokens

    def authenticate(self, token: str | None) -> AuthResult:
        if not token:
            return AuthResult(reason="missing")
        try:
            return AuthResult(subject_id=self.tokens.verify(token))
        except TokenExpired:
            return AuthResult(reason="expired")
        except TokenInvalid:
            return AuthResult(reason="invalid")


def require_subject(request: Request) -> Any:
    """Require a valid x-auth-token header. Returns the authenticated subject id.

    Use as a FastAPI dependency:
        @router.post("/posts")
        async def route(subject_id: int = Depends(require_subject)): ...
    """
    gate: AuthGate = request.app.state.auth_gate
    result = gate.authenticate(request.headers.get(AUTH_HEADER))
    if not result.ok:
        logger.info("Rejected %s %s: %s token", request.method, request.url.path, result.reason)
        raise AuthError(reason=result.reason or "invalid")
    return result.subject_id
