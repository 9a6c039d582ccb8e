"""
auth/tokens.py -- JWT issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Payload is {"user": {"id": <subject>}} plus
       iat and exp. The subject id is the only identity claim -- anything else
       the route needs is looked up from the store.

  Key handling: the signing key is passed to TokenIssuer at construction
       (from Settings.secret_key, in the API lifespan). Nothing in this module
       reads configuration or keeps module-level key state, so tests can build
       issuers with their own keys.

  Expiry: absolute from issuance, default 10 hours. There is no refresh and
       no revocation list; the server keeps no token state at all.

  Errors: verify() raises TokenExpired or TokenInvalid. The distinction is for
       logs only -- the auth gate maps both to the same 401.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from core.errors import TokenExpired, TokenInvalid

_ALGORITHM = "HS256"

DEFAULT_TTL_SECONDS = 10 * 60 * 60


class TokenIssuer:
    """Mint and verify signed, time-limited subject tokens.

    Usage:
        tokens = TokenIssuer(settings.secret_key, ttl_seconds=36000)
        token = tokens.issue(user.id)
        tokens.verify(token)  # -> user.id
    """

    def __init__(
        self,
        secret_key: str,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        algorithm: str = _ALGORITHM,
    ) -> None:
        if not secret_key:
            raise ValueError("TokenIssuer requires a non-empty secret key")
        self._secret_key = secret_key
        self.ttl = timedelta(seconds=ttl_seconds)
        self.algorithm = algorithm

    def __repr__(self) -> str:
        # Keep the key out of tracebacks and debug logs.
        return f"TokenIssuer(ttl={self.ttl}, algorithm={self.algorithm!r})"

    def issue(
        self,
        subject_id: Any,
        ttl: int | timedelta | None = None,
        now: datetime | None = None,
    ) -> str:
        """Encode a signed token for subject_id.

        Args:
            subject_id: Identifier of the authenticated user.
            ttl:        Lifetime as seconds or timedelta. Defaults to the
                        issuer's configured TTL.
            now:        Issuance time. Defaults to the current UTC time; tests
                        pass an earlier instant to produce expired tokens.
        """
        if ttl is None:
            lifetime = self.ttl
        elif isinstance(ttl, timedelta):
            lifetime = ttl
        else:
            lifetime = timedelta(seconds=ttl)
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "user": {"id": subject_id},
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + lifetime).timestamp()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Any:
        """Check signature and expiry; return the subject id.

        Raises:
            TokenExpired: signature is valid but exp is in the past.
            TokenInvalid: bad signature, malformed token, or no user.id claim.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            raise TokenExpired("token has expired") from exc
        except JWTError as exc:
            raise TokenInvalid("token failed verification") from exc

        user = payload.get("user")
        if not isinstance(user, dict) or user.get("id") is None:
            raise TokenInvalid("token has no subject")
        return user["id"]
