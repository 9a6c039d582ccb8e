"""
API response models for Postboard REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
posts/models.py, which own the internal domain representation. Route handlers
map between the two.

Request bodies are not declared here: they are validated inside the flows
(auth/registration.py, posts/service.py) so that the auth gate always runs
before any body parsing.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from core.errors import FieldViolation
from posts.models import Post

# ---------------------------------------------------------------------------
# Success responses
# ---------------------------------------------------------------------------


class TokenResponse(BaseModel):
    """Response for POST /api/users. The token is the only thing returned."""

    model_config = ConfigDict(frozen=True)

    token: str


class PostResponse(BaseModel):
    """Response for POST /api/posts."""

    model_config = ConfigDict(frozen=True)

    id: int
    user: int
    title: str
    body: str
    created_at: str

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        """Build a PostResponse from a stored Post (Factory Method)."""
        return cls(
            id=post.id,
            user=post.user_id,
            title=post.title,
            body=post.body,
            created_at=post.created_at or "",
        )


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


class FieldError(BaseModel):
    """One violated validation rule."""

    model_config = ConfigDict(frozen=True)

    field: str
    message: str

    @classmethod
    def from_violation(cls, violation: FieldViolation) -> "FieldError":
        return cls(field=violation.field, message=violation.message)


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    errors: Optional[list[FieldError]] = Field(default=None)


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail
