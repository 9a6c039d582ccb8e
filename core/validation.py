"""
core/validation.py -- Turn pydantic validation failures into FieldViolations.

Request forms (auth/registration.py, posts/service.py) are pydantic models
whose rules raise PydanticCustomError with the exact client-facing message.
Errors pydantic raises on its own (missing field, wrong type, bad email) fall
back to the per-field message in the form's FIELD_MESSAGES, so every field has
exactly one message no matter which rule tripped.

pydantic validates fields in declaration order and keeps going after the first
failure, which gives the exhaustive, ordered list the API promises.

Layer rule: core/ is the kernel. No imports from api/, auth/, or posts/.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from core.errors import FieldViolation, ValidationError

# Error type used by form validators. Its message is shown to the client as-is.
RULE_ERROR = "field_rule"

F = TypeVar("F", bound="Form")


def rule_error(message: str) -> PydanticCustomError:
    """Build the error a form validator raises for a failed rule."""
    return PydanticCustomError(RULE_ERROR, message)


class Form(BaseModel):
    """Base class for request bodies validated inside a flow.

    Subclasses set FIELD_MESSAGES: the message reported when pydantic itself
    rejects a field (missing, wrong type, ...). Unknown keys in the payload are
    dropped, so clients cannot smuggle extra attributes through a form.
    """

    model_config = ConfigDict(extra="ignore")

    FIELD_MESSAGES: ClassVar[dict[str, str]] = {}

    @classmethod
    def parse(cls: type[F], payload: Mapping[str, Any], status_code: int = 422) -> F:
        """Validate payload; raise core ValidationError listing every violation."""
        try:
            return cls.model_validate(dict(payload))
        except PydanticValidationError as exc:
            raise ValidationError(cls.violations(exc), status_code=status_code) from exc

    @classmethod
    def violations(cls, exc: PydanticValidationError) -> list[FieldViolation]:
        """Map pydantic errors to one FieldViolation per failing field, in order."""
        seen: set[str] = set()
        result: list[FieldViolation] = []
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else ""
            if field in seen:
                continue
            seen.add(field)
            if error["type"] == RULE_ERROR:
                message = error["msg"]
            else:
                message = cls.FIELD_MESSAGES.get(field, error["msg"])
            result.append(FieldViolation(field=field, message=message))
        return result
