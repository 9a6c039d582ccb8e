"""
auth/registration.py -- The registration flow: validate, dedupe, hash, persist, sign.

Sequence (straight-line, each step only runs if the previous one succeeded):

  1. Validate     RegistrationForm.parse()            -> 422 with every violation
  2. Unique       UserStore.find_by_email()           -> 400 "User already exists"
  3. Hash         PasswordHasher.hash()
  4. Persist      UserStore.insert()                  -> 400 on a lost unique race
  5. Sign         TokenIssuer.issue(user.id)          -- only after the insert commits
  6. Respond      {"token": ...}

Any other failure in steps 2-5 is logged with its traceback and surfaces to the
client as a bare 500 "Server error". The response never carries the password,
its hash, or store details.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import EmailStr, field_validator

from auth.models import User
from auth.passwords import PasswordHasher
from auth.store import UserStore
from auth.tokens import TokenIssuer
from core.errors import AppError, ConflictError, DuplicateRecordError, ServerError
from core.validation import Form, rule_error

logger = logging.getLogger("postboard.auth")

MIN_PASSWORD_LENGTH = 6


class RegistrationForm(Form):
    """Body of POST /api/users."""

    FIELD_MESSAGES: ClassVar[dict[str, str]] = {
        "name": "Please enter your name",
        "email": "Please enter a valid email",
        "password": "Please enter a password with 6 or more characters",
    }

    name: str
    email: EmailStr
    password: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise rule_error(cls.FIELD_MESSAGES["name"])
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        # Case-insensitive uniqueness: the store only ever sees lowercase.
        return value.strip().lower()

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise rule_error(cls.FIELD_MESSAGES["password"])
        return value


def register_user(
    payload: Mapping[str, Any],
    user_store: UserStore,
    hasher: PasswordHasher,
    tokens: TokenIssuer,
) -> str:
    """Run the registration flow and return the new user's token.

    Raises:
        ValidationError: one or more fields failed validation (422).
        ConflictError:   the email is already registered (400).
        ServerError:     anything unexpected (500); the cause is logged.
    """
    form = RegistrationForm.parse(payload, status_code=422)

    try:
        if user_store.find_by_email(form.email) is not None:
            raise ConflictError()

        hashed = hasher.hash(form.password)

        try:
            user = user_store.insert(User(name=form.name, email=form.email, hashed_password=hashed))
        except DuplicateRecordError as exc:
            # Lost the check-then-insert race to a concurrent registration.
            raise ConflictError() from exc

        token = tokens.issue(user.id)
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Registration failed")
        raise ServerError() from exc

    logger.info("Registered user id=%s", user.id)
    return token
