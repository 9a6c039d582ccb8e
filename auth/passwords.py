"""
auth/passwords.py -- bcrypt password hashing.

Security design decisions:
  bcrypt directly, no passlib wrapper. passlib's internal wrap-bug detection
  hashes a password longer than 72 bytes, which bcrypt 4.x+ rejects with an
  explicit error. Direct bcrypt usage has no compatibility shim.

  Salt: bcrypt.gensalt() is called on every hash, and the salt is embedded in
  the output string. Verification needs nothing but the stored hash, and the
  same password hashed twice gives two different records.

  Cost: the work factor is a constructor argument (Settings.bcrypt_rounds,
  default 10) so it can be raised as hardware gets faster without a code change.

  Length: bcrypt only reads the first 72 bytes of its input. Every password is
  first reduced to base64(SHA-256(password)), 44 ASCII bytes, the same way
  passlib's bcrypt_sha256 does. Passwords of any length hash and verify, and
  two long passwords sharing a 72-byte prefix still differ.

  Comparison: bcrypt.checkpw does the constant-time comparison. Never compare
  hash strings with == here.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

import base64
import hashlib
import logging

import bcrypt

from core.errors import HashingError

logger = logging.getLogger("postboard.auth")


def _prehash(plain: str) -> bytes:
    return base64.b64encode(hashlib.sha256(plain.encode("utf-8")).digest())


class PasswordHasher:
    """One-way password hashing with a tunable bcrypt work factor.

    Usage:
        hasher = PasswordHasher(rounds=10)
        stored = hasher.hash("s3cret!")
        hasher.verify("s3cret!", stored)  # True
    """

    def __init__(self, rounds: int = 10) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError(f"bcrypt rounds must be between 4 and 31, got {rounds}")
        self.rounds = rounds

    def hash(self, plain: str) -> str:
        """Return a salted bcrypt hash of plain.

        Raises HashingError if bcrypt fails.
        """
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(_prehash(plain), salt).decode("utf-8")
        except (ValueError, TypeError) as exc:
            raise HashingError("bcrypt could not hash the password") from exc

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True if plain matches the stored bcrypt hash.

        A malformed stored hash is a mismatch, not an error.
        """
        try:
            return bcrypt.checkpw(_prehash(plain), hashed.encode("utf-8"))
        except (ValueError, TypeError):
            logger.warning("Password verification against a malformed hash")
            return False
