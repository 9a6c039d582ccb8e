"""
auth/models.py -- Domain dataclass for user accounts.

Pattern: Data class (pure data container, zero logic). Mirrors posts/models.py
-- dataclasses own domain shape; stores and flows do the work.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    hashed_password is the bcrypt output (salt embedded). The plaintext is
    never stored and never leaves the registration flow.

    id and created_at are None until UserStore.insert() assigns them.
    """

    name: str
    email: str
    hashed_password: str
    id: int | None = None
    created_at: str | None = None
