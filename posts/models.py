"""
posts/models.py -- Domain dataclass for posts.

Pattern: Data class (pure data container, zero logic). Mirrors auth/models.py.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Post:
    """A post written by a registered user.

    user_id is always the authenticated author's id, resolved server-side.
    id and created_at are None until PostStore.insert() assigns them.
    """

    user_id: int
    title: str
    body: str
    id: int | None = None
    created_at: str | None = None
