"""
posts/store.py -- SQLAlchemy Core persistence layer for posts.

Pattern: Repository + Data Mapper (same as auth/store.py).

posts.user_id is a foreign key into users.id, so the posts table is declared
against the shared core.db metadata next to the users table. On SQLite the
constraint is only enforced because core.db switches on PRAGMA foreign_keys.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, ForeignKey, Integer, String, Table, Text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from auth.store import users_table
from core.db import metadata
from core.errors import StoreError
from posts.models import Post

posts_table = Table(
    "posts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey(users_table.c.id), nullable=False, index=True),
    Column("title", String(255), nullable=False),
    Column("body", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
)


class PostStore:
    """Repository for Post entities.

    Shares its Engine with UserStore; the users table must exist before posts
    can be created, so __init__ creates both if missing.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        metadata.create_all(self.engine, tables=[users_table, posts_table])

    def insert(self, post: Post) -> Post:
        """Insert a post and return it with id and created_at filled in.

        Raises StoreError on any database failure, including a user_id that
        does not reference an existing user.
        """
        created_at = datetime.now(timezone.utc).isoformat()
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    posts_table.insert().values(
                        user_id=post.user_id,
                        title=post.title,
                        body=post.body,
                        created_at=created_at,
                    )
                )
                conn.commit()
        except SQLAlchemyError as exc:
            raise StoreError("post insert failed") from exc
        return Post(
            id=result.inserted_primary_key[0],
            user_id=post.user_id,
            title=post.title,
            body=post.body,
            created_at=created_at,
        )

    def get_by_id(self, post_id: int) -> Post | None:
        """Look up a post by primary key. Returns None if not found."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(posts_table.select().where(posts_table.c.id == post_id)).fetchone()
        except SQLAlchemyError as exc:
            raise StoreError("post lookup failed") from exc
        return _row_to_post(row) if row is not None else None


def _row_to_post(row) -> Post:
    return Post(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        body=row.body,
        created_at=row.created_at,
    )
