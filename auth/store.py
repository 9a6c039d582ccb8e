"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper (same as posts/store.py).
UserStore is the repository; _row_to_user is the mapper. Flow and route code
never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  UNIQUE(email) is enforced by the schema. The registration flow checks for an
  existing email first, but check-then-insert is not atomic: two concurrent
  registrations can both pass the check. The unique index catches the second
  insert and insert() raises DuplicateRecordError, which the flow maps to the
  same "User already exists" response.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Table, Text, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.models import User
from core.db import metadata
from core.errors import DuplicateRecordError, StoreError

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

users_table = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("email", String(320), nullable=False, unique=True),
    Column("hashed_password", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore(create_db_engine("sqlite:///postboard.db"))
        user = store.insert(User(name="Ada", email="ada@example.com", hashed_password=h))
        store.find_by_email("ada@example.com")
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        metadata.create_all(self.engine, tables=[users_table])

    def find_by_email(self, email: str) -> User | None:
        """Look up a user by exact email. Returns None if not found.

        Raises StoreError if the database is unreachable.
        """
        try:
            with self.engine.connect() as conn:
                row = conn.execute(users_table.select().where(users_table.c.email == email)).fetchone()
        except SQLAlchemyError as exc:
            raise StoreError("user lookup by email failed") from exc
        return _row_to_user(row) if row is not None else None

    def get_by_id(self, user_id: int) -> User | None:
        """Look up a user by primary key. Returns None if not found."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(users_table.select().where(users_table.c.id == user_id)).fetchone()
        except SQLAlchemyError as exc:
            raise StoreError("user lookup by id failed") from exc
        return _row_to_user(row) if row is not None else None

    def insert(self, user: User) -> User:
        """Insert a new user and return it with id and created_at filled in.

        Raises:
            DuplicateRecordError: the email is already registered.
            StoreError: any other database failure.
        """
        created_at = _now_iso()
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    users_table.insert().values(
                        name=user.name,
                        email=user.email,
                        hashed_password=user.hashed_password,
                        created_at=created_at,
                    )
                )
                conn.commit()
        except IntegrityError as exc:
            raise DuplicateRecordError("email already registered") from exc
        except SQLAlchemyError as exc:
            raise StoreError("user insert failed") from exc
        return User(
            id=result.inserted_primary_key[0],
            name=user.name,
            email=user.email,
            hashed_password=user.hashed_password,
            created_at=created_at,
        )

    def count_by_email(self, email: str) -> int:
        """Return how many records hold email. Always 0 or 1 given UNIQUE(email)."""
        try:
            with self.engine.connect() as conn:
                return conn.execute(
                    select(func.count()).select_from(users_table).where(users_table.c.email == email)
                ).scalar_one()
        except SQLAlchemyError as exc:
            raise StoreError("user count by email failed") from exc


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        hashed_password=row.hashed_password,
        created_at=row.created_at,
    )
