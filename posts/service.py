"""
posts/service.py -- The post creation flow.

Runs after the auth gate has produced a subject id:

  1. Validate   PostForm.parse()               -> 400 with every violation
  2. Author     UserStore.get_by_id(subject)   -> 401 if the subject is gone
  3. Persist    PostStore.insert()             -- user_id is the resolved author
  4. Respond    the stored Post

The author always comes from the token. PostForm ignores unknown keys, so a
client-supplied "user" or "user_id" never reaches the store.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import ValidationInfo, field_validator

from auth.store import UserStore
from core.errors import AppError, AuthError, ServerError
from core.validation import Form, rule_error
from posts.models import Post
from posts.store import PostStore

logger = logging.getLogger("postboard.posts")


class PostForm(Form):
    """Body of POST /api/posts."""

    FIELD_MESSAGES: ClassVar[dict[str, str]] = {
        "title": "Title text is required",
        "body": "Body text is required",
    }

    title: str
    body: str

    @field_validator("title", "body")
    @classmethod
    def not_blank(cls, value: str, info: ValidationInfo) -> str:
        if not value.strip():
            raise rule_error(cls.FIELD_MESSAGES[info.field_name])
        return value


def create_post(
    subject_id: Any,
    payload: Mapping[str, Any],
    user_store: UserStore,
    post_store: PostStore,
) -> Post:
    """Validate payload and store it as a post by subject_id.

    Raises:
        ValidationError: title and/or body missing or blank (400).
        AuthError:       the token's subject no longer exists (401).
        ServerError:     anything unexpected (500); the cause is logged.
    """
    form = PostForm.parse(payload, status_code=400)

    try:
        author = user_store.get_by_id(subject_id)
        if author is None:
            raise AuthError(reason="unknown_subject")
        post = post_store.insert(Post(user_id=author.id, title=form.title, body=form.body))
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Post creation failed for user id=%s", subject_id)
        raise ServerError() from exc

    logger.info("User id=%s created post id=%s", author.id, post.id)
    return post
