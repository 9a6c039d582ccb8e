"""
api/routes/posts.py -- Post creation endpoint.

Routes:
  POST /api/posts  -- create a post as the token's subject (requires x-auth-token)

The author is taken from the auth gate, never from the body.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from api.models import PostResponse
from api.request import read_json_object
from auth.dependencies import require_subject
from posts.service import create_post

# Auth policy:
# - POST /api/posts: requires a valid x-auth-token (require_subject)
router = APIRouter()


@router.post("/posts", response_model=PostResponse)
async def create(request: Request, subject_id: Any = Depends(require_subject)) -> PostResponse:
    """Create a post authored by the authenticated user.

    Body: {"title": str, "body": str}

    401 without a valid token (checked before the body is read), 400 with
    every violated field, 500 otherwise.
    """
    payload = await read_json_object(request)
    state = request.app.state
    post = await run_in_threadpool(create_post, subject_id, payload, state.user_store, state.post_store)
    return PostResponse.from_post(post)
