"""
api/routes/users.py -- User registration endpoint.

Routes:
  POST /api/users  -- register; returns {"token": ...}

Security:
  Rate-limited per client IP (Settings.register_rate_limit) because every call
  runs bcrypt.
  The response carries the token only. No id, no email echo, no hash.
  Cache-Control: no-store, since the body is a credential.

No `from __future__ import annotations` here: slowapi wraps the handler, and
FastAPI resolves string annotations against the wrapper's module globals.
"""

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from api.limiter import REGISTER_LIMIT, limiter
from api.models import TokenResponse
from api.request import read_json_object
from auth.registration import register_user

# Auth policy:
# - POST /api/users: public -- this is how clients obtain their first token
router = APIRouter()


# @limiter.limit must sit BELOW @router.post: the router has to register the
# wrapped function, otherwise SlowAPIMiddleware skips the route and the
# decorator never runs.
@router.post("/users", response_model=TokenResponse)
@limiter.limit(REGISTER_LIMIT)
async def register(request: Request) -> JSONResponse:
    """Register a new user and return a signed token for it.

    Body: {"name": str, "email": str, "password": str}

    422 with every violated field, 400 if the email is taken, 500 otherwise.
    The blocking part (bcrypt + SQL) runs in the threadpool.
    """
    payload = await read_json_object(request)
    state = request.app.state
    token = await run_in_threadpool(register_user, payload, state.user_store, state.hasher, state.tokens)
    resp = JSONResponse(content=TokenResponse(token=token).model_dump())
    resp.headers["Cache-Control"] = "no-store"
    return resp
