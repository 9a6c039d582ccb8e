"""
api/request.py -- Body reading for routes that validate inside their flow.

Routes read the body themselves (instead of declaring a pydantic body
parameter) so that FastAPI runs the auth gate before the body is even parsed:
an unauthenticated request is a 401 whatever its body looks like.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import Request


async def read_json_object(request: Request) -> dict[str, Any]:
    """Return the JSON body as a dict.

    An empty body, malformed JSON, or a JSON value that is not an object all
    come back as {} so form validation reports every required field.
    """
    raw = await request.body()
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}
