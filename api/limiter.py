"""
api/limiter.py -- Shared slowapi rate limiter for Postboard.

api/main.py mounts it as middleware; api/routes/users.py applies
@limiter.limit(REGISTER_LIMIT) to the registration endpoint, which is the only
unauthenticated write and the cheapest way to hammer bcrypt.

One shared instance means one in-memory counter store. Per-module instances
would each count separately and the limit would never trigger.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import get_settings

limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")

# Read once at import, like the rest of the HTTP configuration in api/main.py.
REGISTER_LIMIT: str = get_settings().register_rate_limit
