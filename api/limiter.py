"""
api/limiter.py -- Shared slowapi rate limiter instance.

Import this in api/main.py (to mount as middleware) and in route modules
that apply stricter per-route limits with @limiter.limit().

default_limits is the process-wide cap applied by SlowAPIMiddleware to every
route without its own limit. It is a callable so Settings is read on first
request rather than at import time.

Using a single shared instance ensures all routes share the same in-memory
counter store. If this were instantiated in each module separately, each
module would get its own isolated counter and rate limits would never trigger.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import get_settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[lambda: get_settings().rate_limit],
    storage_uri="memory://",
)
