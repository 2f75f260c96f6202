"""Rate limiting for the leave API (slowapi).

Provides a module-level Limiter keyed on client IP. Mutating endpoints
opt in with ``@limiter.limit(WRITE_LIMIT)``; the rate comes from
``settings.RATE_LIMIT_WRITES``.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from hr_dashboard.config import settings

WRITE_LIMIT = settings.RATE_LIMIT_WRITES

limiter = Limiter(key_func=get_remote_address)
