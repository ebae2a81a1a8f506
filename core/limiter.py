# Shared slowapi instance. Lives in its own module so routers and main.py
# can both import it without a cycle.
from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import settings

# Key function: rate-limit by client IP.
limiter = Limiter(key_func=get_remote_address)

# One window per client IP shared by every endpoint that carries it.
api_limit = limiter.shared_limit(settings.RATE_LIMIT, scope="api")
