"""
Rate limiting shared by the application and its routers.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from mosaic_api.config import settings


limiter = Limiter(key_func=get_remote_address)

# Applied per route; slowapi needs the route to accept a `request` argument
RATE_LIMIT = f"{settings.rate_limit_requests}/minute"
