# athlete_intake/core/rate_limit.py
from slowapi import Limiter
from slowapi.util import get_remote_address

from athlete_intake.core.settings import settings

# One shared Limiter for the whole app; the form is public so we key on IP
limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.RATE_LIMIT_ENABLED,
)
