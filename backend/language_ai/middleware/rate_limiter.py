"""Per-client rate limiting using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from language_ai.config import settings

# No accounts exist, so clients are keyed by remote address only.
limiter = Limiter(key_func=get_remote_address)

# Limit string built from config
LLM_LIMIT = f"{settings.rate_limit_llm}/minute"
