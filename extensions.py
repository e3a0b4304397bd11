# FILE: ecopilot-backend/extensions.py

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Per-endpoint limits for the admin triggers. Writes and pushes are the expensive ones.
GENERATE_LIMIT = "30 per hour"
STREAK_CHECK_LIMIT = "60 per hour"
BROADCAST_LIMIT = "10 per hour"

# Keyed by caller IP. The storage URI comes from Settings.ratelimit_storage_uri in main.py.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["500 per day", "100 per hour"],
    headers_enabled=True,
)
