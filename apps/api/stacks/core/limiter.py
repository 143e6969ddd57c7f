from slowapi import Limiter
from slowapi.util import get_remote_address

from stacks.core.auth import decode_access_token


def get_import_rate_limit_key(request):
    """Imports are throttled per user when a valid bearer token is present, else per client IP."""
    header = request.headers.get("Authorization") or ""
    token = header[7:].strip() if header.startswith("Bearer ") else ""
    user_id = decode_access_token(token) if token else None
    if user_id:
        return f"user:{user_id}"
    return get_remote_address(request)


limiter = Limiter(key_func=get_import_rate_limit_key)
