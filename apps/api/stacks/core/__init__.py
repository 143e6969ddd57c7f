"""Core configuration, auth, and shared infrastructure."""

from stacks.core.config import Settings, get_settings
from stacks.core.constants import (
    MIN_YEAR,
    MAX_YEAR,
    ALLOWED_RESUME_TYPES,
    SUPPORTED_IMPORT_PROVIDERS,
)
from stacks.core.auth import create_access_token, decode_access_token
from stacks.core.limiter import limiter

__all__ = [
    "Settings",
    "get_settings",
    "MIN_YEAR",
    "MAX_YEAR",
    "ALLOWED_RESUME_TYPES",
    "SUPPORTED_IMPORT_PROVIDERS",
    "create_access_token",
    "decode_access_token",
    "limiter",
]
