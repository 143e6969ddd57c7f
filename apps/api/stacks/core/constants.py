"""Shared API constants."""

# Accepted year range for any normalized date
MIN_YEAR = 1900
MAX_YEAR = 2100

# Resume uploads
ALLOWED_RESUME_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)

# Account providers that can be imported from
SUPPORTED_IMPORT_PROVIDERS = ("github", "linkedin")

# Default employment type for imported experience rows
DEFAULT_EMPLOYMENT_TYPE = "Full-time"

PROJECT_STATUSES = ("completed", "wip", "archived")
