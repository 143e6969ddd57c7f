from .imports import router as imports_router
from .resume import router as resume_router
from .vapi import router as vapi_router

ROUTERS = (imports_router, resume_router, vapi_router)

__all__ = [
    "ROUTERS",
    "imports_router",
    "resume_router",
    "vapi_router",
]
