from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from stacks.core import decode_access_token
from stacks.db.session import async_session
from stacks.services.reconcile import Reconciler, SqlProfileStore

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """User id from the bearer token. Sessions and sign-in live outside this service."""
    if not credentials:
        raise _unauthorized("Not authenticated")
    user_id = decode_access_token(credentials.credentials)
    if not user_id:
        raise _unauthorized("Invalid or expired token")
    return user_id


def get_profile_store() -> SqlProfileStore:
    """Store sessions are opened per write category, not per request."""
    return SqlProfileStore(async_session)


def get_reconciler(
    store: Annotated[SqlProfileStore, Depends(get_profile_store)],
) -> Reconciler:
    return Reconciler(store)
