from fastapi import APIRouter, Depends, HTTPException, Request, status

from stacks.core import SUPPORTED_IMPORT_PROVIDERS, get_settings, limiter
from stacks.dependencies import get_current_user_id, get_profile_store, get_reconciler
from stacks.domain import RunSummary
from stacks.schemas import ImportProfileRequest, ImportSourcesResponse, RunSummaryResponse
from stacks.services.reconcile import Reconciler, SqlProfileStore
from stacks.services.reconcile.orchestrator import PROFILE_NOT_FOUND, PROFILE_UNAVAILABLE

router = APIRouter(prefix="/import-profile", tags=["import"])


def summary_response(summary: RunSummary) -> dict:
    """Run output payload; a user without a profile is a 404 and an unreadable store a 503."""
    if summary.error == PROFILE_NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    if summary.error == PROFILE_UNAVAILABLE:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Profile store unavailable")
    return summary.to_payload()


@router.post("", response_model=RunSummaryResponse)
@limiter.limit(get_settings().import_rate_limit)
async def import_profile(
    request: Request,
    body: ImportProfileRequest,
    user_id: str = Depends(get_current_user_id),
    reconciler: Reconciler = Depends(get_reconciler),
):
    """Import from the user's linked GitHub and/or LinkedIn accounts."""
    if not body.providers:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="At least one provider is required")
    invalid = [p for p in body.providers if p.strip().lower() not in SUPPORTED_IMPORT_PROVIDERS]
    if invalid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid provider: {', '.join(invalid)}")
    summary = await reconciler.import_accounts(user_id, body.providers)
    return summary_response(summary)


@router.get("/sources", response_model=ImportSourcesResponse)
async def import_sources(
    user_id: str = Depends(get_current_user_id),
    store: SqlProfileStore = Depends(get_profile_store),
):
    """Which import providers have a usable access token."""
    tokens = await store.get_access_tokens(user_id, list(SUPPORTED_IMPORT_PROVIDERS))
    return {provider: bool(token) for provider, token in tokens.items()}
