from fastapi import APIRouter, Depends, HTTPException, Request, UploadFile, status

from stacks.core import get_settings, limiter
from stacks.dependencies import get_current_user_id, get_profile_store, get_reconciler
from stacks.schemas import ClearResumeDataResponse, ResumeStatusResponse, RunSummaryResponse
from stacks.services.reconcile import DocumentInput, Reconciler, SourceError, SqlProfileStore
from .imports import summary_response

router = APIRouter(prefix="/resume", tags=["resume"])


@router.post("/import", response_model=RunSummaryResponse)
@limiter.limit(get_settings().import_rate_limit)
async def import_resume(
    request: Request,
    file: UploadFile,
    user_id: str = Depends(get_current_user_id),
    reconciler: Reconciler = Depends(get_reconciler),
):
    document = DocumentInput(
        content=await file.read(reconciler.document.max_bytes + 1),
        filename=file.filename or "resume.pdf",
        content_type=file.content_type or "",
    )
    try:
        reconciler.document.validate(document)
    except SourceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.detail)
    summary = await reconciler.import_document(user_id, document)
    return summary_response(summary)


@router.get("/status", response_model=ResumeStatusResponse)
async def resume_status(
    user_id: str = Depends(get_current_user_id),
    store: SqlProfileStore = Depends(get_profile_store),
):
    counts = await store.resume_status(user_id)
    return ResumeStatusResponse(
        hasResumeData=counts["experience"] > 0 or counts["education"] > 0,
        experienceCount=counts["experience"],
        educationCount=counts["education"],
    )


@router.delete("/data", response_model=ClearResumeDataResponse)
async def clear_resume_data(
    user_id: str = Depends(get_current_user_id),
    store: SqlProfileStore = Depends(get_profile_store),
):
    """Remove imported experience and education so a new resume import can fill them."""
    deleted = await store.clear_resume_data(user_id)
    return ClearResumeDataResponse(
        deletedExperience=deleted["experience"],
        deletedEducation=deleted["education"],
    )
