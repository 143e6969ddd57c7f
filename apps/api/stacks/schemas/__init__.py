"""Pydantic request/response schemas."""

from stacks.schemas.imports import (
    ImportProfileRequest,
    ImportSourcesResponse,
    RunStatsResponse,
    RunSummaryResponse,
)
from stacks.schemas.resume import ResumeStatusResponse, ClearResumeDataResponse
from stacks.schemas.vapi import (
    END_OF_CALL_REPORT,
    VapiCall,
    VapiMessage,
    VapiWebhookRequest,
    WebhookAckResponse,
)

__all__ = [
    "ImportProfileRequest",
    "ImportSourcesResponse",
    "RunStatsResponse",
    "RunSummaryResponse",
    "ResumeStatusResponse",
    "ClearResumeDataResponse",
    "END_OF_CALL_REPORT",
    "VapiCall",
    "VapiMessage",
    "VapiWebhookRequest",
    "WebhookAckResponse",
]
