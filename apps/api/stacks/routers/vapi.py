import logging

from fastapi import APIRouter, Depends, HTTPException, status

from stacks.dependencies import get_reconciler
from stacks.schemas import END_OF_CALL_REPORT, VapiWebhookRequest, WebhookAckResponse
from stacks.services.reconcile import Reconciler
from .imports import summary_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vapi", tags=["vapi"])


@router.post("/webhook")
async def vapi_webhook(
    body: VapiWebhookRequest,
    reconciler: Reconciler = Depends(get_reconciler),
):
    """Vapi server messages. Only end-of-call reports are reconciled; others are acknowledged."""
    message = body.message
    if message.type != END_OF_CALL_REPORT:
        logger.info("vapi webhook ignoring message type=%s", message.type)
        return WebhookAckResponse()
    call_id = message.call.id if message.call else None
    if not call_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing call id")
    try:
        summary = await reconciler.import_transcript(call_id, message.transcript_text)
    except LookupError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return summary_response(summary)
