from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

END_OF_CALL_REPORT = "end-of-call-report"


class VapiCall(BaseModel):
    id: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class VapiMessage(BaseModel):
    type: Optional[str] = None
    call: Optional[VapiCall] = None
    transcript: Optional[str] = None
    artifact: Optional[dict[str, Any]] = None

    model_config = ConfigDict(extra="allow")

    @property
    def transcript_text(self) -> str:
        """Top-level transcript, else the artifact copy newer payloads carry."""
        if self.transcript:
            return self.transcript
        text = (self.artifact or {}).get("transcript")
        return text if isinstance(text, str) else ""


class VapiWebhookRequest(BaseModel):
    message: VapiMessage = Field(default_factory=VapiMessage)

    model_config = ConfigDict(extra="allow")


class WebhookAckResponse(BaseModel):
    received: bool = True
