import logging

import httpx

from stacks.core import get_settings

logger = logging.getLogger(__name__)


class ResumeParserError(Exception):
    """Raised when the resume parsing service is unavailable or returns an invalid response."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ResumeParserConfigError(ResumeParserError):
    """Raised when resume parser configuration is missing."""


class ResumeParserResponseError(ResumeParserError):
    """Raised when the parser answered 2xx but the body is not JSON."""


class LetrazResumeParser:
    """Thin helper for the Letraz resume-parse API (multipart upload, generic JSON format)."""

    def __init__(
        self,
        *,
        api_key: str,
        parse_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.parse_url = parse_url
        self.timeout = timeout
        self._transport = transport

    @property
    def _headers(self) -> dict[str, str]:
        return {"x-authentication": self.api_key}

    async def parse(self, content: bytes, filename: str, content_type: str) -> dict:
        """Upload one document and return the parser's JSON body."""
        files = {"file": (filename or "resume.pdf", content, content_type)}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.parse_url,
                    params={"format": "generic"},
                    files=files,
                    headers=self._headers,
                )
        except httpx.RequestError as e:
            raise ResumeParserError("Resume parser unavailable (timeout or connection error).") from e

        if response.status_code >= 400:
            body = (response.text or "").strip()
            if body:
                logger.warning("Resume parser error %s: %s", response.status_code, body[:500])
            raise ResumeParserError(
                f"Resume parser returned {response.status_code}.",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise ResumeParserResponseError("Resume parser returned invalid JSON.") from e


def get_resume_parser() -> LetrazResumeParser:
    s = get_settings()
    if not s.letraz_api_key:
        raise ResumeParserConfigError("Resume parser not configured. Set LETRAZ_API_KEY.")
    return LetrazResumeParser(
        api_key=s.letraz_api_key,
        parse_url=s.resume_parser_url,
        timeout=s.source_timeout_seconds,
    )
