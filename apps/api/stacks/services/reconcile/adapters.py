"""
Source adapters: one external origin each, ExtractionResult out.

  DocumentAdapter        resume bytes -> resume parser -> map_resume_payload
  AccountImportAdapter   provider + OAuth token -> GitHub/LinkedIn -> mapper + bio synthesis
  TranscriptAdapter      call transcript -> chat LLM (+ one translation pass) -> map_transcript_payload

extract() raises only SourceError; provider errors are translated here so the
orchestrator sees a closed set of failure kinds.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from stacks.core import get_settings
from stacks.core.constants import ALLOWED_RESUME_TYPES, SUPPORTED_IMPORT_PROVIDERS
from stacks.domain import ExtractionResult
from stacks.prompts.transcript import (
    PROMPT_EXTRACT_TRANSCRIPT,
    PROMPT_TRANSLATE_PROFILE,
    fill_prompt,
)
from stacks.providers import (
    AccountProviderError,
    ChatAuthError,
    ChatProvider,
    ChatResponseError,
    ChatServiceError,
    GitHubClient,
    LetrazResumeParser,
    LinkedInClient,
    ResumeParserConfigError,
    ResumeParserError,
    ResumeParserResponseError,
    get_chat_provider,
    get_github_client,
    get_linkedin_client,
    get_resume_parser,
)
from .bio import Selector, ensure_bio, random_selector
from .errors import SourceError, SourceErrorKind
from .language import is_non_english
from .mappers import (
    PayloadShapeError,
    map_github_payload,
    map_linkedin_payload,
    map_resume_payload,
    map_transcript_payload,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DocumentInput:
    content: bytes
    filename: str
    content_type: str


@dataclass(frozen=True)
class AccountImportInput:
    provider: str
    access_token: Optional[str]


@dataclass(frozen=True)
class TranscriptInput:
    transcript: str
    call_id: Optional[str] = None


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class SourceAdapter(ABC):
    source: str = ""

    def source_name(self, payload: Any) -> str:
        """Provenance tag for a given input (account imports report the provider)."""
        return self.source

    @abstractmethod
    async def extract(self, payload: Any) -> ExtractionResult:
        pass

    def _error(self, kind: SourceErrorKind, detail: str, payload: Any = None) -> SourceError:
        return SourceError(kind, detail, source=self.source_name(payload))


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


class DocumentAdapter(SourceAdapter):
    source = "document"

    def __init__(
        self,
        parser: LetrazResumeParser | None = None,
        *,
        max_bytes: int | None = None,
        max_projects: int | None = None,
        allowed_types: tuple[str, ...] = ALLOWED_RESUME_TYPES,
    ):
        s = get_settings()
        self._parser = parser
        self.max_bytes = max_bytes if max_bytes is not None else s.max_resume_bytes
        self.max_projects = max_projects if max_projects is not None else s.max_resume_projects
        self.allowed_types = allowed_types

    def validate(self, document: DocumentInput) -> None:
        """Reject empty, oversize, or unsupported documents before any network call."""
        if not document.content:
            raise self._error(SourceErrorKind.UNPARSEABLE, "Document is empty.")
        if len(document.content) > self.max_bytes:
            raise self._error(
                SourceErrorKind.UNPARSEABLE,
                f"Document too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB.",
            )
        media_type = (document.content_type or "").split(";")[0].strip().lower()
        if media_type not in self.allowed_types:
            raise self._error(
                SourceErrorKind.UNPARSEABLE,
                "Invalid file type. Only PDF, DOC, and DOCX files are allowed.",
            )

    async def extract(self, payload: DocumentInput) -> ExtractionResult:
        self.validate(payload)
        try:
            parser = self._parser or get_resume_parser()
            raw = await parser.parse(payload.content, payload.filename, payload.content_type)
        except ResumeParserConfigError as e:
            raise self._error(SourceErrorKind.UNAVAILABLE, str(e)) from e
        except ResumeParserResponseError as e:
            raise self._error(SourceErrorKind.UNPARSEABLE, str(e)) from e
        except ResumeParserError as e:
            kind = SourceErrorKind.UNAUTHORIZED if e.status_code in (401, 403) else SourceErrorKind.UNAVAILABLE
            raise self._error(kind, str(e)) from e
        try:
            return map_resume_payload(raw, max_projects=self.max_projects)
        except PayloadShapeError as e:
            raise self._error(SourceErrorKind.UNPARSEABLE, str(e)) from e


# ---------------------------------------------------------------------------
# Account import (GitHub, LinkedIn)
# ---------------------------------------------------------------------------


class AccountImportAdapter(SourceAdapter):
    source = "account"

    def __init__(
        self,
        *,
        github: GitHubClient | None = None,
        linkedin: LinkedInClient | None = None,
        selector: Selector = random_selector,
    ):
        s = get_settings()
        self._github = github
        self._linkedin = linkedin
        self.selector = selector
        self.max_github_projects = s.max_github_projects
        self.max_linkedin_positions = s.max_linkedin_positions
        self.top_skills = s.top_skills

    def source_name(self, payload: Any) -> str:
        provider = (getattr(payload, "provider", None) or "").strip().lower()
        return provider or self.source

    async def _extract_github(self, access_token: str) -> ExtractionResult:
        client = self._github or get_github_client()
        user, repos = await client.fetch_profile(access_token)
        return map_github_payload(
            user,
            repos,
            max_projects=self.max_github_projects,
            top_skills=self.top_skills,
        )

    async def _extract_linkedin(self, access_token: str) -> ExtractionResult:
        client = self._linkedin or get_linkedin_client()
        profile, positions = await client.fetch_profile(access_token)
        return map_linkedin_payload(profile, positions, max_positions=self.max_linkedin_positions)

    async def extract(self, payload: AccountImportInput) -> ExtractionResult:
        if payload.provider not in SUPPORTED_IMPORT_PROVIDERS:
            raise self._error(SourceErrorKind.UNPARSEABLE, f"Unsupported provider '{payload.provider}'.", payload)
        if not (payload.access_token or "").strip():
            raise self._error(
                SourceErrorKind.UNAUTHORIZED,
                f"No {payload.provider} account connected or access token missing.",
                payload,
            )
        token = payload.access_token.strip()
        try:
            if payload.provider == "github":
                extraction = await self._extract_github(token)
            else:
                extraction = await self._extract_linkedin(token)
        except AccountProviderError as e:
            kind = SourceErrorKind.UNAUTHORIZED if e.is_auth_error else SourceErrorKind.UNAVAILABLE
            raise self._error(kind, str(e), payload) from e
        except PayloadShapeError as e:
            raise self._error(SourceErrorKind.UNPARSEABLE, str(e), payload) from e
        return ensure_bio(extraction, selector=self.selector)


# ---------------------------------------------------------------------------
# Transcript
# ---------------------------------------------------------------------------


class TranscriptAdapter(SourceAdapter):
    source = "transcript"

    def __init__(self, chat: ChatProvider | None = None):
        self._chat = chat

    async def _chat_json(self, prompt: str) -> dict:
        try:
            chat = self._chat or get_chat_provider()
            return await chat.chat_json(prompt)
        except RuntimeError as e:
            raise self._error(SourceErrorKind.UNAVAILABLE, str(e)) from e
        except ChatAuthError as e:
            raise self._error(SourceErrorKind.UNAUTHORIZED, str(e)) from e
        except ChatResponseError as e:
            raise self._error(SourceErrorKind.UNPARSEABLE, str(e)) from e
        except ChatServiceError as e:
            raise self._error(SourceErrorKind.UNAVAILABLE, str(e)) from e

    async def extract(self, payload: TranscriptInput) -> ExtractionResult:
        transcript = (payload.transcript or "").strip()
        if not transcript:
            raise self._error(SourceErrorKind.UNPARSEABLE, "Transcript is empty.")

        data = await self._chat_json(fill_prompt(PROMPT_EXTRACT_TRANSCRIPT, transcript=transcript))
        if is_non_english(transcript):
            logger.info("transcript call_id=%s flagged non-English, translating extraction", payload.call_id)
            data = await self._chat_json(
                fill_prompt(PROMPT_TRANSLATE_PROFILE, profile_json=json.dumps(data, ensure_ascii=False))
            )
        try:
            return map_transcript_payload(data)
        except PayloadShapeError as e:
            raise self._error(SourceErrorKind.UNPARSEABLE, str(e)) from e
