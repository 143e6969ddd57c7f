"""
Chat LLM client used to structure call transcripts.

  get_chat_provider()      OpenAI or any OpenAI-compatible endpoint, chosen from settings
  ChatProvider.chat_json   one prompt in, one JSON object out

Errors: ChatRateLimitError (429 after backoff), ChatAuthError (401/403),
ChatRequestError (400), ChatResponseError (answer is not a JSON object), ChatServiceError otherwise.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod

import httpx

from stacks.core import get_settings
from stacks.utils import strip_json_from_response

logger = logging.getLogger(__name__)

JSON_OBJECT_FORMAT = {"type": "json_object"}

_OPENAI_BASE_URL = "https://api.openai.com/v1"
_OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
_OPENAI_COMPATIBLE_DEFAULT_MODEL = "Qwen/Qwen2.5-7B-Instruct"


class ChatServiceError(Exception):
    """Raised when the chat/LLM API is unavailable or returns an unexpected response."""


class ChatRateLimitError(ChatServiceError):
    """Raised when the chat/LLM API keeps rate limiting after backoff."""


class ChatAuthError(ChatServiceError):
    """Raised when the chat/LLM API rejects the configured credentials."""


class ChatRequestError(ChatServiceError):
    """Raised when the chat/LLM API rejects the request itself (400), e.g. an unsupported response_format."""


class ChatResponseError(ChatServiceError):
    """Raised when the chat/LLM API answered but the content is not a JSON object."""


def parse_json_object(text: str) -> dict:
    try:
        data = json.loads(strip_json_from_response(text))
    except ValueError as e:
        raise ChatResponseError("Chat returned invalid JSON.") from e
    if not isinstance(data, dict):
        raise ChatResponseError("Chat returned JSON that is not an object.")
    return data


class ChatProvider(ABC):
    @abstractmethod
    async def _chat(
        self,
        messages: list[dict[str, str]],
        max_tokens: int = 4096,
        temperature: float | None = None,
        response_format: dict | None = None,
    ) -> str:
        """Return the assistant reply text for messages."""

    async def chat_json(self, user_message: str, max_tokens: int = 4096) -> dict:
        """Ask for a JSON object; a provider that rejects JSON mode with a 400 is asked again in plain mode."""
        messages = [{"role": "user", "content": user_message}]
        try:
            text = await self._chat(messages, max_tokens=max_tokens, response_format=JSON_OBJECT_FORMAT)
        except ChatRequestError as e:
            logger.info("Chat JSON mode failed (%s), retrying without response_format.", e)
            text = await self._chat(messages, max_tokens=max_tokens)
        return parse_json_object(text)


class OpenAICompatibleChatProvider(ChatProvider):
    """Chat completions over httpx against OpenAI or a compatible server (vLLM, Groq, ...)."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        model: str,
        *,
        timeout: float = 60.0,
        retries: int = 2,
        backoff_seconds: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        base = base_url.rstrip("/")
        self.completions_url = f"{base if base.endswith('/v1') else base + '/v1'}/chat/completions"
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.retries = retries
        self.backoff_seconds = backoff_seconds
        self._transport = transport

    @property
    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _retry_delay(self, response: httpx.Response, attempt: int) -> float:
        try:
            delay = float(response.headers.get("Retry-After") or self.backoff_seconds)
        except ValueError:
            delay = self.backoff_seconds
        return delay * (attempt + 1)

    async def _post(self, payload: dict) -> httpx.Response:
        """POST the completion, sleeping through 429s up to `retries` times."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            for attempt in range(self.retries + 1):
                try:
                    response = await client.post(self.completions_url, json=payload, headers=self._headers)
                except httpx.RequestError as e:
                    raise ChatServiceError("Chat service unavailable (timeout or connection error).") from e
                if response.status_code != 429:
                    return response
                if attempt < self.retries:
                    await asyncio.sleep(self._retry_delay(response, attempt))
        raise ChatRateLimitError("Chat API rate limited the request. Please retry later.")

    @staticmethod
    def _content(data: dict) -> str:
        choices = data.get("choices") or []
        if not choices:
            raise ChatServiceError("Chat API returned no choices (e.g. content filter).")
        content = (choices[0].get("message") or {}).get("content")
        if not isinstance(content, str) or not content.strip():
            raise ChatServiceError("Chat API returned empty or non-string content.")
        return content.strip()

    async def _chat(
        self,
        messages: list[dict[str, str]],
        max_tokens: int = 4096,
        temperature: float | None = None,
        response_format: dict | None = None,
    ) -> str:
        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature if temperature is not None else 0.2,
        }
        if response_format is not None:
            payload["response_format"] = response_format

        response = await self._post(payload)
        if response.status_code in (401, 403):
            raise ChatAuthError("Chat API rejected the configured API key.")
        if response.status_code >= 400:
            body = (response.text or "").strip()
            if body:
                logger.warning("Chat API error %s: %s", response.status_code, body[:500])
            if response.status_code == 400:
                raise ChatRequestError("Chat API rejected the request (400).")
            raise ChatServiceError(f"Chat API returned {response.status_code}.")
        try:
            return self._content(response.json())
        except (ValueError, AttributeError, TypeError) as e:
            raise ChatServiceError("Chat API returned unexpected response format.") from e


def get_chat_provider() -> ChatProvider:
    s = get_settings()
    if s.chat_api_base_url:
        return OpenAICompatibleChatProvider(
            base_url=s.chat_api_base_url,
            api_key=s.chat_api_key,
            model=s.chat_model or _OPENAI_COMPATIBLE_DEFAULT_MODEL,
            timeout=s.chat_timeout_seconds,
        )
    if s.openai_api_key:
        return OpenAICompatibleChatProvider(
            base_url=_OPENAI_BASE_URL,
            api_key=s.openai_api_key,
            model=s.chat_model or _OPENAI_DEFAULT_MODEL,
            timeout=s.chat_timeout_seconds,
        )
    raise RuntimeError(
        "Chat LLM not configured. Set OPENAI_API_KEY or CHAT_API_BASE_URL (and CHAT_MODEL)."
    )
