"""
OAuth account providers queried live during profile import.

  GitHubClient.fetch_profile(token)   -> (user, repos)
  LinkedInClient.fetch_profile(token) -> (profile, positions | None)

Both raise AccountProviderError with the upstream status code (None for network
errors and timeouts).
"""

import asyncio
import logging
from typing import Any

import httpx

from stacks.core import get_settings

logger = logging.getLogger(__name__)

LINKEDIN_PROFILE_PROJECTION = (
    "(id,firstName,lastName,headline,summary,location,industryName,publicProfileUrl)"
)


class AccountProviderError(Exception):
    """Raised when an account provider is unreachable or rejects the request."""

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        self.provider = provider
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_auth_error(self) -> bool:
        return self.status_code in (401, 403)


class _AccountClient:
    provider = ""
    accept = "application/json"

    def __init__(
        self,
        *,
        api_base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_base_url = api_base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _headers(self, access_token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {access_token}", "Accept": self.accept}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        path: str,
        access_token: str,
        params: dict | None = None,
    ) -> Any:
        try:
            response = await client.get(
                f"{self.api_base_url}{path}",
                params=params,
                headers=self._headers(access_token),
            )
        except httpx.RequestError as e:
            raise AccountProviderError(
                self.provider, f"{self.provider} unavailable (timeout or connection error)."
            ) from e
        if response.status_code >= 400:
            body = (response.text or "").strip()
            if body:
                logger.warning("%s API error %s on %s: %s", self.provider, response.status_code, path, body[:500])
            raise AccountProviderError(
                self.provider,
                f"{self.provider} returned {response.status_code} for {path}.",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise AccountProviderError(
                self.provider,
                f"{self.provider} returned invalid JSON for {path}.",
                status_code=response.status_code,
            ) from e


class GitHubClient(_AccountClient):
    provider = "github"
    accept = "application/vnd.github+json"

    def __init__(self, *, repos_per_page: int = 20, **kwargs):
        super().__init__(**kwargs)
        self.repos_per_page = repos_per_page

    async def fetch_profile(self, access_token: str) -> tuple[dict, list]:
        async with self._client() as client:
            user, repos = await asyncio.gather(
                self._get_json(client, "/user", access_token),
                self._get_json(
                    client,
                    "/user/repos",
                    access_token,
                    params={"sort": "updated", "per_page": self.repos_per_page},
                ),
            )
        return user, repos if isinstance(repos, list) else []


class LinkedInClient(_AccountClient):
    provider = "linkedin"

    def __init__(self, *, positions_count: int = 10, **kwargs):
        super().__init__(**kwargs)
        self.positions_count = positions_count

    async def _fetch_positions(self, client: httpx.AsyncClient, access_token: str) -> dict | None:
        # Positions need extra scopes; missing access only loses experience rows.
        try:
            return await self._get_json(
                client,
                "/positions",
                access_token,
                params={"person": "~", "count": self.positions_count},
            )
        except AccountProviderError as e:
            logger.info("LinkedIn positions unavailable, importing profile only: %s", e)
            return None

    async def fetch_profile(self, access_token: str) -> tuple[dict, dict | None]:
        async with self._client() as client:
            profile, positions = await asyncio.gather(
                self._get_json(
                    client,
                    "/me",
                    access_token,
                    params={"projection": LINKEDIN_PROFILE_PROJECTION},
                ),
                self._fetch_positions(client, access_token),
            )
        return profile, positions


def get_github_client() -> GitHubClient:
    s = get_settings()
    return GitHubClient(
        api_base_url=s.github_api_base_url,
        timeout=s.source_timeout_seconds,
        repos_per_page=s.max_github_repos,
    )


def get_linkedin_client() -> LinkedInClient:
    s = get_settings()
    return LinkedInClient(
        api_base_url=s.linkedin_api_base_url,
        timeout=s.source_timeout_seconds,
    )
