from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from apps/api so it works regardless of CWD
_env_file = Path(__file__).resolve().parent.parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=_env_file, extra="ignore")

    database_url: str = "postgresql://localhost/stacks"
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"

    # Chat (OpenAI-compatible); None => provider-specific default
    chat_api_base_url: str | None = None
    chat_api_key: str | None = None
    chat_model: str | None = None
    openai_api_key: str | None = None
    chat_timeout_seconds: float = 60.0

    # Letraz resume parsing
    letraz_api_key: str | None = None
    resume_parser_url: str = "https://stg.letraz.app/api/resume/parse"

    # OAuth account providers
    github_api_base_url: str = "https://api.github.com"
    linkedin_api_base_url: str = "https://api.linkedin.com/v2"

    # Upstream timeout for document and account sources (seconds)
    source_timeout_seconds: float = 30.0

    # Limits
    max_resume_bytes: int = 10 * 1024 * 1024  # 10MB
    max_resume_projects: int = 5
    max_import_projects: int = 8
    max_github_projects: int = 10
    max_github_repos: int = 20
    max_linkedin_positions: int = 5
    top_skills: int = 10

    # Rate limiting
    import_rate_limit: str = "5/minute"

    # CORS (comma-separated origins; * allows all)
    cors_origins: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parsed CORS origins for middleware."""
        raw = self.cors_origins.strip()
        return ["*"] if not raw else [o.strip() for o in raw.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
