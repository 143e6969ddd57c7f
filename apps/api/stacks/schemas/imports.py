from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ImportProfileRequest(BaseModel):
    """Either a list of providers or a single provider (legacy clients)."""
    providers: list[str] = Field(default_factory=list)
    provider: Optional[str] = None

    @model_validator(mode="after")
    def _collect_providers(self):
        if self.provider and self.provider not in self.providers:
            self.providers = [*self.providers, self.provider]
        return self


class ImportSourcesResponse(BaseModel):
    github: bool = False
    linkedin: bool = False


class RunStatsResponse(BaseModel):
    experience: int = 0
    education: int = 0
    projects: int = 0
    socialLinks: int = 0


class RunSummaryResponse(BaseModel):
    success: bool
    stats: RunStatsResponse
    failedSources: list[str] = Field(default_factory=list)
    failedWrites: list[str] = Field(default_factory=list)
    updatedFields: list[str] = Field(default_factory=list)
    error: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
