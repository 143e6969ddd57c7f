"""
Domain types for profile reconciliation.
Extraction results from every source, the profile snapshot they are merged into,
and the write-set / run summary produced by a reconciliation run.
"""

from datetime import date
from typing import Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator

# -----------------------------------------------------------------------------
# 1. Enums
# -----------------------------------------------------------------------------

SourceName = Literal["document", "github", "linkedin", "transcript"]

ProjectStatus = Literal["completed", "wip", "archived"]

WriteCategory = Literal["profile", "experience", "education", "projects", "social_links"]

# -----------------------------------------------------------------------------
# 2. Constants
# -----------------------------------------------------------------------------

# Scalar profile attributes reconciliation may fill (never overwrite).
SCALAR_FIELDS: tuple[str, ...] = (
    "display_name",
    "bio",
    "location",
    "personal_mission",
    "life_philosophy",
    "summary",
)

COLLECTION_CATEGORIES: tuple[str, ...] = ("experience", "education", "projects", "social_links")

# -----------------------------------------------------------------------------
# 3. Entities
# -----------------------------------------------------------------------------


class ExperienceEntry(BaseModel):
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    currently_working: bool = False
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class EducationEntry(BaseModel):
    school: Optional[str] = None
    degree: Optional[str] = None
    field_of_study: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    grade: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProjectEntry(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    status: ProjectStatus = "completed"

    model_config = ConfigDict(from_attributes=True)

    @field_validator("status", mode="before")
    @classmethod
    def _known_status(cls, value):
        """Stored rows may carry statuses written elsewhere; anything unknown reads as in progress."""
        if value is None:
            return "completed"
        status = str(value).strip().lower()
        return status if status in get_args(ProjectStatus) else "wip"


class SocialLinkEntry(BaseModel):
    platform: Optional[str] = None
    url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# -----------------------------------------------------------------------------
# 4. Extraction result and profile snapshot
# -----------------------------------------------------------------------------


class ExtractionResult(BaseModel):
    """Normalized output of one source adapter. Every field is optional ("unknown", not "empty")."""

    source: SourceName

    display_name: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    personal_mission: Optional[str] = None
    life_philosophy: Optional[str] = None
    summary: Optional[str] = None

    # Auxiliary signals: used for bio synthesis and diagnostics, never persisted.
    company: Optional[str] = None
    website: Optional[str] = None
    skills: list[str] = Field(default_factory=list)

    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    projects: list[ProjectEntry] = Field(default_factory=list)
    social_links: list[SocialLinkEntry] = Field(default_factory=list)


class ProfileSnapshot(BaseModel):
    """Canonical profile as read once at the start of a run."""

    profile_id: str
    user_id: str

    display_name: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    personal_mission: Optional[str] = None
    life_philosophy: Optional[str] = None
    summary: Optional[str] = None

    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    projects: list[ProjectEntry] = Field(default_factory=list)
    social_links: list[SocialLinkEntry] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# 5. Writes and run summary
# -----------------------------------------------------------------------------


class Writes(BaseModel):
    """What a merge wants persisted: scalar fills plus appended child rows."""

    scalar_updates: dict[str, str] = Field(default_factory=dict)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    projects: list[ProjectEntry] = Field(default_factory=list)
    social_links: list[SocialLinkEntry] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.scalar_updates and not any(getattr(self, c) for c in COLLECTION_CATEGORIES)

    def combine(self, other: "Writes") -> "Writes":
        """Union of two write-sets; scalar keys already scheduled are kept."""
        return Writes(
            scalar_updates={**other.scalar_updates, **self.scalar_updates},
            experience=[*self.experience, *other.experience],
            education=[*self.education, *other.education],
            projects=[*self.projects, *other.projects],
            social_links=[*self.social_links, *other.social_links],
        )


class InsertStats(BaseModel):
    """Inserted row counts per child entity type."""

    experience: int = 0
    education: int = 0
    projects: int = 0
    social_links: int = Field(default=0, serialization_alias="socialLinks")


class RunSummary(BaseModel):
    success: bool
    stats: InsertStats = Field(default_factory=InsertStats)
    failed_sources: list[str] = Field(default_factory=list)
    failed_writes: list[str] = Field(default_factory=list)
    updated_fields: list[str] = Field(default_factory=list)
    error: Optional[str] = None

    def to_payload(self) -> dict:
        """Wire shape returned to request handlers and webhooks."""
        payload = {
            "success": self.success,
            "stats": self.stats.model_dump(by_alias=True),
            "failedSources": list(self.failed_sources),
            "failedWrites": list(self.failed_writes),
            "updatedFields": list(self.updated_fields),
        }
        if self.error:
            payload["error"] = self.error
        return payload
