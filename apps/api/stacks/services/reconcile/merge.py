"""
Merge engine: profile snapshot + extraction result -> Writes.

Pure and synchronous. Scalars are only ever filled, never overwritten.
Experience and education are inserted only into an empty collection; projects
and social links are appended after completeness and identity filtering.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from stacks.domain import (
    COLLECTION_CATEGORIES,
    SCALAR_FIELDS,
    EducationEntry,
    ExperienceEntry,
    ExtractionResult,
    ProfileSnapshot,
    ProjectEntry,
    SocialLinkEntry,
    Writes,
)
from stacks.utils import normalize_url_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergePolicy:
    max_projects: int = 8
    # Skip projects (name+url) and social links (platform+url) the profile already has.
    dedupe_by_identity: bool = True


DEFAULT_POLICY = MergePolicy()


def _is_empty(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def project_key(project: ProjectEntry) -> tuple[str, str]:
    return ((project.name or "").strip().lower(), normalize_url_key(project.url))


def social_link_key(link: SocialLinkEntry) -> tuple[str, str]:
    return ((link.platform or "").strip().lower(), normalize_url_key(link.url))


# -----------------------------------------------------------------------------
# Per-category policies
# -----------------------------------------------------------------------------


def merge_scalars(profile: ProfileSnapshot, extraction: ExtractionResult) -> dict[str, str]:
    updates: dict[str, str] = {}
    for field in SCALAR_FIELDS:
        incoming = _clean(getattr(extraction, field, None))
        if incoming and _is_empty(getattr(profile, field, None)):
            updates[field] = incoming
    return updates


def merge_experience(
    existing: list[ExperienceEntry], candidates: Optional[Iterable[ExperienceEntry]]
) -> list[ExperienceEntry]:
    if existing:
        return []
    out = []
    for entry in candidates or []:
        title, company = _clean(entry.title), _clean(entry.company)
        if not title or not company:
            logger.debug("dropping experience without title/company: %r", entry)
            continue
        out.append(entry.model_copy(update={"title": title, "company": company}))
    return out


def merge_education(
    existing: list[EducationEntry], candidates: Optional[Iterable[EducationEntry]]
) -> list[EducationEntry]:
    if existing:
        return []
    out = []
    for entry in candidates or []:
        school = _clean(entry.school)
        if not school:
            logger.debug("dropping education without school: %r", entry)
            continue
        out.append(entry.model_copy(update={"school": school}))
    return out


def merge_projects(
    existing: list[ProjectEntry],
    candidates: Optional[Iterable[ProjectEntry]],
    *,
    policy: MergePolicy = DEFAULT_POLICY,
) -> list[ProjectEntry]:
    seen = {project_key(p) for p in existing} if policy.dedupe_by_identity else set()
    out: list[ProjectEntry] = []
    for entry in candidates or []:
        if len(out) >= policy.max_projects:
            break
        name, description = _clean(entry.name), _clean(entry.description)
        if not name or not description:
            logger.debug("dropping project without name/description: %r", entry)
            continue
        project = entry.model_copy(update={"name": name, "description": description, "url": _clean(entry.url)})
        if policy.dedupe_by_identity:
            key = project_key(project)
            if key in seen:
                continue
            seen.add(key)
        out.append(project)
    return out


def merge_social_links(
    existing: list[SocialLinkEntry],
    candidates: Optional[Iterable[SocialLinkEntry]],
    *,
    policy: MergePolicy = DEFAULT_POLICY,
) -> list[SocialLinkEntry]:
    seen = {social_link_key(s) for s in existing} if policy.dedupe_by_identity else set()
    out: list[SocialLinkEntry] = []
    for entry in candidates or []:
        platform, url = _clean(entry.platform), _clean(entry.url)
        if not platform or not url:
            continue
        link = SocialLinkEntry(platform=platform, url=url)
        if policy.dedupe_by_identity:
            key = social_link_key(link)
            if key in seen:
                continue
            seen.add(key)
        out.append(link)
    return out


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------


def merge(
    profile: ProfileSnapshot,
    extraction: ExtractionResult,
    *,
    policy: MergePolicy = DEFAULT_POLICY,
) -> Writes:
    """Compute the non-destructive write-set for one extraction against a snapshot."""
    return Writes(
        scalar_updates=merge_scalars(profile, extraction),
        experience=merge_experience(profile.experience, extraction.experience),
        education=merge_education(profile.education, extraction.education),
        projects=merge_projects(profile.projects, extraction.projects, policy=policy),
        social_links=merge_social_links(profile.social_links, extraction.social_links, policy=policy),
    )


def apply_writes(profile: ProfileSnapshot, writes: Writes) -> ProfileSnapshot:
    """Snapshot as it will look once writes are persisted."""
    update: dict = dict(writes.scalar_updates)
    for category in COLLECTION_CATEGORIES:
        added = getattr(writes, category)
        if added:
            update[category] = [*getattr(profile, category), *added]
    return profile.model_copy(update=update)
