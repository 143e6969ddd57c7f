"""
Field mappers: source-specific raw payload -> ExtractionResult.

  map_resume_payload      Letraz resume-parse response {data: {personalInfo, ...}}
  map_github_payload      GitHub /user + /user/repos
  map_linkedin_payload    LinkedIn profile + positions
  map_transcript_payload  LLM extraction of a voice-call transcript

Mappers are pure. Malformed individual entries are dropped; a payload whose
overall shape or identity fields are missing raises PayloadShapeError.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Any, Optional

from stacks.core.constants import MIN_YEAR, MAX_YEAR, PROJECT_STATUSES
from stacks.domain import (
    EducationEntry,
    ExperienceEntry,
    ExtractionResult,
    ProjectEntry,
    SocialLinkEntry,
)
from .dates import is_current_marker, normalize_date


class PayloadShapeError(ValueError):
    """Raised when a payload cannot be mapped into an extraction result at all."""


def _trim(s: Any) -> Optional[str]:
    """Return trimmed string or None if empty."""
    if s is None or isinstance(s, (dict, list)):
        return None
    t = str(s).strip()
    return t if t else None


def _dict_items(raw: Any) -> list[dict]:
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, dict)]


def _string_items(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    out = []
    for item in raw:
        text = _trim(item)
        if text:
            out.append(text)
    return out


def _project_status(raw: Any, default: str) -> str:
    status = (_trim(raw) or "").lower()
    return status if status in PROJECT_STATUSES else default


def _complete_projects(projects: list[ProjectEntry], limit: int) -> list[ProjectEntry]:
    kept = [p for p in projects if p.name and p.description]
    return kept[:limit] if limit >= 0 else kept


# -----------------------------------------------------------------------------
# Document (resume parser)
# -----------------------------------------------------------------------------


def map_resume_payload(payload: Any, *, max_projects: int = 5) -> ExtractionResult:
    """Map {data: {personalInfo, education[], experience[], skills[], projects[]}}."""
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise PayloadShapeError("Resume parser response has no 'data' object.")

    info = data.get("personalInfo") if isinstance(data.get("personalInfo"), dict) else {}
    summary = _trim(info.get("summary"))

    experience = [
        ExperienceEntry(
            title=_trim(exp.get("position")),
            company=_trim(exp.get("company")),
            location=_trim(exp.get("location")),
            start_date=normalize_date(exp.get("startDate")),
            end_date=normalize_date(exp.get("endDate")),
            currently_working=is_current_marker(exp.get("endDate")),
            description=_trim(exp.get("description")),
        )
        for exp in _dict_items(data.get("experience"))
    ]
    education = [
        EducationEntry(
            school=_trim(edu.get("institution")),
            degree=_trim(edu.get("degree")),
            field_of_study=_trim(edu.get("field")),
            start_date=normalize_date(edu.get("startDate")),
            end_date=normalize_date(edu.get("endDate")),
            grade=_trim(edu.get("gpa")),
        )
        for edu in _dict_items(data.get("education"))
    ]
    projects = [
        ProjectEntry(
            name=_trim(proj.get("name")),
            description=_trim(proj.get("description")),
            url=_trim(proj.get("url")),
            status="completed",
        )
        for proj in _dict_items(data.get("projects"))
    ]

    return ExtractionResult(
        source="document",
        display_name=_trim(info.get("name")),
        bio=summary,
        summary=summary,
        location=_trim(info.get("location")),
        skills=_string_items(data.get("skills")),
        experience=experience,
        education=education,
        projects=_complete_projects(projects, max_projects),
    )


# -----------------------------------------------------------------------------
# GitHub
# -----------------------------------------------------------------------------


def rank_languages(repos: list[dict], top_k: int = 10) -> list[str]:
    """Repository languages ranked by frequency (descending), top_k kept. Ties keep first-seen order."""
    counts = Counter(_trim(r.get("language")) for r in repos)
    counts.pop(None, None)
    return [lang for lang, _ in counts.most_common(top_k)]


def _website_url(blog: Optional[str]) -> Optional[str]:
    if not blog:
        return None
    return blog if blog.startswith("http") else f"https://{blog}"


def map_github_payload(
    user: Any,
    repos: Any,
    *,
    max_projects: int = 10,
    top_skills: int = 10,
) -> ExtractionResult:
    if not isinstance(user, dict) or not _trim(user.get("login")):
        raise PayloadShapeError("GitHub user payload has no login.")
    repo_items = _dict_items(repos)

    projects = [
        ProjectEntry(
            name=_trim(repo.get("name")),
            description=_trim(repo.get("description")),
            url=_trim(repo.get("html_url")),
            status="archived" if repo.get("archived") else "completed",
        )
        for repo in repo_items
        if not repo.get("fork") and _trim(repo.get("description"))
    ][:max_projects]

    website = _website_url(_trim(user.get("blog")))
    links = [SocialLinkEntry(platform="github", url=_trim(user.get("html_url")))]
    if website:
        links.append(SocialLinkEntry(platform="website", url=website))
    twitter = _trim(user.get("twitter_username"))
    if twitter:
        links.append(SocialLinkEntry(platform="twitter", url=f"https://twitter.com/{twitter}"))

    return ExtractionResult(
        source="github",
        display_name=_trim(user.get("name")) or _trim(user.get("login")),
        bio=_trim(user.get("bio")),
        location=_trim(user.get("location")),
        company=_trim(user.get("company")),
        website=website or _trim(user.get("html_url")),
        skills=rank_languages(repo_items, top_skills),
        projects=projects,
        social_links=[link for link in links if link.url],
    )


# -----------------------------------------------------------------------------
# LinkedIn
# -----------------------------------------------------------------------------


def _localized(field: Any) -> Optional[str]:
    """LinkedIn multi-locale string: prefer en_US, else first locale present."""
    if not isinstance(field, dict):
        return _trim(field)
    localized = field.get("localized")
    if not isinstance(localized, dict) or not localized:
        return None
    if "en_US" in localized:
        return _trim(localized["en_US"])
    return _trim(next(iter(localized.values())))


def _linkedin_date(part: Any) -> Optional[date]:
    if not isinstance(part, dict):
        return None
    try:
        year = int(part.get("year"))
        value = date(year, int(part.get("month") or 1), int(part.get("day") or 1))
    except (TypeError, ValueError):
        return None
    return value if MIN_YEAR <= value.year <= MAX_YEAR else None


def map_linkedin_payload(
    profile: Any,
    positions: Any = None,
    *,
    max_positions: int = 5,
) -> ExtractionResult:
    if not isinstance(profile, dict) or not _trim(profile.get("id")):
        raise PayloadShapeError("LinkedIn profile payload has no id.")

    first = _localized(profile.get("firstName")) or ""
    last = _localized(profile.get("lastName")) or ""
    location = profile.get("location") if isinstance(profile.get("location"), dict) else {}

    experience = []
    elements = positions.get("elements") if isinstance(positions, dict) else None
    for position in _dict_items(elements)[:max_positions]:
        date_range = position.get("dateRange") if isinstance(position.get("dateRange"), dict) else {}
        experience.append(
            ExperienceEntry(
                title=_localized(position.get("title")),
                company=_localized(position.get("companyName")),
                description=_localized(position.get("description")),
                start_date=_linkedin_date(date_range.get("start")),
                end_date=_linkedin_date(date_range.get("end")),
                currently_working=not date_range.get("end"),
            )
        )

    public_url = _trim(profile.get("publicProfileUrl"))
    return ExtractionResult(
        source="linkedin",
        display_name=f"{first} {last}".strip() or None,
        bio=_localized(profile.get("headline")) or _localized(profile.get("summary")),
        summary=_localized(profile.get("summary")),
        location=_localized(location.get("country")),
        company=_localized(profile.get("industryName")),
        experience=experience,
        social_links=[SocialLinkEntry(platform="linkedin", url=public_url)] if public_url else [],
    )


# -----------------------------------------------------------------------------
# Transcript (LLM extraction)
# -----------------------------------------------------------------------------


def map_transcript_payload(payload: Any) -> ExtractionResult:
    """Map the transcript-extraction JSON (bio, personalMission, lifePhilosophy, skills, ...)."""
    if not isinstance(payload, dict):
        raise PayloadShapeError("Transcript extraction did not return a JSON object.")

    experience = [
        ExperienceEntry(
            title=_trim(exp.get("title")),
            company=_trim(exp.get("company")),
            location=_trim(exp.get("location")),
            description=_trim(exp.get("description")),
            start_date=normalize_date(exp.get("startDate")),
            end_date=normalize_date(exp.get("endDate")),
            currently_working=exp.get("currentlyWorking") is True,
        )
        for exp in _dict_items(payload.get("experience"))
    ]
    education = [
        EducationEntry(
            school=_trim(edu.get("school")),
            degree=_trim(edu.get("degree")),
            field_of_study=_trim(edu.get("fieldOfStudy")),
            start_date=normalize_date(edu.get("startDate")),
            end_date=normalize_date(edu.get("endDate")),
            grade=_trim(edu.get("grade")),
        )
        for edu in _dict_items(payload.get("education"))
    ]
    projects = [
        ProjectEntry(
            name=_trim(proj.get("name")),
            description=_trim(proj.get("description")) or _trim(proj.get("tagline")),
            url=_trim(proj.get("url")),
            status=_project_status(proj.get("status"), "wip"),
        )
        for proj in _dict_items(payload.get("projects"))
    ]

    return ExtractionResult(
        source="transcript",
        bio=_trim(payload.get("bio")),
        personal_mission=_trim(payload.get("personalMission")),
        life_philosophy=_trim(payload.get("lifePhilosophy")),
        skills=_string_items(payload.get("skills")),
        experience=experience,
        education=education,
        projects=projects,
    )
