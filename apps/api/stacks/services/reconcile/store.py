"""
Profile store: the persistence seam of a reconciliation run.

SqlProfileStore opens one session and one transaction per call, so each write
category commits or rolls back on its own and categories can run concurrently.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from stacks.core.constants import DEFAULT_EMPLOYMENT_TYPE
from stacks.db.models import (
    Education,
    Experience,
    LinkedAccount,
    Profile,
    Project,
    SocialLink,
    User,
)
from stacks.domain import (
    SCALAR_FIELDS,
    EducationEntry,
    ExperienceEntry,
    ProfileSnapshot,
    ProjectEntry,
    SocialLinkEntry,
    Writes,
)
from .errors import PersistenceError

logger = logging.getLogger(__name__)

PROJECT_NAME_MAX = 120
GRADE_MAX = 50
PLATFORM_MAX = 50

# Bounded scalar columns on profiles; the rest are Text.
_SCALAR_LIMITS = {"display_name": 255}


class ProfileStore(Protocol):
    async def load_snapshot(self, user_id: str) -> Optional[ProfileSnapshot]: ...

    async def persist(self, profile_id: str, category: str, writes: Writes) -> int:
        """Persist one write category atomically; return rows written. Raises PersistenceError."""
        ...

    async def find_user_by_call_id(self, call_id: str) -> Optional[str]: ...

    async def get_access_tokens(self, user_id: str, providers: list[str]) -> dict[str, Optional[str]]: ...


# -----------------------------------------------------------------------------
# Row builders
# -----------------------------------------------------------------------------


def _bounded(value: Optional[str], limit: int) -> Optional[str]:
    return value[:limit] if value else value


def _experience_row(profile_id: str, e: ExperienceEntry) -> Experience:
    return Experience(
        profile_id=profile_id,
        title=e.title,
        company=e.company,
        location=e.location,
        employment_type=DEFAULT_EMPLOYMENT_TYPE,
        start_date=e.start_date,
        end_date=e.end_date,
        currently_working=e.currently_working,
        description=e.description,
    )


def _education_row(profile_id: str, e: EducationEntry) -> Education:
    return Education(
        profile_id=profile_id,
        school=e.school,
        degree=e.degree,
        field_of_study=e.field_of_study,
        start_date=e.start_date,
        end_date=e.end_date,
        grade=_bounded(e.grade, GRADE_MAX),
    )


def _project_row(profile_id: str, p: ProjectEntry) -> Project:
    return Project(
        profile_id=profile_id,
        name=_bounded(p.name, PROJECT_NAME_MAX) or "",
        description=p.description,
        url=p.url,
        status=p.status,
    )


def _social_link_row(profile_id: str, s: SocialLinkEntry) -> SocialLink:
    return SocialLink(profile_id=profile_id, platform=_bounded(s.platform, PLATFORM_MAX), url=s.url)


_ROW_BUILDERS = {
    "experience": _experience_row,
    "education": _education_row,
    "projects": _project_row,
    "social_links": _social_link_row,
}


# -----------------------------------------------------------------------------
# SQLAlchemy implementation
# -----------------------------------------------------------------------------


class SqlProfileStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def load_snapshot(self, user_id: str) -> Optional[ProfileSnapshot]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Profile)
                .where(Profile.user_id == user_id)
                .options(
                    selectinload(Profile.experiences),
                    selectinload(Profile.educations),
                    selectinload(Profile.projects),
                    selectinload(Profile.social_links),
                )
            )
            profile = result.scalar_one_or_none()
            if not profile:
                return None
            return ProfileSnapshot(
                profile_id=profile.id,
                user_id=profile.user_id,
                **{f: getattr(profile, f) for f in SCALAR_FIELDS},
                experience=[ExperienceEntry.model_validate(e) for e in profile.experiences],
                education=[EducationEntry.model_validate(e) for e in profile.educations],
                projects=[ProjectEntry.model_validate(p) for p in profile.projects],
                social_links=[SocialLinkEntry.model_validate(s) for s in profile.social_links],
            )

    async def _update_scalars(self, session: AsyncSession, profile_id: str, updates: dict[str, str]) -> int:
        if not updates:
            return 0
        values = {f: _bounded(v, _SCALAR_LIMITS[f]) if f in _SCALAR_LIMITS else v for f, v in updates.items()}
        await session.execute(update(Profile).where(Profile.id == profile_id).values(**values))
        return len(updates)

    async def persist(self, profile_id: str, category: str, writes: Writes) -> int:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    if category == "profile":
                        return await self._update_scalars(session, profile_id, writes.scalar_updates)
                    build = _ROW_BUILDERS[category]
                    rows = [build(profile_id, entry) for entry in getattr(writes, category)]
                    session.add_all(rows)
                    return len(rows)
        except KeyError as e:
            raise PersistenceError(category, f"Unknown write category '{category}'.", cause=e)
        except Exception as e:
            logger.exception("persisting %s for profile_id=%s failed", category, profile_id)
            raise PersistenceError(category, f"Database persistence failed: {str(e)}", cause=e)

    async def find_user_by_call_id(self, call_id: str) -> Optional[str]:
        async with self._session_factory() as session:
            result = await session.execute(select(User.id).where(User.onboarding_call_id == call_id))
            return result.scalar_one_or_none()

    async def get_access_tokens(self, user_id: str, providers: list[str]) -> dict[str, Optional[str]]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(LinkedAccount.provider, LinkedAccount.access_token).where(
                    LinkedAccount.user_id == user_id,
                    LinkedAccount.provider.in_(providers),
                )
            )
            found = {provider: token for provider, token in result.all()}
        return {p: found.get(p) for p in providers}

    async def _profile_id(self, session: AsyncSession, user_id: str) -> Optional[str]:
        result = await session.execute(select(Profile.id).where(Profile.user_id == user_id))
        return result.scalar_one_or_none()

    async def resume_status(self, user_id: str) -> dict[str, int]:
        async with self._session_factory() as session:
            profile_id = await self._profile_id(session, user_id)
            if not profile_id:
                return {"experience": 0, "education": 0}
            experience = await session.scalar(
                select(func.count(Experience.id)).where(Experience.profile_id == profile_id)
            )
            education = await session.scalar(
                select(func.count(Education.id)).where(Education.profile_id == profile_id)
            )
        return {"experience": experience or 0, "education": education or 0}

    async def clear_resume_data(self, user_id: str) -> dict[str, int]:
        """Delete the user's experience and education rows (explicit user action)."""
        async with self._session_factory() as session:
            async with session.begin():
                profile_id = await self._profile_id(session, user_id)
                if not profile_id:
                    return {"experience": 0, "education": 0}
                experience = await session.execute(delete(Experience).where(Experience.profile_id == profile_id))
                education = await session.execute(delete(Education).where(Education.profile_id == profile_id))
        logger.info(
            "cleared resume data for user_id=%s: %s experience, %s education",
            user_id,
            experience.rowcount,
            education.rowcount,
        )
        return {"experience": experience.rowcount, "education": education.rowcount}
