"""
Tests for the SQLAlchemy profile store on a file-backed SQLite database.

Validates:
- Snapshot loading with child collections
- Each write category commits atomically on its own
- Call id and linked account lookups
- Resume status and clearing imported experience/education
- A full reconciliation run against the real store
"""

from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from stacks.db.models import Education, Experience, LinkedAccount, Profile, Project, SocialLink, User
from stacks.db.session import Base
from stacks.domain import EducationEntry, ExperienceEntry, ExtractionResult, ProjectEntry, SocialLinkEntry, Writes
from stacks.services.reconcile.errors import PersistenceError
from stacks.services.reconcile.orchestrator import Reconciler, SourceJob
from stacks.services.reconcile.store import SqlProfileStore

from fakes import StaticAdapter


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'stacks.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def seeded(session_factory):
    async with session_factory() as session:
        async with session.begin():
            session.add(User(id="u1", email="ada@example.com", onboarding_call_id="call-1"))
            session.add(Profile(id="p1", user_id="u1", display_name="Ada"))
            session.add(LinkedAccount(user_id="u1", provider="github", access_token="gh-token"))
    return session_factory


async def count(factory, model) -> int:
    async with factory() as session:
        return await session.scalar(select(func.count(model.id)))


class TestSnapshot:

    @pytest.mark.asyncio
    async def test_unknown_user(self, seeded):
        assert await SqlProfileStore(seeded).load_snapshot("nobody") is None

    @pytest.mark.asyncio
    async def test_loads_scalars_and_children(self, seeded):
        async with seeded() as session:
            async with session.begin():
                session.add(Experience(
                    profile_id="p1", title="SWE", company="Acme", start_date=date(2019, 1, 1), currently_working=True,
                ))
                session.add(Project(profile_id="p1", name="Tool", description="Does things", status="completed"))
        snapshot = await SqlProfileStore(seeded).load_snapshot("u1")
        assert snapshot.profile_id == "p1"
        assert snapshot.display_name == "Ada"
        assert snapshot.bio is None
        assert snapshot.experience[0].start_date == date(2019, 1, 1)
        assert snapshot.experience[0].currently_working is True
        assert snapshot.projects[0].status == "completed"
        assert snapshot.education == []

    @pytest.mark.asyncio
    async def test_unknown_project_status_reads_as_wip(self, seeded):
        async with seeded() as session:
            async with session.begin():
                session.add(Project(profile_id="p1", name="Tool", description="Does things", status="in-progress"))
        snapshot = await SqlProfileStore(seeded).load_snapshot("u1")
        assert snapshot.projects[0].status == "wip"


class TestPersist:

    @pytest.mark.asyncio
    async def test_scalar_update(self, seeded):
        store = SqlProfileStore(seeded)
        written = await store.persist("p1", "profile", Writes(scalar_updates={"bio": "Engineer", "summary": "Builds"}))
        assert written == 2
        snapshot = await store.load_snapshot("u1")
        assert (snapshot.bio, snapshot.summary, snapshot.display_name) == ("Engineer", "Builds", "Ada")

    @pytest.mark.asyncio
    async def test_experience_gets_default_employment_type(self, seeded):
        store = SqlProfileStore(seeded)
        await store.persist("p1", "experience", Writes(experience=[ExperienceEntry(title="SWE", company="Acme")]))
        async with seeded() as session:
            row = (await session.execute(select(Experience))).scalar_one()
        assert row.employment_type == "Full-time"

    @pytest.mark.asyncio
    async def test_category_is_atomic(self, seeded):
        store = SqlProfileStore(seeded)
        writes = Writes(projects=[
            ProjectEntry(name="Good", description="Complete"),
            ProjectEntry(name="Bad", description=None),
        ])
        with pytest.raises(PersistenceError) as exc:
            await store.persist("p1", "projects", writes)
        assert exc.value.category == "projects"
        assert await count(seeded, Project) == 0

    @pytest.mark.asyncio
    async def test_unknown_category(self, seeded):
        with pytest.raises(PersistenceError):
            await SqlProfileStore(seeded).persist("p1", "certificates", Writes())

    @pytest.mark.asyncio
    async def test_long_project_name_truncated(self, seeded):
        store = SqlProfileStore(seeded)
        await store.persist("p1", "projects", Writes(projects=[ProjectEntry(name="x" * 200, description="d")]))
        snapshot = await store.load_snapshot("u1")
        assert len(snapshot.projects[0].name) == 120

    @pytest.mark.asyncio
    async def test_long_grade_and_platform_truncated(self, seeded):
        store = SqlProfileStore(seeded)
        await store.persist("p1", "education", Writes(education=[EducationEntry(school="MIT", grade="3.9 " * 40)]))
        await store.persist(
            "p1", "social_links", Writes(social_links=[SocialLinkEntry(platform="p" * 80, url="https://example.com")])
        )
        async with seeded() as session:
            education = (await session.execute(select(Education))).scalar_one()
            link = (await session.execute(select(SocialLink))).scalar_one()
        assert len(education.grade) == 50
        assert len(link.platform) == 50

    @pytest.mark.asyncio
    async def test_long_display_name_truncated(self, seeded):
        store = SqlProfileStore(seeded)
        await store.persist("p1", "profile", Writes(scalar_updates={"display_name": "A" * 300, "bio": "b" * 300}))
        snapshot = await store.load_snapshot("u1")
        assert len(snapshot.display_name) == 255
        assert len(snapshot.bio) == 300


class TestLookups:

    @pytest.mark.asyncio
    async def test_find_user_by_call_id(self, seeded):
        store = SqlProfileStore(seeded)
        assert await store.find_user_by_call_id("call-1") == "u1"
        assert await store.find_user_by_call_id("call-2") is None

    @pytest.mark.asyncio
    async def test_access_tokens(self, seeded):
        tokens = await SqlProfileStore(seeded).get_access_tokens("u1", ["github", "linkedin"])
        assert tokens == {"github": "gh-token", "linkedin": None}


class TestResumeData:

    @pytest.mark.asyncio
    async def test_status_and_clear(self, seeded):
        store = SqlProfileStore(seeded)
        assert await store.resume_status("u1") == {"experience": 0, "education": 0}
        await store.persist("p1", "experience", Writes(experience=[ExperienceEntry(title="SWE", company="Acme")]))
        await store.persist("p1", "education", Writes(education=[EducationEntry(school="MIT"), EducationEntry(school="ETH")]))
        await store.persist("p1", "projects", Writes(projects=[ProjectEntry(name="Tool", description="d")]))
        assert await store.resume_status("u1") == {"experience": 1, "education": 2}

        assert await store.clear_resume_data("u1") == {"experience": 1, "education": 2}
        assert await store.resume_status("u1") == {"experience": 0, "education": 0}
        assert await count(seeded, Education) == 0
        assert await count(seeded, Project) == 1

    @pytest.mark.asyncio
    async def test_no_profile(self, seeded):
        store = SqlProfileStore(seeded)
        assert await store.resume_status("nobody") == {"experience": 0, "education": 0}
        assert await store.clear_resume_data("nobody") == {"experience": 0, "education": 0}


class TestRunAgainstDatabase:

    @pytest.mark.asyncio
    async def test_document_run(self, seeded):
        document = StaticAdapter("document", result=ExtractionResult(
            source="document",
            bio="Engineer",
            display_name="Someone Else",
            experience=[ExperienceEntry(title="SWE", company="Acme", start_date=date(2019, 1, 1))],
            projects=[ProjectEntry(name="Tool", description="Does things")],
        ))
        store = SqlProfileStore(seeded)
        summary = await Reconciler(store).run("u1", [SourceJob(document, None)])
        assert summary.success is True
        assert summary.stats.experience == 1
        assert summary.stats.projects == 1
        assert summary.updated_fields == ["bio"]

        snapshot = await store.load_snapshot("u1")
        assert snapshot.bio == "Engineer"
        assert snapshot.display_name == "Ada"
        assert [(e.title, e.start_date) for e in snapshot.experience] == [("SWE", date(2019, 1, 1))]

        again = await Reconciler(store).run("u1", [SourceJob(document, None)])
        assert again.stats.experience == 0
        assert again.stats.projects == 0
        assert await count(seeded, Experience) == 1
