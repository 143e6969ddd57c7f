"""
Tests for the source field mappers.

Validates:
- Resume payload mapping (personal info, dates, project truncation)
- GitHub mapping (fork/description filter, archived status, language ranking, links)
- LinkedIn mapping (localized fields, optional positions)
- Transcript mapping (tagline fallback, status default)
- Missing identity / shape raises PayloadShapeError
"""

from datetime import date

import pytest

from stacks.services.reconcile.mappers import (
    PayloadShapeError,
    map_github_payload,
    map_linkedin_payload,
    map_resume_payload,
    map_transcript_payload,
    rank_languages,
)


# ── Resume ───────────────────────────────────────────────────────────

def resume_payload(**data):
    base = {
        "personalInfo": {"name": "Ada Lovelace", "summary": "Engineer", "location": "London"},
        "experience": [],
        "education": [],
        "skills": [],
        "projects": [],
    }
    base.update(data)
    return {"data": base}


class TestResumeMapper:

    def test_personal_info(self):
        result = map_resume_payload(resume_payload())
        assert result.source == "document"
        assert result.display_name == "Ada Lovelace"
        assert result.bio == "Engineer"
        assert result.summary == "Engineer"
        assert result.location == "London"

    def test_experience_dates(self):
        result = map_resume_payload(resume_payload(experience=[
            {"position": "SWE", "company": "Acme", "startDate": "2019", "endDate": "03/2021"},
            {"position": "Lead", "company": "Initech", "startDate": "April 2021", "endDate": "Present"},
        ]))
        first, second = result.experience
        assert first.title == "SWE"
        assert first.start_date == date(2019, 1, 1)
        assert first.end_date == date(2021, 3, 1)
        assert first.currently_working is False
        assert second.start_date == date(2021, 4, 1)
        assert second.currently_working is True

    def test_education(self):
        result = map_resume_payload(resume_payload(education=[
            {"institution": "MIT", "degree": "BSc", "field": "Physics", "gpa": "3.9", "endDate": "2015"},
        ]))
        edu = result.education[0]
        assert (edu.school, edu.degree, edu.field_of_study, edu.grade) == ("MIT", "BSc", "Physics", "3.9")
        assert edu.end_date == date(2015, 1, 1)

    def test_projects_truncated_after_completeness(self):
        projects = [{"name": f"p{i}", "description": "d"} for i in range(7)]
        projects.insert(0, {"name": "no description"})
        result = map_resume_payload(resume_payload(projects=projects), max_projects=5)
        assert [p.name for p in result.projects] == ["p0", "p1", "p2", "p3", "p4"]

    def test_skills_and_junk_entries(self):
        result = map_resume_payload(resume_payload(skills=["Python", "", None, "SQL"], experience=["junk", None]))
        assert result.skills == ["Python", "SQL"]
        assert result.experience == []

    @pytest.mark.parametrize("payload", [None, {}, {"data": None}, {"data": []}, "text"])
    def test_missing_data_raises(self, payload):
        with pytest.raises(PayloadShapeError):
            map_resume_payload(payload)


# ── GitHub ───────────────────────────────────────────────────────────

GITHUB_USER = {
    "login": "octocat",
    "name": "The Octocat",
    "bio": None,
    "location": "San Francisco",
    "company": "@github",
    "blog": "octocat.dev",
    "twitter_username": "octo",
    "html_url": "https://github.com/octocat",
}


class TestGitHubMapper:

    def test_projects_filtered(self):
        repos = [
            {"name": "hello", "description": "Hello world", "html_url": "https://github.com/octocat/hello", "language": "Python"},
            {"name": "forked", "description": "A fork", "fork": True, "language": "Go"},
            {"name": "bare", "description": None, "language": "Python"},
            {"name": "old", "description": "Retired", "archived": True, "language": "TypeScript"},
        ]
        result = map_github_payload(GITHUB_USER, repos)
        assert [(p.name, p.status) for p in result.projects] == [("hello", "completed"), ("old", "archived")]

    def test_project_cap(self):
        repos = [{"name": f"r{i}", "description": "d"} for i in range(15)]
        assert len(map_github_payload(GITHUB_USER, repos, max_projects=10).projects) == 10

    def test_social_links(self):
        result = map_github_payload(GITHUB_USER, [])
        assert [(s.platform, s.url) for s in result.social_links] == [
            ("github", "https://github.com/octocat"),
            ("website", "https://octocat.dev"),
            ("twitter", "https://twitter.com/octo"),
        ]

    def test_scalars(self):
        result = map_github_payload(GITHUB_USER, [])
        assert result.source == "github"
        assert result.display_name == "The Octocat"
        assert result.bio is None
        assert result.location == "San Francisco"
        assert result.company == "@github"

    def test_display_name_falls_back_to_login(self):
        result = map_github_payload({**GITHUB_USER, "name": None}, [])
        assert result.display_name == "octocat"

    def test_missing_login_raises(self):
        with pytest.raises(PayloadShapeError):
            map_github_payload({"name": "No Login"}, [])

    def test_non_list_repos(self):
        assert map_github_payload(GITHUB_USER, {"message": "oops"}).projects == []


class TestRankLanguages:

    def test_ranked_descending(self):
        repos = [{"language": lang} for lang in ["Go", "Python", "TypeScript", "Python", "TypeScript", "Python", None]]
        assert rank_languages(repos) == ["Python", "TypeScript", "Go"]

    def test_top_k(self):
        repos = [{"language": lang} for lang in ["Go", "Python", "Python", "Rust"]]
        assert rank_languages(repos, top_k=2) == ["Python", "Go"]

    def test_empty(self):
        assert rank_languages([]) == []


# ── LinkedIn ─────────────────────────────────────────────────────────

LINKEDIN_PROFILE = {
    "id": "abc123",
    "firstName": {"localized": {"en_US": "Grace"}},
    "lastName": {"localized": {"en_US": "Hopper"}},
    "headline": {"localized": {"en_US": "Rear Admiral"}},
    "summary": {"localized": {"de_DE": "Erfinderin"}},
    "location": {"country": "US"},
    "publicProfileUrl": "https://www.linkedin.com/in/grace",
}


class TestLinkedInMapper:

    def test_profile(self):
        result = map_linkedin_payload(LINKEDIN_PROFILE)
        assert result.source == "linkedin"
        assert result.display_name == "Grace Hopper"
        assert result.bio == "Rear Admiral"
        assert result.summary == "Erfinderin"
        assert result.location == "US"
        assert result.experience == []
        assert [(s.platform, s.url) for s in result.social_links] == [
            ("linkedin", "https://www.linkedin.com/in/grace"),
        ]

    def test_positions(self):
        positions = {"elements": [
            {
                "title": {"localized": {"en_US": "Engineer"}},
                "companyName": {"localized": {"en_US": "Navy"}},
                "dateRange": {"start": {"year": 1943, "month": 12}, "end": {"year": 1966}},
            },
            {
                "title": {"localized": {"en_US": "Advisor"}},
                "companyName": {"localized": {"en_US": "DEC"}},
                "dateRange": {"start": {"year": 1986}},
            },
        ]}
        result = map_linkedin_payload(LINKEDIN_PROFILE, positions)
        first, second = result.experience
        assert (first.title, first.company) == ("Engineer", "Navy")
        assert first.start_date == date(1943, 12, 1)
        assert first.end_date == date(1966, 1, 1)
        assert first.currently_working is False
        assert second.currently_working is True

    def test_positions_capped(self):
        positions = {"elements": [{"title": f"t{i}", "companyName": "c"} for i in range(8)]}
        assert len(map_linkedin_payload(LINKEDIN_PROFILE, positions, max_positions=5).experience) == 5

    def test_missing_id_raises(self):
        with pytest.raises(PayloadShapeError):
            map_linkedin_payload({k: v for k, v in LINKEDIN_PROFILE.items() if k != "id"})


# ── Transcript ───────────────────────────────────────────────────────

class TestTranscriptMapper:

    def test_full_payload(self):
        result = map_transcript_payload({
            "bio": "Builder of things.",
            "personalMission": "Get better at distributed systems",
            "lifePhilosophy": "Leave it better than you found it",
            "skills": ["Go", "Kubernetes"],
            "experience": [{"title": "SRE", "company": "Acme", "startDate": "2020-02-01", "currentlyWorking": True}],
            "education": [{"school": "IIT", "degree": "BTech", "fieldOfStudy": "CS"}],
            "projects": [{"name": "Pager", "tagline": "On-call bot", "status": "completed"}],
        })
        assert result.source == "transcript"
        assert result.personal_mission == "Get better at distributed systems"
        assert result.life_philosophy == "Leave it better than you found it"
        assert result.experience[0].start_date == date(2020, 2, 1)
        assert result.experience[0].currently_working is True
        assert result.education[0].field_of_study == "CS"
        assert result.projects[0].description == "On-call bot"
        assert result.projects[0].status == "completed"

    def test_defaults(self):
        result = map_transcript_payload({
            "experience": [{"title": "SRE", "company": "Acme", "currentlyWorking": "yes"}],
            "projects": [{"name": "Idea", "description": "Someday", "status": "dreaming"}],
        })
        assert result.experience[0].currently_working is False
        assert result.projects[0].status == "wip"

    def test_nulls_tolerated(self):
        result = map_transcript_payload({"bio": None, "experience": None, "projects": None, "skills": None})
        assert result.bio is None
        assert result.experience == []
        assert result.projects == []

    def test_non_object_raises(self):
        with pytest.raises(PayloadShapeError):
            map_transcript_payload(["not", "an", "object"])
