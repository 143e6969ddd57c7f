"""
Tests for the HTTP surface with dependency overrides (no database, no network).
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from stacks.dependencies import get_current_user_id, get_profile_store, get_reconciler
from stacks.domain import ExperienceEntry
from stacks.main import app
from stacks.providers.resume_parser import LetrazResumeParser
from stacks.services.reconcile.adapters import AccountImportAdapter, DocumentAdapter, TranscriptAdapter
from stacks.services.reconcile.orchestrator import Reconciler

from fakes import FakeChat, FakeStore, make_snapshot

RESUME_RESPONSE = {"data": {
    "personalInfo": {"summary": "Engineer"},
    "experience": [{"position": "SWE", "company": "Acme", "startDate": "2019"}],
}}


@pytest.fixture
def store():
    return FakeStore(make_snapshot(), call_ids={"call-1": "u1"}, tokens={"github": "gh-token"})


@pytest.fixture
def client(store):
    parser = LetrazResumeParser(
        api_key="k",
        parse_url="https://parser.test/parse",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=RESUME_RESPONSE)),
    )
    reconciler = Reconciler(
        store,
        document=DocumentAdapter(parser),
        accounts=AccountImportAdapter(selector=lambda options: options[0]),
        transcript=TranscriptAdapter(FakeChat(json.dumps({"bio": "Voice bio", "skills": ["Go"]}))),
    )
    app.dependency_overrides[get_current_user_id] = lambda: "u1"
    app.dependency_overrides[get_profile_store] = lambda: store
    app.dependency_overrides[get_reconciler] = lambda: reconciler
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer not-a-jwt"}])
def test_requires_valid_bearer_token(headers):
    app.dependency_overrides.clear()
    response = TestClient(app).get("/resume/status", headers=headers)
    assert response.status_code == 401


# ── /import-profile ──────────────────────────────────────────────────

class TestImportProfile:

    def test_no_providers(self, client):
        assert client.post("/import-profile", json={}).status_code == 400

    def test_missing_token_is_failed_source(self, client):
        response = client.post("/import-profile", json={"provider": "linkedin"})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["failedSources"] == ["linkedin"]
        assert body["stats"] == {"experience": 0, "education": 0, "projects": 0, "socialLinks": 0}

    def test_unsupported_provider_rejected(self, client, store):
        response = client.post("/import-profile", json={"providers": ["github", "gitlab"]})
        assert response.status_code == 400
        assert "gitlab" in response.json()["detail"]
        assert store.loads == 0

    def test_store_down_is_503(self, client, store):
        async def broken(user_id):
            raise ConnectionError("db down")

        store.load_snapshot = broken
        response = client.post("/import-profile", json={"provider": "github"})
        assert response.status_code == 503

    def test_sources(self, client):
        assert client.get("/import-profile/sources").json() == {"github": True, "linkedin": False}


# ── /resume ──────────────────────────────────────────────────────────

class TestResume:

    def test_invalid_type_rejected(self, client):
        response = client.post("/resume/import", files={"file": ("cv.txt", b"hello", "text/plain")})
        assert response.status_code == 400

    def test_oversize_upload_read_is_bounded(self, client):
        seen = []
        reconciler = app.dependency_overrides[get_reconciler]()
        reconciler.document.max_bytes = 16
        validate = reconciler.document.validate

        def recording(document):
            seen.append(len(document.content))
            validate(document)

        reconciler.document.validate = recording
        response = client.post("/resume/import", files={"file": ("cv.pdf", b"%" * 1000, "application/pdf")})
        assert response.status_code == 400
        assert seen == [17]

    def test_import(self, client, store):
        response = client.post("/resume/import", files={"file": ("cv.pdf", b"%PDF-1.4", "application/pdf")})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["stats"]["experience"] == 1
        assert store.snapshot.bio == "Engineer"

    def test_status_and_clear(self, client, store):
        store.snapshot = make_snapshot(experience=[ExperienceEntry(title="SWE", company="Acme")])
        assert client.get("/resume/status").json() == {
            "hasResumeData": True,
            "experienceCount": 1,
            "educationCount": 0,
        }
        cleared = client.delete("/resume/data").json()
        assert cleared["deletedExperience"] == 1
        assert client.get("/resume/status").json()["hasResumeData"] is False

    def test_missing_profile_is_404(self, client, store):
        store.snapshot = None
        response = client.post("/resume/import", files={"file": ("cv.pdf", b"%PDF-1.4", "application/pdf")})
        assert response.status_code == 404


# ── /vapi/webhook ────────────────────────────────────────────────────

class TestVapiWebhook:

    def test_other_message_types_acknowledged(self, client, store):
        response = client.post("/vapi/webhook", json={"message": {"type": "status-update"}})
        assert response.json() == {"received": True}
        assert store.loads == 0

    def test_end_of_call_report(self, client, store):
        response = client.post("/vapi/webhook", json={"message": {
            "type": "end-of-call-report",
            "call": {"id": "call-1"},
            "transcript": "AI: Tell me about yourself.\nUser: I write Go.",
        }})
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert store.snapshot.bio == "Voice bio"

    def test_artifact_transcript(self, client, store):
        response = client.post("/vapi/webhook", json={"message": {
            "type": "end-of-call-report",
            "call": {"id": "call-1"},
            "artifact": {"transcript": "User: I write Go."},
        }})
        assert response.json()["success"] is True

    def test_unknown_call(self, client):
        response = client.post("/vapi/webhook", json={"message": {
            "type": "end-of-call-report",
            "call": {"id": "call-404"},
            "transcript": "User: hi",
        }})
        assert response.status_code == 404

    def test_missing_call_id(self, client):
        response = client.post("/vapi/webhook", json={"message": {"type": "end-of-call-report"}})
        assert response.status_code == 400
