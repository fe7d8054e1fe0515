"""
Tests for the interview data-access routes.
"""

import pytest
from conftest import make_interview
from fastapi.testclient import TestClient

from interview_notifications.main import app
from interview_notifications.repositories.interview_repository import get_interview_repository
from interview_notifications.services.infrastructure.store_client import InterviewStoreError


class FakeInterviewRepository:
    def __init__(self):
        self.interviews = [make_interview("int_1"), make_interview("int_2", status="completed")]
        self.tokens = []
        self.created = []
        self.updated = []
        self.fail = False

    def _check(self, token):
        self.tokens.append(token)
        if self.fail:
            raise InterviewStoreError("Uncaught Error: Unauthorized", status_code=560)

    async def get_all_interviews(self, token):
        self._check(token)
        return self.interviews

    async def get_my_interviews(self, token):
        self._check(token)
        return self.interviews[:1]

    async def get_by_stream_call_id(self, stream_call_id, token=None):
        self._check(token)
        return next((i for i in self.interviews if i.stream_call_id == stream_call_id), None)

    async def create_interview(self, fields, token):
        self._check(token)
        self.created.append(fields)
        return "int_new"

    async def update_interview_status(self, interview_id, status, token=None):
        self._check(token)
        self.updated.append((interview_id, status))


@pytest.fixture
def repository(apply_auth_override):
    repo = FakeInterviewRepository()
    apply_auth_override(app)
    app.dependency_overrides[get_interview_repository] = lambda: repo
    yield repo
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


def test_requires_bearer_token(client):
    response = client.get("/interviews")

    assert response.status_code in (401, 403)


def test_list_interviews_uses_store_aliases(client, repository):
    response = client.get("/interviews")

    assert response.status_code == 200
    data = response.json()
    assert [i["_id"] for i in data] == ["int_1", "int_2"]
    assert data[0]["streamCallId"] == "call_int_1"
    assert repository.tokens == ["user-token"]


def test_list_my_interviews(client, repository):
    response = client.get("/interviews/mine")

    assert response.status_code == 200
    assert [i["_id"] for i in response.json()] == ["int_1"]


def test_get_by_call_found_and_missing(client, repository):
    found = client.get("/interviews/by-call/call_int_2")
    missing = client.get("/interviews/by-call/call_nope")

    assert found.status_code == 200
    assert found.json()["status"] == "completed"
    assert missing.status_code == 404


def test_create_interview_defaults_status(client, repository):
    response = client.post(
        "/interviews",
        json={
            "title": "Backend Round",
            "startTime": 1_792_420_200_000,
            "streamCallId": "call_9",
            "candidateId": "user_cand",
            "interviewerIds": ["user_al"],
        },
    )

    assert response.status_code == 201
    assert response.json() == {"id": "int_new"}
    assert repository.created == [
        {
            "title": "Backend Round",
            "startTime": 1_792_420_200_000,
            "status": "upcoming",
            "streamCallId": "call_9",
            "candidateId": "user_cand",
            "interviewerIds": ["user_al"],
        }
    ]


def test_update_status(client, repository):
    response = client.patch("/interviews/int_1/status", json={"status": "completed"})

    assert response.status_code == 200
    assert repository.updated == [("int_1", "completed")]


def test_store_failure_is_502(client, repository):
    repository.fail = True

    response = client.get("/interviews")

    assert response.status_code == 502
    assert "Unauthorized" in response.json()["detail"]
