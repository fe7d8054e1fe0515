import pytest

from interview_notifications.auth.verify import AuthContext, auth_dependency
from interview_notifications.errors import TransportError
from interview_notifications.models.domain.interview_domain import DirectoryUser, Interview
from interview_notifications.services.notifications.transport import EmailTransport

# 2026-10-19 13:30:00 UTC
NOW_MS = 1_792_416_600_000
MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS


class FakeTransport(EmailTransport):
    provider = "fake"

    def __init__(self, fail_on: set[str] | None = None, fail_verify: bool = False):
        super().__init__("noreply@example.com")
        self.sent = []
        self.verified = 0
        self.fail_on = fail_on or set()
        self.fail_verify = fail_verify
        self.closed = False

    async def verify(self) -> None:
        self.verified += 1
        if self.fail_verify:
            raise TransportError("bad credentials", provider=self.provider)

    async def send(self, message) -> None:
        if self.fail_on.intersection(message.to):
            raise TransportError("550 mailbox unavailable", provider=self.provider, status_code=550)
        self.sent.append(message)

    async def close(self) -> None:
        self.closed = True


class FakeInterviewStore:
    def __init__(self, interviews: list[Interview] | None = None):
        self.interviews = list(interviews or [])
        self.calls = 0

    async def list_upcoming_for_reminder(self, now_ms: int) -> list[Interview]:
        self.calls += 1
        return list(self.interviews)


class FakeUserDirectory:
    def __init__(self, users: list[DirectoryUser] | None = None):
        self.users = list(users or [])
        self.calls = 0

    async def users_by_id(self) -> dict[str, DirectoryUser]:
        self.calls += 1
        return {user.external_id: user for user in self.users}


def make_interview(
    interview_id: str = "int_1",
    start_offset_ms: int = 58 * MINUTE_MS,
    status: str = "upcoming",
    candidate_id: str = "user_cand",
    interviewer_ids: list[str] | None = None,
    title: str = "Backend Round",
) -> Interview:
    return Interview.model_validate(
        {
            "_id": interview_id,
            "title": title,
            "startTime": NOW_MS + start_offset_ms,
            "status": status,
            "streamCallId": f"call_{interview_id}",
            "candidateId": candidate_id,
            "interviewerIds": interviewer_ids if interviewer_ids is not None else ["user_al", "user_bo"],
        }
    )


def make_user(external_id: str, name: str, email: str) -> DirectoryUser:
    return DirectoryUser.model_validate({"clerkId": external_id, "name": name, "email": email})


@pytest.fixture
def users():
    return [
        make_user("user_cand", "Casey", "casey@example.com"),
        make_user("user_al", "Al", "al@example.com"),
        make_user("user_bo", "Bo", "bo@example.com"),
    ]


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def clock():
    return lambda: NOW_MS


@pytest.fixture
def auth_override():
    def _override():
        return AuthContext(token="user-token", claims={"sub": "user_cand"})

    return _override


@pytest.fixture
def apply_auth_override(auth_override):
    def _apply(app):
        app.dependency_overrides[auth_dependency] = auth_override

    return _apply
