import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from formdeck.auth import CurrentUser
from formdeck.models.forms import Form, FormElement, FormElementType


# --- Canned backend payloads ---

NOW = datetime(2025, 3, 10, 12, 0, 0, tzinfo=timezone.utc)

API_FORM_LIST = [
    {
        "id": "f1",
        "title": "Booth Survey",
        "createdAt": "2025-01-15T09:30:00Z",
        "customSlug": "booth",
        "elements": [],
        "_count": {"responses": 3},
    },
    {
        "id": "f2",
        "title": "Untitled",
        "createdAt": None,
        "elements": [],
    },
]

API_FORM = {
    "id": "f1",
    "title": "Booth Survey",
    "createdAt": "2025-01-15T09:30:00Z",
    "elements": [
        {"id": "w1", "type": "WELCOME_SCREEN", "question": "Welcome!"},
        {"id": "q1", "type": "TEXT", "question": "Name?"},
        {"id": "s1", "type": "STATEMENT", "question": "Thanks!"},
        {"id": "q2", "type": "CHECKBOXES", "question": "Interests?",
         "options": [{"id": "o1", "label": "DeFi"}, {"id": "o2", "label": "NFTs"}]},
        {"id": "e1", "type": "END_SCREEN", "question": "Bye"},
    ],
}

API_RESPONSES = [
    {"id": "r1", "submittedAt": "2025-03-07T12:00:00Z", "answers": {"q1": "Ana", "q2": ["o1"]}},
    {"id": "r2", "submittedAt": "2025-03-10T11:00:00Z", "answers": {"q1": "Bo"}},
]

API_ME = {"id": "user_1", "email": "ana@example.com", "name": "Ana"}


def make_form(*elements: tuple[str, FormElementType, str]) -> Form:
    return Form(
        id="f1",
        title="Test form",
        elements=[FormElement(id=i, type=t, question=q) for i, t, q in elements],
    )


class FakeIdentity:
    """Identity provider with a fixed answer."""

    def __init__(self, user: CurrentUser | None, token: str | None = "tok", error: Exception | None = None):
        self.user = user
        self.token = token
        self.error = error
        self.resolve_calls = 0

    async def resolve(self):
        self.resolve_calls += 1
        if self.error is not None:
            raise self.error
        return self.user

    def invalidate(self):
        pass


@pytest.fixture
def user():
    return CurrentUser(id="user_1", email="ana@example.com")


@pytest.fixture
def mock_session(mocker):
    """Shared requests.Session used by the backend client."""
    session = MagicMock()
    mocker.patch("formdeck.services.forms.get_session", return_value=session)
    return session


def json_response(status: int, payload=None):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.url = "http://backend.test/api/forms"
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


@pytest.fixture
def api_client():
    """FastAPI TestClient for router tests."""
    from formdeck.main import api
    return TestClient(api)
