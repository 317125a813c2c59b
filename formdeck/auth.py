import asyncio
import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel, ValidationError

from formdeck.exceptions import AuthenticationError, IntegrationError
from formdeck.models.common import StatusResponse
from formdeck.services import forms as forms_service

logger = logging.getLogger(__name__)

SESSION_COOKIE = "__session"


class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    name: str | None = None


def token_from_request(request: Request) -> str | None:
    """Session token from the Authorization header, falling back to the session cookie."""
    header = request.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(SESSION_COOKIE) or None


def fetch_current_user(token: str | None) -> CurrentUser | None:
    """Ask the backend who owns the token. None means anonymous."""
    if not token:
        return None
    try:
        data = forms_service.get_me(token)
    except AuthenticationError:
        logger.debug("Session token rejected by backend")
        return None
    try:
        return CurrentUser.model_validate(data)
    except ValidationError as e:
        raise IntegrationError(f"Unexpected profile from forms backend: {e}") from e


class IdentityProvider:
    """Resolves the current user for one session token, caching the answer."""

    def __init__(self, token: str | None):
        self.token = token
        self._user: CurrentUser | None = None
        self._resolved = False

    async def resolve(self) -> CurrentUser | None:
        if not self._resolved:
            self._user = await asyncio.to_thread(fetch_current_user, self.token)
            self._resolved = True
        return self._user

    def invalidate(self) -> None:
        self._resolved = False
        self._user = None


# --- Auth router ---

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/status")
async def auth_status(request: Request) -> StatusResponse:
    """Check whether the caller's session resolves to a user."""
    user = await IdentityProvider(token_from_request(request)).resolve()
    if user is None:
        return StatusResponse(authenticated=False, message="Not signed in")
    return StatusResponse(authenticated=True, user_id=user.id, message=f"Signed in as {user.email or user.id}")
