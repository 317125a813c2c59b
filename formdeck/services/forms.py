import logging

import requests
from pydantic import ValidationError

from formdeck.config import get_settings
from formdeck.exceptions import AuthenticationError, IntegrationError, NotFoundError, RateLimitError
from formdeck.http_client import get_session
from formdeck.models.forms import EnrichedResponse, Form, FormWithStats

logger = logging.getLogger(__name__)


def _url(path: str) -> str:
    return get_settings().api_base_url.rstrip("/") + path


def _headers(token: str | None) -> dict:
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _request(method: str, path: str, token: str | None, **kwargs) -> requests.Response:
    try:
        return get_session().request(
            method,
            _url(path),
            headers=_headers(token),
            timeout=get_settings().request_timeout,
            **kwargs,
        )
    except requests.RequestException as e:
        logger.warning("Forms backend unreachable: %s %s: %s", method, path, e)
        raise IntegrationError(f"Forms backend unreachable: {e}") from e


def _handle_response(resp: requests.Response):
    if resp.status_code == 429:
        raise RateLimitError("Forms backend rate limit exceeded. Try again shortly.")
    if resp.status_code in (401, 403):
        raise AuthenticationError("Session expired or not authorized. Sign in again.")
    if resp.status_code == 404:
        raise NotFoundError("Form not found.")
    if not resp.ok:
        logger.warning("Forms backend error %s for %s", resp.status_code, resp.url)
        raise IntegrationError(f"Forms backend error: HTTP {resp.status_code}")
    try:
        return resp.json()
    except ValueError as e:
        raise IntegrationError("Forms backend returned a non-JSON body") from e


def _parse(model, data):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise IntegrationError(f"Unexpected payload from forms backend: {e}") from e


def list_forms(token: str | None = None) -> list[FormWithStats]:
    """List the current user's forms."""
    data = _handle_response(_request("GET", "/api/forms", token))
    if not isinstance(data, list):
        raise IntegrationError("Forms backend returned an unexpected form list")
    return [_parse(FormWithStats, item) for item in data]


def create_form(template: str, token: str | None = None) -> Form:
    """Create a form from a template. Returns the new form, which always carries an id."""
    data = _handle_response(_request("POST", "/api/forms", token, json={"template": template}))
    if not isinstance(data, dict) or not data.get("id"):
        raise IntegrationError("Forms backend did not return the new form's id")
    form = _parse(Form, data)
    logger.info("Created form %s from template %r", form.id, template)
    return form


def get_form(form_id: str, token: str | None = None) -> Form:
    """Get a form with its elements."""
    data = _handle_response(_request("GET", f"/api/forms/{form_id}", token))
    return _parse(Form, data)


def list_responses(form_id: str, token: str | None = None) -> list[EnrichedResponse]:
    """List a form's responses, newest first."""
    data = _handle_response(_request("GET", f"/api/forms/{form_id}/responses", token))
    if not isinstance(data, list):
        raise IntegrationError("Forms backend returned an unexpected response list")
    responses = [_parse(EnrichedResponse, item) for item in data]
    responses.sort(key=lambda r: r.submitted_at, reverse=True)
    return responses


def get_me(token: str) -> dict:
    """Profile of the user who owns the session token."""
    return _handle_response(_request("GET", "/api/me", token))
