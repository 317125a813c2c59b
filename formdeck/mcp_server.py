from fastmcp import FastMCP

from formdeck.auth import IdentityProvider
from formdeck.config import get_settings
from formdeck.exceptions import AuthenticationError, IntegrationError, NotFoundError, RateLimitError
from formdeck.models.forms import TEMPLATE_NAMES
from formdeck.services import forms as forms_service
from formdeck.views.catalog import FormCatalogView
from formdeck.views.context import ViewContext
from formdeck.views.response_table import render_response_table

mcp = FastMCP("Formdeck")


def _handle_mcp_error(e: Exception) -> dict:
    """Convert exceptions to agent-friendly error dicts."""
    if isinstance(e, AuthenticationError):
        return {"error": "auth_error", "message": str(e), "action": "Set API_TOKEN in .env to a valid session token"}
    if isinstance(e, RateLimitError):
        return {"error": "rate_limit", "message": str(e), "action": "Wait a moment and retry"}
    if isinstance(e, NotFoundError):
        return {"error": "not_found", "message": str(e)}
    if isinstance(e, IntegrationError):
        return {"error": "integration_error", "message": str(e)}
    return {"error": "unknown_error", "message": str(e)}


def _service_token() -> str:
    token = get_settings().api_token
    if not token:
        raise AuthenticationError("API_TOKEN not configured. Set it in .env to use the dashboard tools.")
    return token


async def _run_catalog(template: str | None = None) -> dict:
    context = ViewContext(identity=IdentityProvider(_service_token()))
    view = FormCatalogView(context, forms_service)
    await view.mount()
    if view.render() is None:
        raise AuthenticationError("API_TOKEN is not accepted by the forms backend.")
    result = {}
    if template is not None and view.user is not None:
        await view.create_form(template)
        result["navigated_to"] = context.navigator.location
    page = view.render()
    view.unmount()
    result.update(page.model_dump())
    return result


# --- Dashboard tools ---

@mcp.tool
async def dashboard_forms() -> dict:
    """List the user's forms as dashboard cards with edit, responses, and public view links.
    Failed loads are reported in 'notifications' rather than raised."""
    try:
        return await _run_catalog()
    except (AuthenticationError, IntegrationError, RateLimitError) as e:
        return _handle_mcp_error(e)


@mcp.tool
async def dashboard_create_form(template: str) -> dict:
    """Create a new form from a template: 'Custom', 'DAO Membership Application Form',
    'Product Feedback Form', or 'Booth Survey'. Returns 'navigated_to' with the editor path on success."""
    if template not in TEMPLATE_NAMES:
        return {"error": "invalid_template", "message": f"Unknown template: {template}", "templates": sorted(TEMPLATE_NAMES)}
    try:
        return await _run_catalog(template)
    except (AuthenticationError, IntegrationError, RateLimitError) as e:
        return _handle_mcp_error(e)


@mcp.tool
def form_response_table(form_id: str) -> dict:
    """Get a form's responses as a table: one column per question, one row per submission, newest first.
    Each row starts with how long ago it was submitted."""
    try:
        token = _service_token()
        form = forms_service.get_form(form_id, token=token)
        responses = forms_service.list_responses(form_id, token=token)
        return render_response_table(form, responses).model_dump()
    except (AuthenticationError, IntegrationError, NotFoundError, RateLimitError) as e:
        return _handle_mcp_error(e)
