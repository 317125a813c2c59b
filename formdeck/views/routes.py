"""Client-side navigation targets for the dashboard."""

from formdeck.models.forms import Form

ROOT_PATH = "/"
DASHBOARD_PATH = "/dashboard"


def edit_path(form_id: str) -> str:
    return f"/dashboard/forms/{form_id}"


def responses_path(form_id: str) -> str:
    return f"/dashboard/forms/{form_id}/responses"


def public_path(form: Form) -> str:
    """Public page for respondents; the custom slug wins over the id when set."""
    return f"/forms/{form.custom_slug or form.id}"
