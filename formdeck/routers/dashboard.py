import asyncio

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import RedirectResponse

from formdeck.auth import IdentityProvider, token_from_request
from formdeck.models.forms import TEMPLATE_NAMES, TEMPLATES, CreateFormRequest, FormTemplate
from formdeck.services import forms as forms_service
from formdeck.views.catalog import CatalogPage, FormCatalogView
from formdeck.views.context import ViewContext
from formdeck.views.response_table import ResponseTable, render_response_table
from formdeck.views.routes import ROOT_PATH

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _context(request: Request) -> ViewContext:
    return ViewContext(identity=IdentityProvider(token_from_request(request)))


def _redirect_home() -> RedirectResponse:
    return RedirectResponse(ROOT_PATH, status_code=307)


@router.get("", response_model=CatalogPage)
async def dashboard(request: Request):
    view = FormCatalogView(_context(request), forms_service)
    await view.mount()
    try:
        page = view.render()
    finally:
        view.unmount()
    if page is None:
        return _redirect_home()
    return page


@router.get("/templates")
def list_templates() -> list[FormTemplate]:
    return TEMPLATES


@router.post("/forms", response_model=CatalogPage)
async def create_form(body: CreateFormRequest, request: Request):
    """Create a form from a template and redirect to its editor; on failure the page carries the error toast."""
    if body.template not in TEMPLATE_NAMES:
        raise HTTPException(status_code=422, detail=f"Unknown template: {body.template}")
    context = _context(request)
    view = FormCatalogView(context, forms_service)
    await view.mount()
    try:
        page = view.render()
        if page is None:
            return _redirect_home()
        if view.user is None:
            return page
        view.open_template_modal()
        await view.create_form(body.template)
        if context.navigator.location not in (None, ROOT_PATH):
            return RedirectResponse(context.navigator.location, status_code=303)
        return view.render()
    finally:
        view.unmount()


@router.get("/forms/{form_id}/responses", response_model=ResponseTable)
async def form_responses(form_id: str, request: Request):
    identity = IdentityProvider(token_from_request(request))
    if await identity.resolve() is None:
        return _redirect_home()
    form, responses = await asyncio.gather(
        asyncio.to_thread(forms_service.get_form, form_id, identity.token),
        asyncio.to_thread(forms_service.list_responses, form_id, identity.token),
    )
    return render_response_table(form, responses)
