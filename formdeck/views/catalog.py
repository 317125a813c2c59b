"""Dashboard listing: the user's forms as cards plus the template picker.

One FormCatalogView lives for one page view. Network calls run in a worker
thread so several actions can be awaited concurrently on one event loop.
"""

import asyncio
import logging
from enum import Enum

import requests
from pydantic import BaseModel

from formdeck.exceptions import FormdeckError
from formdeck.formatting import format_date
from formdeck.models.forms import TEMPLATES, FormTemplate, FormWithStats
from formdeck.notifications import Notification
from formdeck.views.context import ViewContext
from formdeck.views.routes import ROOT_PATH, edit_path, public_path, responses_path

logger = logging.getLogger(__name__)

# Failures an action converts into a toast instead of propagating
ACTION_ERRORS = (FormdeckError, requests.RequestException)


class CatalogPhase(str, Enum):
    IDLE = "idle"
    LOADING_IDENTITY = "loading_identity"
    LOADING_FORMS = "loading_forms"
    READY = "ready"


class NavLink(BaseModel):
    label: str
    href: str


class FormCard(BaseModel):
    id: str
    title: str
    created_label: str
    response_count: int | None = None
    links: list[NavLink]


class EmptyState(BaseModel):
    title: str = "No forms yet"
    description: str = "Create your first form to get started"
    action_label: str = "Create Form"
    action_disabled: bool = False


class CreateButton(BaseModel):
    label: str
    disabled: bool


class TemplateModal(BaseModel):
    open: bool
    title: str = "Select a Template"
    templates: list[FormTemplate] = TEMPLATES


class CatalogPage(BaseModel):
    loading: bool = False
    heading: str = "My Forms"
    create_button: CreateButton | None = None
    cards: list[FormCard] = []
    empty_state: EmptyState | None = None
    modal: TemplateModal | None = None
    notifications: list[Notification] = []


def build_card(form: FormWithStats) -> FormCard:
    return FormCard(
        id=form.id,
        title=form.title,
        created_label=f"Created on {format_date(form.created_at)}",
        response_count=form.response_count,
        links=[
            NavLink(label="Edit", href=edit_path(form.id)),
            NavLink(label="Responses", href=responses_path(form.id)),
            NavLink(label="View", href=public_path(form)),
        ],
    )


class FormCatalogView:
    def __init__(self, context: ViewContext, client):
        """`client` provides list_forms(token) and create_form(template, token), e.g. formdeck.services.forms."""
        self.context = context
        self.client = client
        self.phase = CatalogPhase.IDLE
        self.user = None
        self.forms: list[FormWithStats] = []
        self.is_creating = False
        self.is_modal_open = False
        self._loaded_for: str | None = None
        self._identity_failed = False
        self._generation = 0
        self._mounted = False

    # --- lifecycle ---

    async def mount(self) -> None:
        self._mounted = True
        await self._load()

    def unmount(self) -> None:
        """Dispose the view; anything that settles afterwards is ignored."""
        self._mounted = False
        self._generation += 1

    async def identity_changed(self) -> None:
        # Loads still in flight belong to the previous identity
        self._generation += 1
        self.context.identity.invalidate()
        await self._load()

    def _is_current(self, generation: int) -> bool:
        return self._mounted and generation == self._generation

    async def _load(self) -> None:
        generation = self._generation
        self.phase = CatalogPhase.LOADING_IDENTITY
        try:
            user = await self.context.identity.resolve()
        except ACTION_ERRORS as e:
            if not self._is_current(generation):
                return
            logger.warning("Failed to resolve the current user: %s", e)
            self.user = None
            self.forms = []
            self._loaded_for = None
            self._identity_failed = True
            self.context.notifier.toast(
                "Error", "Failed to verify your session. Please try again.", variant="destructive",
            )
            self.phase = CatalogPhase.READY
            return
        if not self._is_current(generation):
            return
        self.user = user
        self._identity_failed = False

        if user is None:
            self.forms = []
            self._loaded_for = None
            self.phase = CatalogPhase.READY
            self.context.navigator.push(ROOT_PATH)
            return

        if self._loaded_for == user.id:
            self.phase = CatalogPhase.READY
            return

        self.phase = CatalogPhase.LOADING_FORMS
        try:
            forms = await asyncio.to_thread(self.client.list_forms, self.context.identity.token)
        except ACTION_ERRORS as e:
            if not self._is_current(generation):
                return
            logger.warning("Failed to load forms for user %s: %s", user.id, e)
            self.forms = []
            self.context.notifier.toast(
                "Error", "Failed to load forms. Please try again.", variant="destructive",
            )
        else:
            if not self._is_current(generation):
                return
            self.forms = forms
            self._loaded_for = user.id
        self.phase = CatalogPhase.READY

    # --- template modal ---

    def open_template_modal(self) -> None:
        if not self.is_creating:
            self.is_modal_open = True

    def close_template_modal(self) -> None:
        self.is_modal_open = False

    async def create_form(self, template: str) -> None:
        """Create a form from `template` and open its editor. At most one creation runs at a time."""
        if self.is_creating:
            return
        generation = self._generation
        self.is_creating = True
        try:
            form = await asyncio.to_thread(self.client.create_form, template, self.context.identity.token)
            if self._is_current(generation):
                self.context.navigator.push(edit_path(form.id))
        except ACTION_ERRORS as e:
            if self._is_current(generation):
                logger.warning("Failed to create form from template %r: %s", template, e)
                self.context.notifier.toast(
                    "Error", "Failed to create form. Please try again.", variant="destructive",
                )
        finally:
            self.is_creating = False
            self.is_modal_open = False

    # --- rendering ---

    def render(self) -> CatalogPage | None:
        if self.phase != CatalogPhase.READY:
            return CatalogPage(loading=True)
        if self.user is None and not self._identity_failed:
            return None
        cards = [build_card(form) for form in self.forms]
        return CatalogPage(
            create_button=CreateButton(
                label="Creating..." if self.is_creating else "Create New Form",
                disabled=self.is_creating,
            ),
            cards=cards,
            empty_state=None if cards else EmptyState(action_disabled=self.is_creating),
            modal=TemplateModal(open=self.is_modal_open),
            notifications=self.context.notifier.pending,
        )
