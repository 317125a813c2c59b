from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, AliasPath, BaseModel, ConfigDict, Field, field_validator


class FormElementType(str, Enum):
    WELCOME_SCREEN = "WELCOME_SCREEN"
    END_SCREEN = "END_SCREEN"
    STATEMENT = "STATEMENT"
    TEXT = "TEXT"
    LONG_TEXT = "LONG_TEXT"
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    NUMBER = "NUMBER"
    WEBSITE = "WEBSITE"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    CHECKBOXES = "CHECKBOXES"
    DROPDOWN = "DROPDOWN"
    YES_NO = "YES_NO"
    RATING = "RATING"
    DATE = "DATE"
    FILE_UPLOAD = "FILE_UPLOAD"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.strip().upper().replace("-", "_").replace(" ", "_")
            for member in cls:
                if member.value == normalized:
                    return member
        return cls.UNKNOWN


# Elements that only present content and never hold an answer
PRESENTATIONAL_TYPES = frozenset({
    FormElementType.WELCOME_SCREEN,
    FormElementType.END_SCREEN,
    FormElementType.STATEMENT,
})


class _BackendModel(BaseModel):
    """Base for payloads exchanged with the forms backend (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True)


class ChoiceOption(_BackendModel):
    id: str
    label: str


class FormElement(_BackendModel):
    id: str
    type: FormElementType = FormElementType.UNKNOWN
    question: str = ""
    required: bool = False
    options: list[ChoiceOption] = []
    properties: dict[str, Any] = {}

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value):
        if isinstance(value, FormElementType):
            return value
        return FormElementType(value)

    @field_validator("options", mode="before")
    @classmethod
    def _coerce_options(cls, value):
        # Plain string options use the label as their id
        if not value:
            return []
        return [{"id": opt, "label": opt} if isinstance(opt, str) else opt for opt in value]

    @property
    def is_presentational(self) -> bool:
        return self.type in PRESENTATIONAL_TYPES


class Form(_BackendModel):
    id: str
    title: str = ""
    created_at: datetime | None = Field(default=None, alias="createdAt")
    custom_slug: str | None = Field(default=None, alias="customSlug")
    elements: list[FormElement] = []


class FormWithStats(Form):
    response_count: int | None = Field(
        default=None,
        validation_alias=AliasChoices("response_count", "responseCount", AliasPath("_count", "responses")),
    )


class EnrichedResponse(_BackendModel):
    id: str
    submitted_at: datetime = Field(alias="submittedAt")
    answers: dict[str, Any] = {}

    @field_validator("answers", mode="before")
    @classmethod
    def _coerce_answers(cls, value):
        # Missing or malformed answer data renders as empty cells
        return value if isinstance(value, dict) else {}


class CreateFormRequest(BaseModel):
    template: str


class FormTemplate(BaseModel):
    icon: str
    description: str


TEMPLATES = [
    FormTemplate(icon="✍️", description="Custom"),
    FormTemplate(icon="🤠", description="DAO Membership Application Form"),
    FormTemplate(icon="🧩", description="Product Feedback Form"),
    FormTemplate(icon="🤝", description="Booth Survey"),
]

TEMPLATE_NAMES = frozenset(t.description for t in TEMPLATES)
