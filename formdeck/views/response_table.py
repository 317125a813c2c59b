"""Response table: one row per submission, one column per answerable element."""

from datetime import datetime

from pydantic import BaseModel, computed_field

from formdeck.formatting import format_distance_to_now, format_response_value
from formdeck.models.forms import EnrichedResponse, Form, FormElement

SUBMITTED_HEADER = "Submitted"
EMPTY_MESSAGE = "No responses yet"


class HeaderCell(BaseModel):
    element_id: str | None = None
    label: str


class TableRow(BaseModel):
    response_id: str
    submitted: str
    cells: list[str]


class EmptyRow(BaseModel):
    message: str = EMPTY_MESSAGE
    colspan: int


class ResponseTable(BaseModel):
    form_id: str
    title: str
    headers: list[HeaderCell]
    rows: list[TableRow]
    empty_row: EmptyRow | None = None

    @computed_field
    @property
    def column_count(self) -> int:
        return len(self.headers)


def displayable_elements(form: Form) -> list[FormElement]:
    """Elements that can hold an answer, in display order."""
    return [el for el in form.elements if not el.is_presentational]


def render_response_table(
    form: Form,
    responses: list[EnrichedResponse],
    now: datetime | None = None,
) -> ResponseTable:
    """Render responses in the order given.

    Answers keyed by an element id the form no longer has are never shown.
    """
    columns = displayable_elements(form)
    headers = [HeaderCell(label=SUBMITTED_HEADER)]
    headers += [HeaderCell(element_id=el.id, label=el.question) for el in columns]

    rows = [
        TableRow(
            response_id=response.id,
            submitted=format_distance_to_now(response.submitted_at, now),
            cells=[format_response_value(el, response.answers.get(el.id)) for el in columns],
        )
        for response in responses
    ]
    empty_row = None if rows else EmptyRow(colspan=len(columns) + 1)
    return ResponseTable(form_id=form.id, title=form.title, headers=headers, rows=rows, empty_row=empty_row)
