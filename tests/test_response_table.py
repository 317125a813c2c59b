from datetime import timedelta

from formdeck.models.forms import EnrichedResponse, FormElementType
from formdeck.views.response_table import displayable_elements, render_response_table
from conftest import NOW, make_form

T = FormElementType


def _response(rid, answers, ago=timedelta(days=3)):
    return EnrichedResponse(id=rid, submitted_at=NOW - ago, answers=answers)


class TestDisplayableElements:
    def test_drops_presentational_elements_in_order(self):
        form = make_form(
            ("w1", T.WELCOME_SCREEN, "Hi"),
            ("q1", T.TEXT, "Name?"),
            ("s1", T.STATEMENT, "Note"),
            ("q2", T.RATING, "Score?"),
            ("e1", T.END_SCREEN, "Bye"),
            ("q3", T.EMAIL, "Email?"),
        )
        assert [el.id for el in displayable_elements(form)] == ["q1", "q2", "q3"]

    def test_does_not_mutate_form(self):
        form = make_form(("s1", T.STATEMENT, "Note"), ("q1", T.TEXT, "Name?"))
        displayable_elements(form)
        assert [el.id for el in form.elements] == ["s1", "q1"]


class TestRenderResponseTable:
    def test_name_and_statement_scenario(self):
        form = make_form(("q1", T.TEXT, "Name?"), ("s1", T.STATEMENT, "Thanks!"))
        table = render_response_table(form, [_response("r1", {"q1": "Ana"})], now=NOW)
        assert [h.label for h in table.headers] == ["Submitted", "Name?"]
        assert len(table.rows) == 1
        row = table.rows[0]
        assert [row.submitted, *row.cells] == ["3 days ago", "Ana"]
        assert table.empty_row is None

    def test_rows_keep_caller_order(self):
        form = make_form(("q1", T.TEXT, "Name?"))
        responses = [
            _response("old", {"q1": "A"}, ago=timedelta(days=9)),
            _response("new", {"q1": "B"}, ago=timedelta(minutes=5)),
        ]
        table = render_response_table(form, responses, now=NOW)
        assert [r.response_id for r in table.rows] == ["old", "new"]
        assert table.rows[1].submitted == "5 minutes ago"

    def test_missing_answer_renders_empty_cell(self):
        form = make_form(("q1", T.TEXT, "Name?"), ("q2", T.NUMBER, "Age?"))
        table = render_response_table(form, [_response("r1", {"q1": "Ana"})], now=NOW)
        assert table.rows[0].cells == ["Ana", ""]

    def test_answers_for_unknown_elements_are_dropped(self):
        form = make_form(("q1", T.TEXT, "Name?"))
        table = render_response_table(form, [_response("r1", {"q1": "Ana", "gone": "stale"})], now=NOW)
        assert table.rows[0].cells == ["Ana"]

    def test_empty_responses_yield_one_spanning_row(self):
        form = make_form(("q1", T.TEXT, "Name?"), ("s1", T.STATEMENT, "x"), ("q2", T.TEXT, "City?"))
        table = render_response_table(form, [], now=NOW)
        assert table.rows == []
        assert table.empty_row.message == "No responses yet"
        assert table.empty_row.colspan == 3

    def test_form_without_elements_has_only_timestamp_column(self):
        form = make_form()
        table = render_response_table(form, [_response("r1", {"q1": "x"})], now=NOW)
        assert [h.label for h in table.headers] == ["Submitted"]
        assert table.column_count == 1
        assert table.rows[0].cells == []

    def test_serializes_column_count(self):
        form = make_form(("q1", T.TEXT, "Name?"))
        data = render_response_table(form, [], now=NOW).model_dump()
        assert data["column_count"] == 2
        assert data["empty_row"]["colspan"] == 2
