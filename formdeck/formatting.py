"""Display formatting for answers, submission times, and creation dates."""

import json
import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Callable

from formdeck.models.forms import FormElement, FormElementType

logger = logging.getLogger(__name__)

LIST_SEPARATOR = ", "
UNKNOWN_DATE = "Unknown date"
DEFAULT_RATING_MAX = 5


# --- Answer values ---

def _is_absent(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def _stringify(value: Any) -> str:
    """Generic rendering used for text-like answers and as the safe fallback."""
    if _is_absent(value):
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple, set)):
        return LIST_SEPARATOR.join(s for s in (_stringify(v) for v in value) if s)
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"), sort_keys=True, default=str)
    return str(value)


def _format_yes_no(element: FormElement, value: Any) -> str:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "y", "1"):
            return "Yes"
        if lowered in ("false", "no", "n", "0"):
            return "No"
        return value
    return "Yes" if value else "No"


def _option_label(element: FormElement, value: Any) -> str:
    for option in element.options:
        if option.id == value or option.label == value:
            return option.label
    return _stringify(value)


def _format_choice(element: FormElement, value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return LIST_SEPARATOR.join(_option_label(element, v) for v in value if not _is_absent(v))
    return _option_label(element, value)


def _format_rating(element: FormElement, value: Any) -> str:
    maximum = element.properties.get("max") or DEFAULT_RATING_MAX
    return f"{_stringify(value)}/{maximum}"


def _format_number(element: FormElement, value: Any) -> str:
    if isinstance(value, str):
        value = float(value)
    return _stringify(value)


def _format_date_answer(element: FormElement, value: Any) -> str:
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return format_date(value)


def _format_file(element: FormElement, value: Any) -> str:
    if isinstance(value, dict):
        return str(value.get("name") or value.get("url") or "")
    if isinstance(value, (list, tuple)):
        return LIST_SEPARATOR.join(_format_file(element, v) for v in value)
    return _stringify(value)


def _format_text(element: FormElement, value: Any) -> str:
    return _stringify(value)


def _format_nothing(element: FormElement, value: Any) -> str:
    return ""


_FORMATTERS: dict[FormElementType, Callable[[FormElement, Any], str]] = {
    FormElementType.WELCOME_SCREEN: _format_nothing,
    FormElementType.END_SCREEN: _format_nothing,
    FormElementType.STATEMENT: _format_nothing,
    FormElementType.TEXT: _format_text,
    FormElementType.LONG_TEXT: _format_text,
    FormElementType.EMAIL: _format_text,
    FormElementType.PHONE: _format_text,
    FormElementType.WEBSITE: _format_text,
    FormElementType.NUMBER: _format_number,
    FormElementType.MULTIPLE_CHOICE: _format_choice,
    FormElementType.CHECKBOXES: _format_choice,
    FormElementType.DROPDOWN: _format_choice,
    FormElementType.YES_NO: _format_yes_no,
    FormElementType.RATING: _format_rating,
    FormElementType.DATE: _format_date_answer,
    FormElementType.FILE_UPLOAD: _format_file,
    FormElementType.UNKNOWN: _format_text,
}


def format_response_value(element: FormElement, value: Any) -> str:
    """Render one answer for display. Never raises; bad data degrades to plain text or ""."""
    if _is_absent(value):
        return ""
    formatter = _FORMATTERS.get(element.type, _format_text)
    try:
        return formatter(element, value)
    except Exception as e:
        logger.debug("Falling back to plain rendering for element %s: %s", element.id, e)
        try:
            return _stringify(value)
        except Exception:
            return ""


# --- Dates ---

def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def format_date(value: date | datetime | None) -> str:
    """Short locale date (M/D/YYYY), or "Unknown date" when there is none."""
    if value is None:
        return UNKNOWN_DATE
    return f"{value.month}/{value.day}/{value.year}"


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


def _difference_in_months(later: datetime, earlier: datetime) -> int:
    months = (later.year - earlier.year) * 12 + (later.month - earlier.month)
    # A month only counts once its day and time have been reached again
    if (later.day, later.time()) < (earlier.day, earlier.time()):
        months -= 1
    return max(months, 0)


def _distance_words(later: datetime, earlier: datetime) -> str:
    seconds = int((later - earlier).total_seconds())
    minutes = _round_half_up(seconds / 60)

    if minutes < 2:
        return "less than a minute" if minutes == 0 else "1 minute"
    if minutes < 45:
        return _plural(minutes, "minute")
    if minutes < 90:
        return "about 1 hour"
    if minutes < 1440:
        return "about " + _plural(_round_half_up(minutes / 60), "hour")
    if minutes < 2520:
        return "1 day"
    if minutes < 43200:
        return _plural(_round_half_up(minutes / 1440), "day")
    if minutes < 86400:
        return "about " + _plural(_round_half_up(minutes / 43200), "month")

    months = _difference_in_months(later, earlier)
    if months < 12:
        return _plural(_round_half_up(minutes / 43200), "month")

    years, remainder = divmod(months, 12)
    if remainder < 3:
        return "about " + _plural(years, "year")
    if remainder < 9:
        return "over " + _plural(years, "year")
    return "almost " + _plural(years + 1, "year")


def format_distance_to_now(moment: datetime, now: datetime | None = None) -> str:
    """Relative phrase such as "3 days ago" or "in about 1 hour".

    `now` defaults to the current time on every call, so the phrase is never cached.
    """
    moment = _as_utc(moment)
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    if moment <= now:
        return f"{_distance_words(now, moment)} ago"
    return f"in {_distance_words(moment, now)}"
