import datetime
from typing import Optional, Union

from app.exceptions import FormatError
from app.settings import settings

MONTH_ABBREVIATIONS = (
    "jan",
    "fev",
    "mar",
    "abr",
    "mai",
    "jun",
    "jul",
    "ago",
    "set",
    "out",
    "nov",
    "dez",
)

DateValue = Union[str, datetime.datetime, None]


def parse_timestamp(value: DateValue) -> datetime.datetime:
    """Parse a content store timestamp such as 2021-03-25T19:25:28+0000."""
    if isinstance(value, datetime.datetime):
        return value
    if not value or not isinstance(value, str):
        raise FormatError(f"Invalid publication date: {value!r}")

    for pattern in ("%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%dT%H:%M:%S.%f%z"):
        try:
            return datetime.datetime.strptime(value, pattern)
        except ValueError:
            continue
    try:
        return datetime.datetime.fromisoformat(value)
    except ValueError as e:
        raise FormatError(f"Invalid publication date: {value!r}") from e


def format_date(value: DateValue) -> str:
    """dd MMM yyyy, e.g. 25 mar 2021."""
    moment = parse_timestamp(value)
    return f"{moment.day:02d} {MONTH_ABBREVIATIONS[moment.month - 1]} {moment.year}"


def format_edited_at(value: DateValue) -> str:
    moment = parse_timestamp(value)
    # kk: hours run 1-24
    hour = moment.hour or 24
    return f"*editado em {format_date(moment)}, às {hour:02d}:{moment.minute:02d}"


def format_date_or_placeholder(
    value: DateValue, placeholder: Optional[str] = None
) -> str:
    try:
        return format_date(value)
    except FormatError:
        return settings.DATE_PLACEHOLDER if placeholder is None else placeholder


def format_edited_at_or_none(value: DateValue) -> Optional[str]:
    if value is None:
        return None
    try:
        return format_edited_at(value)
    except FormatError:
        return None
