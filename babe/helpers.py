from __future__ import annotations

import datetime as dt
import re

DATE_INPUT_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
DEFAULT_DATE_FORMAT = "%B %d, %Y"


def coerce_date(value: object) -> dt.date | None:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        return None
    match = DATE_INPUT_RE.search(value)
    if not match:
        return None
    try:
        return dt.date.fromisoformat(match.group(0))
    except ValueError:
        return None


def format_date(this: object, value: object = None, format: str = DEFAULT_DATE_FORMAT) -> str:
    date_value = coerce_date(value)
    if date_value is None:
        return "{invalid_date_input}"
    return date_value.strftime(format)


def today(this: object, format: str = "") -> str:
    if not format:
        return "{invalid_date_format}"
    return dt.date.today().strftime(format)


def when(this: object, options: dict, **hash: object) -> object:
    data = hash.get("data")
    if "is" in hash and hash["is"] and data == hash["is"]:
        return options["fn"](this)
    if "isnt" in hash and hash["isnt"] and data != hash["isnt"]:
        return options["fn"](this)
    inverse = options.get("inverse")
    return (inverse(this) if inverse else None) or ""


HELPERS = {
    "format_date": format_date,
    "today": today,
    "when": when,
}
