import datetime as dt

from babe.helpers import HELPERS, format_date, today, when


def _options(this_log: list) -> dict:
    def fn(this):
        this_log.append(this)
        return "yes"

    return {"fn": fn, "inverse": lambda this: "no"}


def test_format_date_accepts_dates_and_iso_strings():
    assert format_date(None, dt.date(2021, 5, 1)) == "May 01, 2021"
    assert format_date(None, "2021-05-01") == "May 01, 2021"
    assert format_date(None, dt.datetime(2021, 5, 1, 12, 30), format="%Y/%m") == "2021/05"


def test_format_date_rejects_invalid_input():
    assert format_date(None, None) == "{invalid_date_input}"
    assert format_date(None, "yesterday") == "{invalid_date_input}"
    assert format_date(None, "2021-02-31") == "{invalid_date_input}"


def test_today_formats_current_date():
    assert today(None, "%Y") == str(dt.date.today().year)
    assert today(None) == "{invalid_date_format}"


def test_when_equality_and_inequality():
    calls: list = []

    assert when("ctx", _options(calls), data="blog", **{"is": "blog"}) == "yes"
    assert when("ctx", _options(calls), data="blog", **{"is": "news"}) == "no"
    assert when("ctx", _options(calls), data="blog", isnt="news") == "yes"
    assert when("ctx", _options(calls), data="blog", isnt="blog") == "no"
    assert calls == ["ctx", "ctx"]


def test_when_without_inverse_renders_nothing():
    assert when(None, {"fn": lambda this: "yes"}, data="a", **{"is": "b"}) == ""


def test_helper_registry():
    assert sorted(HELPERS) == ["format_date", "today", "when"]
