from datetime import date

import pytest

from clearview.utils.amount import parse_amount, within_tolerance
from clearview.utils.logging_utils import Timer, bind_context, env_log_level
from clearview.utils.time import coerce_timestamp, days_between, format_record_date, years_before

from conftest import DAY, T0


@pytest.mark.parametrize(
    "raw, expected",
    [
        (T0, T0),
        (T0 * 1000, T0),
        (str(T0 * 1000), T0),
        (float(T0) + 0.7, T0),
        ("not a date", 0),
        (None, 0),
        (True, 0),
        (float("nan"), 0),
        ({"ts": T0}, 0),
    ],
)
def test_coerce_timestamp(raw, expected):
    assert coerce_timestamp(raw) == expected


def test_format_record_date_uses_county_time():
    assert format_record_date(T0) == "07/13/2017"
    assert format_record_date(0) == ""


def test_years_before_handles_leap_day():
    assert years_before(date(2025, 3, 1), 30) == date(1995, 3, 1)
    assert years_before(date(2024, 2, 29), 1) == date(2023, 2, 28)


def test_days_between_is_fractional():
    assert days_between(T0 + DAY + DAY // 2, T0) == 1.5


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("$150,000", 150000.0),
        ("150000.00", 150000.0),
        ("1,250 Dollars", 1250.0),
        (99, 99.0),
        ("", None),
        ("N/A", None),
        (None, None),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_within_tolerance_is_strict():
    assert within_tolerance(200_500, 200_000, 0.01) is True
    assert within_tolerance(202_000, 200_000, 0.01) is False
    assert within_tolerance(100, 0, 0.01) is False


def test_env_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert env_log_level() == "DEBUG"
    monkeypatch.delenv("LOG_LEVEL")
    assert env_log_level("WARNING") == "WARNING"


def test_bind_context_drops_none():
    log = bind_context(owner="SMITH JOHN", years_back=None)
    log.info("bound")


def test_timer_measures_elapsed():
    with Timer() as timer:
        pass
    assert timer.elapsed_ms >= 0
