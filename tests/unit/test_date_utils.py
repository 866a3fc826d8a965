"""Unit tests for payment-frequency date arithmetic"""

import pytest
from datetime import date
from capital_ledger.domain.exceptions import ValidationError
from capital_ledger.utils.date_utils import add_months, advance_date, days_to_years


@pytest.mark.parametrize(
    "frequency,expected",
    [
        ("weekly", date(2024, 1, 22)),
        ("biweekly", date(2024, 1, 29)),
        ("monthly", date(2024, 2, 15)),
        ("quarterly", date(2024, 4, 15)),
        ("annually", date(2025, 1, 15)),
    ],
)
def test_advance_date_by_frequency(frequency, expected):
    assert advance_date(date(2024, 1, 15), frequency) == expected


def test_advance_date_crosses_year_end():
    assert advance_date(date(2023, 12, 28), "weekly") == date(2024, 1, 4)
    assert advance_date(date(2023, 12, 15), "monthly") == date(2024, 1, 15)


def test_add_months_clamps_to_month_end():
    """Jan 31 + 1 month lands on the last day of February, never in March"""
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)
    assert add_months(date(2024, 2, 29), 12) == date(2025, 2, 28)


def test_add_months_term_end_date():
    assert add_months(date(2024, 1, 15), 12) == date(2025, 1, 15)
    assert add_months(date(2024, 3, 31), 18) == date(2025, 9, 30)


def test_advance_date_unknown_frequency():
    with pytest.raises(ValidationError):
        advance_date(date(2024, 1, 15), "daily")


def test_days_to_years_actual_365():
    assert days_to_years(365) == 1.0
    assert days_to_years(366) == pytest.approx(1.0027, abs=1e-4)
