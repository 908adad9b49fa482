import pytest

from budget_core.domain.months import (
    MonthFormatError,
    add_months,
    compare_months,
    is_month_in_range,
    month_range,
    months_between,
    months_for_year,
)


def test_add_months_rolls_over_years():
    assert add_months("2025-01", 3) == "2025-04"
    assert add_months("2025-11", 3) == "2026-02"
    assert add_months("2025-02", -3) == "2024-11"
    assert add_months("2025-06", 0) == "2025-06"
    assert add_months("2025-01", 24) == "2027-01"


def test_add_months_round_trip_for_large_offsets():
    for n in (-5000, -13, -1, 1, 12, 1199, 100000):
        assert add_months(add_months("2025-07", n), -n) == "2025-07"


def test_months_between_is_antisymmetric():
    assert months_between("2024-10", "2025-03") == 5
    assert months_between("2025-06", "2025-01") == -5
    assert months_between("2025-05", "2025-05") == 0


def test_month_range_inclusive_across_year_boundary():
    assert month_range("2024-11", "2025-02") == ["2024-11", "2024-12", "2025-01", "2025-02"]
    assert month_range("2025-03", "2025-03") == ["2025-03"]
    assert len(month_range("2023-04", "2025-09")) == months_between("2023-04", "2025-09") + 1


def test_month_range_rejects_reversed_bounds():
    with pytest.raises(ValueError):
        month_range("2025-05", "2025-01")


def test_compare_and_range_membership():
    assert compare_months("2025-01", "2025-02") < 0
    assert compare_months("2025-02", "2025-02") == 0
    assert compare_months("2026-01", "2025-12") > 0
    assert is_month_in_range("2025-06")
    assert is_month_in_range("2025-06", "2025-06", "2025-06")
    assert not is_month_in_range("2025-05", start="2025-06")
    assert not is_month_in_range("2025-07", end="2025-06")


def test_months_for_year():
    months = months_for_year(2025)
    assert months[0] == "2025-01" and months[-1] == "2025-12" and len(months) == 12


@pytest.mark.parametrize("token", ["2025-1", "2025-13", "2025-00", "25-01", "2025/01", ""])
def test_malformed_tokens_fail_fast(token):
    with pytest.raises(MonthFormatError):
        add_months(token, 1)
