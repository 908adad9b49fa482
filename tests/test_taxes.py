import pytest

from budget_core.services.taxes import federal_tax, fica, household_take_home


def test_federal_tax_brackets():
    assert federal_tax(0) == 0
    assert federal_tax(23_200) == pytest.approx(2320)
    assert federal_tax(70_800) == pytest.approx(8032)


def test_fica_caps_social_security():
    ss, medicare = fica(200_000, 200_000)
    assert ss == pytest.approx(168_600 * 0.062)
    assert medicare == pytest.approx(200_000 * 0.0145)


def test_additional_medicare_above_threshold():
    _, medicare = fica(300_000, 300_000)
    assert medicare == pytest.approx(300_000 * 0.0145 + 50_000 * 0.009)


def test_single_earner_household():
    result = household_take_home(100_000, 0)
    assert result.earner1.total_tax == 15_682
    assert result.earner1.net_annual == 84_318
    assert result.earner2.total_tax == 0
    assert result.earner2.effective_rate == 0
    assert result.net_annual == 84_318
    assert result.effective_rate == pytest.approx(0.15682)


def test_pre_tax_reduces_take_home():
    base = household_take_home(80_000, 40_000)
    with_401k = household_take_home(80_000, 40_000, earner1_pre_tax=5000)
    assert with_401k.net_annual == base.net_annual - 5000


def test_zero_household_income_is_rejected():
    with pytest.raises(ValueError):
        household_take_home(0, 0)
