import math

import pytest

from retirement_planner.engine.tax import (
    bracket_threshold,
    calculate_capital_gains_tax,
    calculate_income_tax,
    calculate_pension_tax_relief,
    calculate_total_tax,
    effective_personal_allowance,
    get_effective_tax_rate,
    get_marginal_tax_rate,
    tax_bands,
)


@pytest.mark.parametrize(
    "income, expected",
    [
        (0, 0.0),
        (-500, 0.0),
        (12_570, 0.0),
        (20_000, 1_486.0),
        (50_270, 7_540.0),
        (60_000, 11_432.0),
        (100_000, 27_432.0),
        # Allowance fully tapered: every band above it shifts down by 12,570.
        (125_140, 43_144.5),
    ],
)
def test_income_tax_standard_bands(income, expected):
    assert calculate_income_tax(income).tax == pytest.approx(expected)


def test_income_tax_scottish_bands():
    result = calculate_income_tax(30_000, is_scottish=True)

    assert result.tax == pytest.approx(438.14 + 2_337.0 + 722.19)
    assert [charge.band for charge in result.breakdown] == [
        "Personal Allowance",
        "Starter Rate",
        "Basic Rate",
        "Intermediate Rate",
    ]


def test_non_positive_income_has_empty_breakdown():
    result = calculate_income_tax(0)

    assert result.tax == 0
    assert result.breakdown == []


@pytest.mark.parametrize("is_scottish", [False, True])
@pytest.mark.parametrize("income", [1.0, 9_000.0, 12_570.0, 45_000.0, 99_999.0, 110_001.0, 125_140.0, 250_000.0])
def test_breakdown_amounts_cover_income(income, is_scottish):
    result = calculate_income_tax(income, is_scottish)

    assert sum(charge.amount for charge in result.breakdown) == pytest.approx(income)
    assert sum(charge.tax for charge in result.breakdown) == pytest.approx(result.tax)
    assert all(charge.amount > 0 for charge in result.breakdown)


@pytest.mark.parametrize("is_scottish", [False, True])
def test_income_tax_is_monotonic(is_scottish):
    previous = 0.0
    for income in range(0, 200_001, 250):
        tax = calculate_income_tax(income, is_scottish).tax
        assert tax >= previous - 1e-9
        previous = tax


def test_personal_allowance_taper_boundaries():
    assert effective_personal_allowance(100_000) == 12_570
    assert effective_personal_allowance(110_000) == 7_570
    assert effective_personal_allowance(100_000 + 2 * 12_570) == 0
    assert effective_personal_allowance(500_000) == 0


def test_inflation_factor_scales_thresholds():
    bands = tax_bands(False, 2.0)

    assert bands[1].min == 25_140
    assert bands[1].max == 100_540
    assert math.isinf(bands[-1].max)
    assert calculate_income_tax(100_540, inflation_factor=2.0).tax == pytest.approx(15_080.0)
    assert effective_personal_allowance(200_000, 2.0) == 25_140


def test_cgt_all_at_higher_rate_when_basic_band_used():
    assert calculate_capital_gains_tax(10_000, 60_000) == pytest.approx(1_400.0)


@pytest.mark.parametrize(
    "gains, other_income, expected",
    [
        (2_000, 0, 0.0),
        (3_000, 80_000, 0.0),
        (10_000, 20_000, 700.0),
        (20_000, 45_000, 527.0 + 2_346.0),
        (0, 60_000, 0.0),
    ],
)
def test_cgt_split_across_rates(gains, other_income, expected):
    assert calculate_capital_gains_tax(gains, other_income) == pytest.approx(expected)


def test_cgt_uses_scottish_basic_rate_limit():
    # 45,000 income leaves room under 50,270 but none under 43,662.
    assert calculate_capital_gains_tax(10_000, 45_000, is_scottish=True) == pytest.approx(1_400.0)
    assert calculate_capital_gains_tax(10_000, 45_000) == pytest.approx(527.0 + 346.0)


def test_total_tax_combines_income_and_gains():
    summary = calculate_total_tax(60_000, 10_000)

    assert summary.income_tax == pytest.approx(11_432.0)
    assert summary.capital_gains_tax == pytest.approx(1_400.0)
    assert summary.total_tax == pytest.approx(12_832.0)


@pytest.mark.parametrize(
    "income, is_scottish, expected",
    [
        (10_000, False, 0.0),
        (30_000, False, 0.20),
        (60_000, False, 0.40),
        (110_000, False, 0.60),
        (130_000, False, 0.45),
        (30_000, True, 0.21),
        (200_000, True, 0.48),
    ],
)
def test_marginal_rate(income, is_scottish, expected):
    assert get_marginal_tax_rate(income, is_scottish) == pytest.approx(expected)


def test_effective_rate_guards_zero_income():
    assert get_effective_tax_rate(0) == 0.0
    assert get_effective_tax_rate(50_270) == pytest.approx(7_540 / 50_270)


def test_bracket_thresholds():
    assert bracket_threshold("personal_allowance") == 12_570
    assert bracket_threshold("basic_rate") == 50_270
    assert bracket_threshold("basic_rate", is_scottish=True) == 43_662
    assert bracket_threshold("higher_rate", is_scottish=True) == 125_140
    assert math.isinf(bracket_threshold("no_limit", inflation_factor=1.5))
    assert bracket_threshold("basic_rate", inflation_factor=1.1) == 55_297


def test_pension_tax_relief():
    assert calculate_pension_tax_relief(800, 0.20) == pytest.approx(200.0)
    assert calculate_pension_tax_relief(800, 0.40) == pytest.approx(400.0)
