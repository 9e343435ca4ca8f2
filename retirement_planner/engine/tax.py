"""Income tax and capital gains tax for UK taxpayers (standard or Scottish)."""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import List

from .constants import (
    BASIC_RATE_LIMIT,
    CGT_ANNUAL_EXEMPT_AMOUNT,
    CGT_BASIC_RATE,
    CGT_HIGHER_RATE,
    PENSION_RELIEF_BASIC_RATE,
    PERSONAL_ALLOWANCE,
    PERSONAL_ALLOWANCE_ELIMINATED_AT,
    PERSONAL_ALLOWANCE_TAPER_THRESHOLD,
    SCOTTISH_BASIC_RATE_LIMIT,
    SCOTTISH_TAX_BANDS,
    TAPER_ZONE_MARGINAL_RATE,
    TAX_BRACKET_THRESHOLDS,
    UK_TAX_BANDS,
    TaxBand,
)


@dataclass(frozen=True)
class BandCharge:
    band: str
    amount: float
    tax: float


@dataclass(frozen=True)
class IncomeTaxResult:
    tax: float
    breakdown: List[BandCharge] = field(default_factory=list)


@dataclass(frozen=True)
class TaxSummary:
    income_tax: float
    capital_gains_tax: float

    @property
    def total_tax(self) -> float:
        return self.income_tax + self.capital_gains_tax


def _scale(amount: float, inflation_factor: float) -> float:
    """Scale a threshold, rounding half up to whole pounds."""
    if math.isinf(amount) or inflation_factor == 1:
        return amount
    return float(math.floor(amount * inflation_factor + 0.5))


def tax_bands(is_scottish: bool = False, inflation_factor: float = 1.0) -> tuple[TaxBand, ...]:
    base = SCOTTISH_TAX_BANDS if is_scottish else UK_TAX_BANDS
    if inflation_factor == 1:
        return base
    return tuple(
        replace(band, min=_scale(band.min, inflation_factor), max=_scale(band.max, inflation_factor))
        for band in base
    )


def effective_personal_allowance(income: float, inflation_factor: float = 1.0) -> float:
    allowance = _scale(PERSONAL_ALLOWANCE, inflation_factor)
    threshold = _scale(PERSONAL_ALLOWANCE_TAPER_THRESHOLD, inflation_factor)
    if income <= threshold:
        return allowance
    reduction = math.floor((income - threshold) / 2)
    return max(0.0, allowance - reduction)


def calculate_income_tax(
    gross_income: float, is_scottish: bool = False, inflation_factor: float = 1.0
) -> IncomeTaxResult:
    """Progressive income tax with the personal allowance taper.

    A tapered allowance shrinks the zero-rate band and every band above it is
    shifted down by the same amount, so the starter band of the Scottish
    schedule keeps its width.
    """
    if gross_income <= 0:
        return IncomeTaxResult(0.0, [])

    bands = tax_bands(is_scottish, inflation_factor)
    standard_allowance = _scale(PERSONAL_ALLOWANCE, inflation_factor)
    allowance = effective_personal_allowance(gross_income, inflation_factor)
    shift = standard_allowance - allowance

    adjusted: list[TaxBand] = []
    for index, band in enumerate(bands):
        if index == 0:
            adjusted.append(replace(band, max=allowance))
            continue
        adjusted.append(
            replace(
                band,
                min=max(0.0, band.min - shift),
                max=band.max if math.isinf(band.max) else band.max - shift,
            )
        )

    remaining = gross_income
    total_tax = 0.0
    breakdown: List[BandCharge] = []
    for band in adjusted:
        if remaining <= 0:
            break
        if gross_income <= band.min:
            continue
        taxable_in_band = min(remaining, max(0.0, min(gross_income, band.max) - band.min))
        if taxable_in_band > 0:
            tax_in_band = taxable_in_band * band.rate
            total_tax += tax_in_band
            breakdown.append(BandCharge(band.name, taxable_in_band, tax_in_band))
            remaining -= taxable_in_band

    return IncomeTaxResult(total_tax, breakdown)


def calculate_capital_gains_tax(
    gains: float, other_income: float, is_scottish: bool = False, inflation_factor: float = 1.0
) -> float:
    if gains <= 0:
        return 0.0

    exempt = _scale(CGT_ANNUAL_EXEMPT_AMOUNT, inflation_factor)
    taxable_gains = max(0.0, gains - exempt)
    if taxable_gains <= 0:
        return 0.0

    # Gains count towards income when deciding how much allowance is lost.
    allowance = effective_personal_allowance(other_income + taxable_gains, inflation_factor)
    basic_rate_limit = _scale(SCOTTISH_BASIC_RATE_LIMIT if is_scottish else BASIC_RATE_LIMIT, inflation_factor)

    income_above_allowance = max(0.0, other_income - allowance)
    remaining_basic_band = max(0.0, basic_rate_limit - allowance - income_above_allowance)

    at_basic_rate = min(taxable_gains, remaining_basic_band)
    at_higher_rate = max(0.0, taxable_gains - at_basic_rate)
    return at_basic_rate * CGT_BASIC_RATE + at_higher_rate * CGT_HIGHER_RATE


def calculate_total_tax(
    income: float, gains: float, is_scottish: bool = False, inflation_factor: float = 1.0
) -> TaxSummary:
    income_tax = calculate_income_tax(income, is_scottish, inflation_factor).tax
    cgt = calculate_capital_gains_tax(gains, income, is_scottish, inflation_factor)
    return TaxSummary(income_tax, cgt)


def get_marginal_tax_rate(income: float, is_scottish: bool = False) -> float:
    """Rate on the next pound of income."""
    if PERSONAL_ALLOWANCE_TAPER_THRESHOLD < income < PERSONAL_ALLOWANCE_ELIMINATED_AT:
        return TAPER_ZONE_MARGINAL_RATE

    bands = tax_bands(is_scottish)
    allowance = effective_personal_allowance(income)
    for band in bands:
        if band.min <= income < band.max:
            if income < allowance:
                return 0.0
            return band.rate
    return bands[-1].rate


def get_effective_tax_rate(income: float, gains: float = 0.0, is_scottish: bool = False) -> float:
    if income + gains <= 0:
        return 0.0
    return calculate_total_tax(income, gains, is_scottish).total_tax / (income + gains)


def bracket_threshold(target: str, is_scottish: bool = False, inflation_factor: float = 1.0) -> float:
    """Income ceiling up to which pension withdrawals are preferred."""
    standard, scottish = TAX_BRACKET_THRESHOLDS[target]
    return _scale(scottish if is_scottish else standard, inflation_factor)


def calculate_pension_tax_relief(net_contribution: float, marginal_rate: float) -> float:
    gross = net_contribution / (1 - PENSION_RELIEF_BASIC_RATE)
    additional = gross * max(0.0, marginal_rate - PENSION_RELIEF_BASIC_RATE)
    return gross - net_contribution + additional
