"""UK tax and scheme constants for the 2024/25 tax year."""
from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class TaxBand:
    min: float
    max: float
    rate: float
    name: str


# England, Wales and Northern Ireland
UK_TAX_BANDS: tuple[TaxBand, ...] = (
    TaxBand(0, 12570, 0.0, "Personal Allowance"),
    TaxBand(12570, 50270, 0.20, "Basic Rate"),
    TaxBand(50270, 125140, 0.40, "Higher Rate"),
    TaxBand(125140, math.inf, 0.45, "Additional Rate"),
)

SCOTTISH_TAX_BANDS: tuple[TaxBand, ...] = (
    TaxBand(0, 12570, 0.0, "Personal Allowance"),
    TaxBand(12570, 14876, 0.19, "Starter Rate"),
    TaxBand(14876, 26561, 0.20, "Basic Rate"),
    TaxBand(26561, 43662, 0.21, "Intermediate Rate"),
    TaxBand(43662, 75000, 0.42, "Higher Rate"),
    TaxBand(75000, 125140, 0.45, "Advanced Rate"),
    TaxBand(125140, math.inf, 0.48, "Top Rate"),
)

PERSONAL_ALLOWANCE = 12570
# Allowance falls by 1 for every 2 of income above the threshold.
PERSONAL_ALLOWANCE_TAPER_THRESHOLD = 100000
PERSONAL_ALLOWANCE_ELIMINATED_AT = PERSONAL_ALLOWANCE_TAPER_THRESHOLD + 2 * PERSONAL_ALLOWANCE
TAPER_ZONE_MARGINAL_RATE = 0.60

BASIC_RATE_LIMIT = 50270
SCOTTISH_BASIC_RATE_LIMIT = 43662

CGT_ANNUAL_EXEMPT_AMOUNT = 3000
CGT_BASIC_RATE = 0.10
CGT_HIGHER_RATE = 0.20

# Pension relief at source is grossed up at the basic rate.
PENSION_RELIEF_BASIC_RATE = 0.20

LISA_BONUS_RATE = 0.25
LISA_MAX_AGE = 50

TAX_FREE_LUMP_SUM_RATE = 0.25
# Flat estimate of the GIA cost basis when drawdown starts.
GIA_COST_BASIS_RATIO = 0.5
SUSTAINABLE_WITHDRAWAL_RATE = 0.04

# Ceiling (standard, Scottish) for bracket-filling pension withdrawals.
TAX_BRACKET_THRESHOLDS: dict[str, tuple[float, float]] = {
    "personal_allowance": (12570, 12570),
    "basic_rate": (50270, 43662),
    "higher_rate": (125140, 125140),
    "no_limit": (math.inf, math.inf),
}
