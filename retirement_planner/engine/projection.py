from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..data_model import (
    Account,
    AccumulationResult,
    Assumptions,
    HouseholdProfile,
    Profile,
    RetirementResult,
    household_from_profile,
)
from .accumulation import calculate_accumulation
from .retirement import calculate_withdrawals


@dataclass(frozen=True)
class Projection:
    accumulation: AccumulationResult
    retirement: RetirementResult

    def summary(self) -> Dict[str, Any]:
        retirement = self.retirement
        return {
            "final_balance": self.accumulation.final_balance,
            "total_contributions": self.accumulation.total_contributions,
            "total_returns": self.accumulation.total_returns,
            "starting_retirement_balance": retirement.starting_balance,
            "total_withdrawn": retirement.total_withdrawn,
            "total_tax_paid": retirement.total_tax_paid,
            "effective_tax_rate": retirement.effective_tax_rate,
            "average_annual_tax": retirement.average_annual_tax,
            "portfolio_depletion_age": retirement.portfolio_depletion_age,
            "sustainable_withdrawal": retirement.sustainable_withdrawal,
        }


def run_projection(
    accounts: List[Account],
    household: HouseholdProfile,
    assumptions: Assumptions,
    start_year: Optional[int] = None,
) -> Optional[Projection]:
    """Both phases for a household; ``None`` when there are no accounts."""
    if not accounts:
        return None
    accumulation = calculate_accumulation(accounts, household, start_year)
    retirement = calculate_withdrawals(accounts, household, assumptions, accumulation, start_year)
    return Projection(accumulation, retirement)


def run_legacy_projection(
    accounts: List[Account],
    profile: Profile,
    assumptions: Assumptions,
    start_year: Optional[int] = None,
) -> Optional[Projection]:
    return run_projection(accounts, household_from_profile(profile), assumptions, start_year)
