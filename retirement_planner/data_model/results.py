"""Immutable per-year snapshots produced by the simulators.

The presentation side only reads these; every display figure (effective tax
rate, average annual tax) is derivable from them without re-running anything.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class CategoryBalances:
    pension: float = 0.0
    isa: float = 0.0
    lisa: float = 0.0
    taxable: float = 0.0

    @property
    def total(self) -> float:
        return self.pension + self.isa + self.lisa + self.taxable


@dataclass(frozen=True)
class AccumulationYear:
    age: int
    year: int
    accounts: Mapping[str, float]
    total_balance: float
    pension_balance: float
    isa_balance: float
    lisa_balance: float
    taxable_balance: float
    contributions: float
    returns: float
    person1_balances: CategoryBalances
    person2_balances: Optional[CategoryBalances] = None
    person2_age: Optional[int] = None


@dataclass(frozen=True)
class AccumulationResult:
    years: Tuple[AccumulationYear, ...]
    final_balance: float
    total_contributions: float
    total_returns: float

    @property
    def final_year(self) -> Optional[AccumulationYear]:
        return self.years[-1] if self.years else None

    def balance_at_age(self, age: int) -> Optional[AccumulationYear]:
        for year in self.years:
            if year.age == age:
                return year
        return None


@dataclass(frozen=True)
class PersonYear:
    """One person's share of a couple's retirement year."""

    age: int
    state_pension: float
    pension_withdrawal: float
    isa_withdrawal: float
    lisa_withdrawal: float
    taxable_withdrawal: float
    tax_free_lump_sum: float
    capital_gains: float
    taxable_income: float
    income_tax: float
    capital_gains_tax: float

    @property
    def total_tax(self) -> float:
        return self.income_tax + self.capital_gains_tax


@dataclass(frozen=True)
class WithdrawalYear:
    age: int
    year: int
    starting_balance: float
    ending_balance: float

    state_pension: float
    pension_withdrawal: float
    isa_withdrawal: float
    lisa_withdrawal: float
    taxable_withdrawal: float
    tax_free_lump_sum: float
    total_withdrawal: float

    taxable_income: float
    income_tax: float
    capital_gains_tax: float
    total_tax: float
    net_income: float

    pension_balance: float
    isa_balance: float
    lisa_balance: float
    taxable_balance: float

    portfolio_depleted: bool
    shortfall: float = 0.0
    person2_age: Optional[int] = None
    person1: Optional[PersonYear] = None
    person2: Optional[PersonYear] = None

    @property
    def gross_income(self) -> float:
        return self.state_pension + self.total_withdrawal


@dataclass(frozen=True)
class RetirementResult:
    years: Tuple[WithdrawalYear, ...]
    total_withdrawn: float
    total_tax_paid: float
    portfolio_depletion_age: Optional[int]
    sustainable_withdrawal: float

    @property
    def effective_tax_rate(self) -> float:
        if self.total_withdrawn <= 0:
            return 0.0
        return self.total_tax_paid / self.total_withdrawn

    @property
    def average_annual_tax(self) -> float:
        if not self.years:
            return 0.0
        return self.total_tax_paid / len(self.years)

    @property
    def starting_balance(self) -> float:
        return self.years[0].starting_balance if self.years else 0.0
