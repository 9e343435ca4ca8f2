"""Per-year allocation of a funding target across account categories.

Sources are consumed in a fixed order, each step capped by what is left of
the target, its own cap and the balance available:

1. tax-free pension lump sum (lifetime allowance, never replenished)
2. pension up to the chosen tax-bracket ceiling, less state pension
3. ISA
4. LISA
5. GIA, realising a proportional share of the unrealised gain
6. any remaining pension, whatever the marginal rate

Pension steps (1, 2, 6) only run once the owner can access their pension.
A couple runs each step for person1 and then person2 before moving on;
partners' bracket room is not optimised jointly.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..data_model import CategoryBalances
from .constants import GIA_COST_BASIS_RATIO
from .tax import bracket_threshold


@dataclass
class AccountBalances:
    """Mutable working balances for one person during a drawdown run."""

    pension: float = 0.0
    isa: float = 0.0
    lisa: float = 0.0
    taxable: float = 0.0
    taxable_cost_basis: float = 0.0

    def total(self) -> float:
        return self.pension + self.isa + self.lisa + self.taxable

    def apply_return(self, rate: float) -> None:
        self.pension *= 1 + rate
        self.isa *= 1 + rate
        self.lisa *= 1 + rate
        self.taxable *= 1 + rate
        if self.taxable > 0:
            self.taxable_cost_basis *= 1 + rate

    def snapshot(self) -> CategoryBalances:
        return CategoryBalances(pension=self.pension, isa=self.isa, lisa=self.lisa, taxable=self.taxable)

    @classmethod
    def seed(cls, balances: Optional[CategoryBalances]) -> "AccountBalances":
        if balances is None:
            return cls()
        return cls(
            pension=balances.pension,
            isa=balances.isa,
            lisa=balances.lisa,
            taxable=balances.taxable,
            taxable_cost_basis=balances.taxable * GIA_COST_BASIS_RATIO,
        )


@dataclass
class WithdrawalAllocation:
    pension_withdrawal: float = 0.0  # includes the tax-free lump sum
    isa_withdrawal: float = 0.0
    lisa_withdrawal: float = 0.0
    taxable_withdrawal: float = 0.0
    tax_free_lump_sum: float = 0.0
    capital_gains: float = 0.0
    shortfall: float = 0.0

    @property
    def total(self) -> float:
        return self.pension_withdrawal + self.isa_withdrawal + self.lisa_withdrawal + self.taxable_withdrawal

    @property
    def taxable_pension(self) -> float:
        return self.pension_withdrawal - self.tax_free_lump_sum


@dataclass
class CoupleWithdrawalAllocation:
    person1: WithdrawalAllocation
    person2: WithdrawalAllocation
    shortfall: float = 0.0

    @property
    def total(self) -> float:
        return self.person1.total + self.person2.total

    @property
    def pension_withdrawal(self) -> float:
        return self.person1.pension_withdrawal + self.person2.pension_withdrawal

    @property
    def isa_withdrawal(self) -> float:
        return self.person1.isa_withdrawal + self.person2.isa_withdrawal

    @property
    def lisa_withdrawal(self) -> float:
        return self.person1.lisa_withdrawal + self.person2.lisa_withdrawal

    @property
    def taxable_withdrawal(self) -> float:
        return self.person1.taxable_withdrawal + self.person2.taxable_withdrawal

    @property
    def tax_free_lump_sum(self) -> float:
        return self.person1.tax_free_lump_sum + self.person2.tax_free_lump_sum

    @property
    def capital_gains(self) -> float:
        return self.person1.capital_gains + self.person2.capital_gains


@dataclass
class DrawdownContext:
    """One person's inputs to a year's allocation."""

    balances: AccountBalances
    tax_free_lump_sum_remaining: float
    state_pension_income: float
    max_tax_bracket_threshold: float
    can_access_pension: bool
    allocation: WithdrawalAllocation = field(default_factory=WithdrawalAllocation)


def _take_lump_sum(ctx: DrawdownContext, remaining: float) -> float:
    balances = ctx.balances
    if not ctx.can_access_pension or ctx.tax_free_lump_sum_remaining <= 0 or balances.pension <= 0:
        return remaining
    amount = min(remaining, ctx.tax_free_lump_sum_remaining, balances.pension)
    ctx.allocation.tax_free_lump_sum += amount
    ctx.allocation.pension_withdrawal += amount
    balances.pension -= amount
    return remaining - amount


def _fill_bracket(ctx: DrawdownContext, remaining: float) -> float:
    balances = ctx.balances
    # An unlimited ceiling means pension beyond the lump sum waits for step 6.
    if not ctx.can_access_pension or balances.pension <= 0 or math.isinf(ctx.max_tax_bracket_threshold):
        return remaining
    room = max(0.0, ctx.max_tax_bracket_threshold - ctx.state_pension_income)
    amount = min(remaining, room, balances.pension)
    if amount <= 0:
        return remaining
    ctx.allocation.pension_withdrawal += amount
    balances.pension -= amount
    return remaining - amount


def _take_isa(ctx: DrawdownContext, remaining: float) -> float:
    balances = ctx.balances
    if balances.isa <= 0:
        return remaining
    amount = min(remaining, balances.isa)
    ctx.allocation.isa_withdrawal += amount
    balances.isa -= amount
    return remaining - amount


def _take_lisa(ctx: DrawdownContext, remaining: float) -> float:
    balances = ctx.balances
    if balances.lisa <= 0:
        return remaining
    amount = min(remaining, balances.lisa)
    ctx.allocation.lisa_withdrawal += amount
    balances.lisa -= amount
    return remaining - amount


def _take_taxable(ctx: DrawdownContext, remaining: float) -> float:
    balances = ctx.balances
    if balances.taxable <= 0:
        return remaining
    amount = min(remaining, balances.taxable)
    gain_ratio = 1 - balances.taxable_cost_basis / balances.taxable
    ctx.allocation.capital_gains += max(0.0, amount * gain_ratio)
    balances.taxable_cost_basis *= (balances.taxable - amount) / balances.taxable
    ctx.allocation.taxable_withdrawal += amount
    balances.taxable -= amount
    return remaining - amount


def _take_overflow_pension(ctx: DrawdownContext, remaining: float) -> float:
    balances = ctx.balances
    if not ctx.can_access_pension or balances.pension <= 0:
        return remaining
    amount = min(remaining, balances.pension)
    ctx.allocation.pension_withdrawal += amount
    balances.pension -= amount
    return remaining - amount


STEPS: List[Callable[[DrawdownContext, float], float]] = [
    _take_lump_sum,
    _fill_bracket,
    _take_isa,
    _take_lisa,
    _take_taxable,
    _take_overflow_pension,
]


def _allocate(contexts: List[DrawdownContext], target: float) -> float:
    """Run every step for each person in order; returns the unfunded remainder."""
    remaining = max(0.0, target)
    for step in STEPS:
        for ctx in contexts:
            if remaining <= 0:
                return 0.0
            remaining = step(ctx, remaining)
    return max(0.0, remaining)


def perform_withdrawal(
    balances: AccountBalances,
    target: float,
    tax_free_lump_sum_remaining: float,
    is_scottish: bool = False,
    state_pension_income: float = 0.0,
    max_tax_bracket_threshold: Optional[float] = None,
    can_access_pension: bool = True,
) -> WithdrawalAllocation:
    """Draw ``target`` from ``balances`` (mutated in place).

    Without an explicit ceiling the basic-rate limit for the jurisdiction is
    used. The caller owns the lump-sum tracker and should reduce it by the
    returned ``tax_free_lump_sum``.
    """
    if max_tax_bracket_threshold is None:
        max_tax_bracket_threshold = bracket_threshold("basic_rate", is_scottish)
    ctx = DrawdownContext(
        balances=balances,
        tax_free_lump_sum_remaining=tax_free_lump_sum_remaining,
        state_pension_income=state_pension_income,
        max_tax_bracket_threshold=max_tax_bracket_threshold,
        can_access_pension=can_access_pension,
    )
    ctx.allocation.shortfall = _allocate([ctx], target)
    return ctx.allocation


def perform_couple_withdrawal(
    person1: DrawdownContext, person2: DrawdownContext, target: float
) -> CoupleWithdrawalAllocation:
    """Household allocation, person1 first at every step."""
    shortfall = _allocate([person1, person2], target)
    return CoupleWithdrawalAllocation(person1=person1.allocation, person2=person2.allocation, shortfall=shortfall)
