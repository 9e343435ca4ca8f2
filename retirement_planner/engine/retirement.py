import datetime
import logging
from typing import Iterable, Optional

from ..data_model import (
    Account,
    AccumulationResult,
    Assumptions,
    CategoryBalances,
    HouseholdProfile,
    PersonYear,
    RetirementResult,
    WithdrawalYear,
)
from .constants import SUSTAINABLE_WITHDRAWAL_RATE, TAX_FREE_LUMP_SUM_RATE
from .tax import bracket_threshold, calculate_capital_gains_tax, calculate_income_tax
from .withdrawal import (
    AccountBalances,
    DrawdownContext,
    WithdrawalAllocation,
    perform_couple_withdrawal,
    perform_withdrawal,
)

logger = logging.getLogger(__name__)


def _opening_balances(
    accounts: list[Account], household: HouseholdProfile, accumulation: AccumulationResult
) -> dict[str, CategoryBalances]:
    """Per-person balances at the start of drawdown.

    Normally the last accumulation year; when there was no accumulation
    (already at retirement) the accounts' current balances are used.
    """
    final = accumulation.final_year
    if final is not None:
        opening = {"person1": final.person1_balances}
        if household.is_couple:
            opening["person2"] = final.person2_balances or CategoryBalances()
        return opening

    people = household.people()
    totals = {key: dict(pension=0.0, isa=0.0, lisa=0.0, taxable=0.0) for key in people}
    for account in accounts:
        owner = account.owner_or_default()
        if owner not in totals:
            owner = "person1"
        totals[owner][account.tax_treatment()] += account.balance
    return {key: CategoryBalances(**values) for key, values in totals.items()}


def _base_target(assumptions: Assumptions, portfolio: float, years_to_retirement: int) -> tuple[float, int]:
    """Withdrawal target and the year offset (from today) it is expressed in."""
    if assumptions.target_retirement_income is not None:
        return assumptions.target_retirement_income, 0
    # Already in money of the first retirement year.
    return portfolio * assumptions.safe_withdrawal_rate, years_to_retirement


def _person_year(
    age: int,
    state_pension: float,
    allocation: WithdrawalAllocation,
    is_scottish: bool,
    tax_factor: float,
) -> PersonYear:
    taxable_income = max(0.0, state_pension + allocation.pension_withdrawal - allocation.tax_free_lump_sum)
    income_tax = calculate_income_tax(taxable_income, is_scottish, tax_factor).tax
    cgt = calculate_capital_gains_tax(allocation.capital_gains, taxable_income, is_scottish, tax_factor)
    return PersonYear(
        age=age,
        state_pension=state_pension,
        pension_withdrawal=allocation.pension_withdrawal,
        isa_withdrawal=allocation.isa_withdrawal,
        lisa_withdrawal=allocation.lisa_withdrawal,
        taxable_withdrawal=allocation.taxable_withdrawal,
        tax_free_lump_sum=allocation.tax_free_lump_sum,
        capital_gains=allocation.capital_gains,
        taxable_income=taxable_income,
        income_tax=income_tax,
        capital_gains_tax=cgt,
    )


def _withdrawal_year(
    age: int,
    year: int,
    starting_balance: float,
    balances: Iterable[AccountBalances],
    people: list[PersonYear],
    shortfall: float,
    couple: bool,
) -> WithdrawalYear:
    closing = [b.snapshot() for b in balances]
    ending_balance = sum(b.total for b in closing)

    state_pension = sum(p.state_pension for p in people)
    pension_withdrawal = sum(p.pension_withdrawal for p in people)
    isa_withdrawal = sum(p.isa_withdrawal for p in people)
    lisa_withdrawal = sum(p.lisa_withdrawal for p in people)
    taxable_withdrawal = sum(p.taxable_withdrawal for p in people)
    total_withdrawal = pension_withdrawal + isa_withdrawal + lisa_withdrawal + taxable_withdrawal
    income_tax = sum(p.income_tax for p in people)
    capital_gains_tax = sum(p.capital_gains_tax for p in people)
    total_tax = income_tax + capital_gains_tax

    return WithdrawalYear(
        age=age,
        year=year,
        starting_balance=starting_balance,
        ending_balance=max(0.0, ending_balance),
        state_pension=state_pension,
        pension_withdrawal=pension_withdrawal,
        isa_withdrawal=isa_withdrawal,
        lisa_withdrawal=lisa_withdrawal,
        taxable_withdrawal=taxable_withdrawal,
        tax_free_lump_sum=sum(p.tax_free_lump_sum for p in people),
        total_withdrawal=total_withdrawal,
        taxable_income=sum(p.taxable_income for p in people),
        income_tax=income_tax,
        capital_gains_tax=capital_gains_tax,
        total_tax=total_tax,
        net_income=state_pension + total_withdrawal - total_tax,
        pension_balance=sum(b.pension for b in closing),
        isa_balance=sum(b.isa for b in closing),
        lisa_balance=sum(b.lisa for b in closing),
        taxable_balance=sum(b.taxable for b in closing),
        portfolio_depleted=ending_balance <= 0,
        shortfall=shortfall,
        person2_age=people[1].age if couple else None,
        person1=people[0] if couple else None,
        person2=people[1] if couple else None,
    )


def _finish(years: list[WithdrawalYear], starting_portfolio: float) -> RetirementResult:
    depletion_age: Optional[int] = None
    for entry in years:
        if entry.portfolio_depleted:
            depletion_age = entry.age
            break
    if depletion_age is not None:
        logger.info("Portfolio depleted at age %s", depletion_age)
    return RetirementResult(
        years=tuple(years),
        total_withdrawn=sum(y.total_withdrawal for y in years),
        total_tax_paid=sum(y.total_tax for y in years),
        portfolio_depletion_age=depletion_age,
        sustainable_withdrawal=starting_portfolio * SUSTAINABLE_WITHDRAWAL_RATE,
    )


def _calculate_single(
    accounts: list[Account],
    household: HouseholdProfile,
    assumptions: Assumptions,
    accumulation: AccumulationResult,
    start_year: int,
) -> RetirementResult:
    person = household.person1
    balances = AccountBalances.seed(_opening_balances(accounts, household, accumulation)["person1"])
    lump_sum_remaining = balances.pension * TAX_FREE_LUMP_SUM_RATE
    starting_portfolio = balances.total()
    base_target, target_anchor = _base_target(
        assumptions, starting_portfolio, person.retirement_age - person.current_age
    )
    inflation = assumptions.inflation_rate
    logger.debug("Single drawdown from %.2f, target %.2f", starting_portfolio, base_target)

    years: list[WithdrawalYear] = []
    for age in range(person.retirement_age, person.life_expectancy + 1):
        years_from_today = age - person.current_age
        price_factor = (1 + inflation) ** years_from_today
        tax_factor = price_factor if assumptions.inflate_tax_bands else 1.0
        target = base_target * (1 + inflation) ** (years_from_today - target_anchor)

        state_pension = household.state_pension_amount * price_factor if age >= person.state_pension_age else 0.0
        needed = max(0.0, target - state_pension)
        starting_balance = balances.total()

        allocation = perform_withdrawal(
            balances,
            needed,
            lump_sum_remaining,
            person.is_scottish,
            state_pension,
            bracket_threshold(person.tax_bracket_target, person.is_scottish, tax_factor),
            person.can_access_pension(age),
        )
        lump_sum_remaining = max(0.0, lump_sum_remaining - allocation.tax_free_lump_sum)
        balances.apply_return(assumptions.retirement_return_rate)

        person_year = _person_year(age, state_pension, allocation, person.is_scottish, tax_factor)
        years.append(
            _withdrawal_year(
                age,
                start_year + years_from_today,
                starting_balance,
                [balances],
                [person_year],
                allocation.shortfall,
                couple=False,
            )
        )

    return _finish(years, starting_portfolio)


def _calculate_couple(
    accounts: list[Account],
    household: HouseholdProfile,
    assumptions: Assumptions,
    accumulation: AccumulationResult,
    start_year: int,
) -> RetirementResult:
    person1, person2 = household.person1, household.person2
    # person1's age is the reference track; person2 is a constant offset away.
    offset = person2.current_age - person1.current_age
    first_age = min(person1.retirement_age, person2.retirement_age - offset)
    last_age = max(person1.life_expectancy, person2.life_expectancy - offset)

    opening = _opening_balances(accounts, household, accumulation)
    balances = [AccountBalances.seed(opening["person1"]), AccountBalances.seed(opening["person2"])]
    lump_sums = [b.pension * TAX_FREE_LUMP_SUM_RATE for b in balances]
    starting_portfolio = sum(b.total() for b in balances)
    base_target, target_anchor = _base_target(assumptions, starting_portfolio, first_age - person1.current_age)
    inflation = assumptions.inflation_rate
    half_state_pension = household.state_pension_amount / 2
    logger.debug("Couple drawdown from %.2f, ages %s-%s", starting_portfolio, first_age, last_age)

    years: list[WithdrawalYear] = []
    for age in range(first_age, last_age + 1):
        years_from_today = age - person1.current_age
        target = base_target * (1 + inflation) ** (years_from_today - target_anchor)

        contexts = []
        factors = []
        for index, person in enumerate((person1, person2)):
            person_age = person.current_age + years_from_today
            price_factor = (1 + inflation) ** (person_age - person.current_age)
            tax_factor = price_factor if assumptions.inflate_tax_bands else 1.0
            # Paid only while its owner is alive.
            receives_state_pension = person.state_pension_age <= person_age <= person.life_expectancy
            state_pension = half_state_pension * price_factor if receives_state_pension else 0.0
            factors.append((person_age, tax_factor))
            contexts.append(
                DrawdownContext(
                    balances=balances[index],
                    tax_free_lump_sum_remaining=lump_sums[index],
                    state_pension_income=state_pension,
                    max_tax_bracket_threshold=bracket_threshold(
                        person.tax_bracket_target, person.is_scottish, tax_factor
                    ),
                    can_access_pension=person.can_access_pension(person_age),
                )
            )

        household_state_pension = sum(ctx.state_pension_income for ctx in contexts)
        needed = max(0.0, target - household_state_pension)
        starting_balance = sum(b.total() for b in balances)

        allocation = perform_couple_withdrawal(contexts[0], contexts[1], needed)
        people: list[PersonYear] = []
        for index, (person, ctx) in enumerate(zip((person1, person2), contexts)):
            lump_sums[index] = max(0.0, lump_sums[index] - ctx.allocation.tax_free_lump_sum)
            balances[index].apply_return(assumptions.retirement_return_rate)
            person_age, tax_factor = factors[index]
            people.append(
                _person_year(person_age, ctx.state_pension_income, ctx.allocation, person.is_scottish, tax_factor)
            )

        years.append(
            _withdrawal_year(
                age,
                start_year + years_from_today,
                starting_balance,
                balances,
                people,
                allocation.shortfall,
                couple=True,
            )
        )

    return _finish(years, starting_portfolio)


def calculate_withdrawals(
    accounts: list[Account],
    household: HouseholdProfile,
    assumptions: Assumptions,
    accumulation: AccumulationResult,
    start_year: Optional[int] = None,
) -> RetirementResult:
    """Simulate drawdown from retirement to life expectancy.

    Target income and state pension inflate from today; tax thresholds do
    too when ``assumptions.inflate_tax_bands`` is set. Returns are credited
    after each year's withdrawal. Running out of money is reported through
    ``portfolio_depletion_age`` and the run continues to the end.
    """
    if start_year is None:
        start_year = datetime.date.today().year
    if household.is_couple:
        return _calculate_couple(accounts, household, assumptions, accumulation, start_year)
    return _calculate_single(accounts, household, assumptions, accumulation, start_year)
