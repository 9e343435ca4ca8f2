import datetime
import logging
from typing import Iterable, Optional

from ..data_model import Account, AccumulationResult, AccumulationYear, CategoryBalances, HouseholdProfile
from ..data_model.profile import PersonProfile
from .constants import LISA_BONUS_RATE, LISA_MAX_AGE

logger = logging.getLogger(__name__)

TREATMENT_FIELDS = ("pension", "isa", "lisa", "taxable")


def employer_contribution(account: Account) -> float:
    if account.type != "workplace_pension":
        return 0.0
    if not account.employer_contribution or not account.salary_for_match:
        return 0.0
    return account.salary_for_match * (account.employer_contribution / 100.0)


def lisa_bonus(account: Account, age: int) -> float:
    if account.type != "lisa" or age >= LISA_MAX_AGE:
        return 0.0
    return account.annual_contribution * LISA_BONUS_RATE


def accumulation_horizon(household: HouseholdProfile) -> tuple[int, int]:
    """First and last age of the accumulation loop on person1's age track.

    In couple mode the loop runs until the last person retires; each partner's
    retirement age is moved into person1's frame by their constant age gap.
    """
    person1 = household.person1
    last_age = person1.retirement_age
    for person in household.people().values():
        offset = person.current_age - person1.current_age
        last_age = max(last_age, person.retirement_age - offset)
    return person1.current_age, last_age


def _build_account_state(account: Account, people: dict[str, PersonProfile]) -> dict:
    # Unowned accounts, and every account in single mode, belong to person1.
    owner_key = account.owner_or_default()
    if owner_key not in people:
        owner_key = "person1"
    return {
        "account": account,
        "owner_key": owner_key,
        "owner": people[owner_key],
        "treatment": account.tax_treatment(),
        "balance": account.balance,
    }


def _category_balances(states: Iterable[dict]) -> CategoryBalances:
    totals = dict.fromkeys(TREATMENT_FIELDS, 0.0)
    for state in states:
        totals[state["treatment"]] += state["balance"]
    return CategoryBalances(**totals)


def calculate_accumulation(
    accounts: list[Account],
    household: HouseholdProfile,
    start_year: Optional[int] = None,
) -> AccumulationResult:
    """Project account balances from today until retirement.

    Each year the return is credited on the opening balance before that
    year's contributions go in. Contributions for an account stop for good
    once its owner reaches their retirement age.
    """
    if start_year is None:
        start_year = datetime.date.today().year

    people = household.people()
    person1 = household.person1
    first_age, last_age = accumulation_horizon(household)
    logger.debug("Accumulation horizon %s-%s (%s mode)", first_age, last_age, household.mode)

    states = [_build_account_state(account, people) for account in accounts]
    years: list[AccumulationYear] = []
    total_contributions = 0.0
    total_returns = 0.0

    for age in range(first_age, last_age + 1):
        year_index = age - first_age
        year_contributions = 0.0
        year_returns = 0.0

        for state in states:
            account: Account = state["account"]
            returns = state["balance"] * account.expected_return
            state["balance"] += returns
            year_returns += returns

            owner_age = state["owner"].current_age + year_index
            if owner_age >= state["owner"].retirement_age:
                continue
            if account.type == "lisa" and owner_age >= LISA_MAX_AGE:
                continue

            growth_factor = (1 + account.contribution_growth_rate) ** year_index
            contribution = account.annual_contribution * growth_factor
            contribution += employer_contribution(account) * growth_factor
            contribution += lisa_bonus(account, owner_age)
            state["balance"] += contribution
            year_contributions += contribution

        total_contributions += year_contributions
        total_returns += year_returns

        overall = _category_balances(states)
        person1_balances = _category_balances(s for s in states if s["owner_key"] == "person1")
        person2_balances = None
        person2_age = None
        if household.is_couple:
            person2_balances = _category_balances(s for s in states if s["owner_key"] == "person2")
            person2_age = household.person2.current_age + (age - person1.current_age)

        years.append(
            AccumulationYear(
                age=age,
                year=start_year + year_index,
                accounts={state["account"].id: state["balance"] for state in states},
                total_balance=overall.total,
                pension_balance=overall.pension,
                isa_balance=overall.isa,
                lisa_balance=overall.lisa,
                taxable_balance=overall.taxable,
                contributions=year_contributions,
                returns=year_returns,
                person1_balances=person1_balances,
                person2_balances=person2_balances,
                person2_age=person2_age,
            )
        )

    final_balance = years[-1].total_balance if years else 0.0
    return AccumulationResult(
        years=tuple(years),
        final_balance=final_balance,
        total_contributions=total_contributions,
        total_returns=total_returns,
    )


def calculate_total_contributions(accounts: list[Account], years: int) -> float:
    """Own and employer contributions over a number of years, without LISA bonus."""
    total = 0.0
    for account in accounts:
        for year in range(years):
            growth_factor = (1 + account.contribution_growth_rate) ** year
            total += account.annual_contribution * growth_factor
            total += employer_contribution(account) * growth_factor
    return total
