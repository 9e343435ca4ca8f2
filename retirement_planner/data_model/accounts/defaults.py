from __future__ import annotations

from typing import List

from .items import Account


def default_accounts() -> List[Account]:
    """Fresh seed accounts for a first run."""
    return [
        Account(
            name="Workplace Pension",
            type="workplace_pension",
            balance=50000.0,
            annual_contribution=4000.0,
            contribution_growth_rate=0.02,
            expected_return=0.07,
            employer_contribution=5.0,
            salary_for_match=50000.0,
        ),
        Account(
            name="Stocks & Shares ISA",
            type="isa",
            balance=30000.0,
            annual_contribution=10000.0,
            contribution_growth_rate=0.02,
            expected_return=0.07,
        ),
    ]


def default_account_rows() -> List[dict[str, float | str]]:
    rows: List[dict[str, float | str]] = []
    for account in default_accounts():
        rows.append(
            {
                "Name": account.name,
                "Type": account.type,
                "Balance": account.balance,
                "Annual Contribution": account.annual_contribution,
                "Contribution Growth (%)": account.contribution_growth_rate * 100.0,
                "Expected Return (%)": account.expected_return * 100.0,
                "Employer Contribution (%)": account.employer_contribution or 0.0,
                "Salary for Match": account.salary_for_match or 0.0,
                "Owner": "",
            }
        )
    return rows
