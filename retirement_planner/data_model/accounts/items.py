from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, List, Mapping, Optional

import pandas as pd

from .constants import (
    ACCOUNT_TYPE_LABELS,
    ACCOUNT_TYPES,
    OWNERS,
    PENSION_TYPES,
    TAX_FREE_TYPES,
    TAX_TREATMENT_BY_TYPE,
)

# Stored payloads written by the older browser front end used camelCase keys.
_CAMEL_KEYS = {
    "annualContribution": "annual_contribution",
    "contributionGrowthRate": "contribution_growth_rate",
    "expectedReturn": "expected_return",
    "employerContribution": "employer_contribution",
    "salaryForMatch": "salary_for_match",
}


def _new_id() -> str:
    return uuid.uuid4().hex


def parse_account_type(value: Any) -> str:
    account_type = str(value or "").strip().lower()
    if account_type not in ACCOUNT_TYPES:
        raise ValueError(f"Unknown account type: {value!r}")
    return account_type


def parse_owner(value: Any) -> Optional[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    owner = str(value).strip().lower()
    if not owner:
        return None
    if owner not in OWNERS:
        raise ValueError(f"Unknown account owner: {value!r}")
    return owner


@dataclass
class Account:
    name: str
    type: str
    balance: float = 0.0
    annual_contribution: float = 0.0
    contribution_growth_rate: float = 0.0
    expected_return: float = 0.0
    employer_contribution: Optional[float] = None  # percent of salary_for_match
    salary_for_match: Optional[float] = None
    owner: Optional[str] = None
    id: str = field(default_factory=_new_id)

    def tax_treatment(self) -> str:
        return TAX_TREATMENT_BY_TYPE[self.type]

    def label(self) -> str:
        return ACCOUNT_TYPE_LABELS[self.type]

    def is_pension(self) -> bool:
        return self.type in PENSION_TYPES

    def is_tax_free(self) -> bool:
        return self.type in TAX_FREE_TYPES

    def owner_or_default(self) -> str:
        return self.owner or "person1"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Account":
        data = {_CAMEL_KEYS.get(key, key): value for key, value in data.items()}

        def _optional(key: str) -> Optional[float]:
            value = data.get(key)
            if value is None or value == "":
                return None
            return float(value)

        return cls(
            id=str(data.get("id") or _new_id()),
            name=str(data["name"]),
            type=parse_account_type(data["type"]),
            balance=float(data.get("balance", 0.0) or 0.0),
            annual_contribution=float(data.get("annual_contribution", 0.0) or 0.0),
            contribution_growth_rate=float(data.get("contribution_growth_rate", 0.0) or 0.0),
            expected_return=float(data.get("expected_return", 0.0) or 0.0),
            employer_contribution=_optional("employer_contribution"),
            salary_for_match=_optional("salary_for_match"),
            owner=parse_owner(data.get("owner")),
        )


def records_to_accounts(rows: List[Mapping[str, Any]]) -> List[Account]:
    """Parse stored account dicts, skipping rows without a name."""
    accounts: List[Account] = []
    for row in rows or []:
        if not str(row.get("name", "") or "").strip():
            continue
        accounts.append(Account.from_dict(row))
    return accounts


def _cell(row: Mapping[str, Any], key: str) -> Any:
    """Editor cell value, with blank and missing cells as None."""
    value = row.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    return value


def _cell_float(row: Mapping[str, Any], key: str, scale: float = 1.0) -> float:
    value = _cell(row, key)
    return float(value) / scale if value is not None else 0.0


def dataframe_to_accounts(df: pd.DataFrame) -> List[Account]:
    """Parse rows coming from the account editor table."""
    items: List[Account] = []
    for row in df.to_dict("records"):
        name = str(_cell(row, "Name") or "").strip()
        if not name:
            continue
        row_id = _cell(row, "Id")
        employer_pct = _cell(row, "Employer Contribution (%)")
        salary = _cell(row, "Salary for Match")
        items.append(
            Account(
                id=str(row_id) if row_id is not None else _new_id(),
                name=name,
                type=parse_account_type(_cell(row, "Type")),
                balance=_cell_float(row, "Balance"),
                annual_contribution=_cell_float(row, "Annual Contribution"),
                contribution_growth_rate=_cell_float(row, "Contribution Growth (%)", 100.0),
                expected_return=_cell_float(row, "Expected Return (%)", 100.0),
                employer_contribution=float(employer_pct) if employer_pct is not None else None,
                salary_for_match=float(salary) if salary is not None else None,
                owner=parse_owner(_cell(row, "Owner")),
            )
        )
    return items
