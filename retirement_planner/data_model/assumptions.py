from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional

from .profile import parse_flag

_CAMEL_KEYS = {
    "inflationRate": "inflation_rate",
    "safeWithdrawalRate": "safe_withdrawal_rate",
    "retirementReturnRate": "retirement_return_rate",
    "targetRetirementIncome": "target_retirement_income",
    "inflateTaxBands": "inflate_tax_bands",
}


@dataclass
class Assumptions:
    inflation_rate: float = 0.03
    safe_withdrawal_rate: float = 0.04
    retirement_return_rate: float = 0.05
    # Today's money; None means safe_withdrawal_rate x starting retirement portfolio.
    target_retirement_income: Optional[float] = 40000.0
    inflate_tax_bands: bool = True

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Assumptions":
        base = cls()
        data = {_CAMEL_KEYS.get(key, key): value for key, value in data.items()}
        target = data.get("target_retirement_income", base.target_retirement_income)
        return cls(
            inflation_rate=float(data.get("inflation_rate", base.inflation_rate)),
            safe_withdrawal_rate=float(data.get("safe_withdrawal_rate", base.safe_withdrawal_rate)),
            retirement_return_rate=float(data.get("retirement_return_rate", base.retirement_return_rate)),
            target_retirement_income=None if target in (None, "") else float(target),
            inflate_tax_bands=parse_flag(data.get("inflate_tax_bands", base.inflate_tax_bands)),
        )


def default_assumptions() -> Assumptions:
    return Assumptions()
