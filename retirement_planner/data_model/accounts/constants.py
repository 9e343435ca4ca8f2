from __future__ import annotations

ACCOUNT_TYPES: tuple[str, ...] = ("workplace_pension", "sipp", "isa", "lisa", "gia")
TAX_TREATMENTS: tuple[str, ...] = ("pension", "isa", "lisa", "taxable")
OWNERS: tuple[str, ...] = ("person1", "person2")

# Closed lookup, no default branch: a new account type must be added here.
TAX_TREATMENT_BY_TYPE: dict[str, str] = {
    "workplace_pension": "pension",
    "sipp": "pension",
    "isa": "isa",
    "lisa": "lisa",
    "gia": "taxable",
}

ACCOUNT_TYPE_LABELS: dict[str, str] = {
    "workplace_pension": "Workplace Pension",
    "sipp": "SIPP",
    "isa": "ISA",
    "lisa": "Lifetime ISA",
    "gia": "General Investment Account",
}

PENSION_TYPES = frozenset(t for t, treatment in TAX_TREATMENT_BY_TYPE.items() if treatment == "pension")
TAX_FREE_TYPES = frozenset(("isa", "lisa"))


def _check_exhaustive() -> None:
    for name, mapping in (("tax treatment", TAX_TREATMENT_BY_TYPE), ("label", ACCOUNT_TYPE_LABELS)):
        missing = set(ACCOUNT_TYPES).difference(mapping)
        extra = set(mapping).difference(ACCOUNT_TYPES)
        if missing or extra:
            raise RuntimeError(f"Account type {name} mapping out of sync: missing={sorted(missing)} extra={sorted(extra)}")
    unknown = set(TAX_TREATMENT_BY_TYPE.values()).difference(TAX_TREATMENTS)
    if unknown:
        raise RuntimeError(f"Unknown tax treatments: {sorted(unknown)}")


_check_exhaustive()
