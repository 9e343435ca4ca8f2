from .accounts import (
    ACCOUNT_TYPE_LABELS,
    ACCOUNT_TYPES,
    TAX_TREATMENT_BY_TYPE,
    Account,
    AccountTableModel,
    dataframe_to_accounts,
    default_accounts,
    records_to_accounts,
)
from .assumptions import Assumptions, default_assumptions
from .profile import (
    TAX_BRACKET_TARGETS,
    HouseholdProfile,
    PersonProfile,
    Profile,
    default_household,
    default_person_profile,
    default_profile,
    household_from_profile,
    profile_from_household,
)
from .results import (
    AccumulationResult,
    AccumulationYear,
    CategoryBalances,
    PersonYear,
    RetirementResult,
    WithdrawalYear,
)

__all__ = [
    "ACCOUNT_TYPES",
    "ACCOUNT_TYPE_LABELS",
    "TAX_BRACKET_TARGETS",
    "TAX_TREATMENT_BY_TYPE",
    "Account",
    "AccountTableModel",
    "AccumulationResult",
    "AccumulationYear",
    "Assumptions",
    "CategoryBalances",
    "HouseholdProfile",
    "PersonProfile",
    "PersonYear",
    "Profile",
    "RetirementResult",
    "WithdrawalYear",
    "dataframe_to_accounts",
    "default_accounts",
    "default_assumptions",
    "default_household",
    "default_person_profile",
    "default_profile",
    "household_from_profile",
    "profile_from_household",
    "records_to_accounts",
]
