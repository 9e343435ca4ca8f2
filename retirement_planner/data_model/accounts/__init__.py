from .constants import (
    ACCOUNT_TYPE_LABELS,
    ACCOUNT_TYPES,
    OWNERS,
    TAX_TREATMENT_BY_TYPE,
    TAX_TREATMENTS,
)
from .defaults import default_account_rows, default_accounts
from .items import Account, dataframe_to_accounts, records_to_accounts
from .table import AccountTableModel

__all__ = [
    "ACCOUNT_TYPES",
    "ACCOUNT_TYPE_LABELS",
    "OWNERS",
    "TAX_TREATMENTS",
    "TAX_TREATMENT_BY_TYPE",
    "Account",
    "AccountTableModel",
    "dataframe_to_accounts",
    "default_account_rows",
    "default_accounts",
    "records_to_accounts",
]
