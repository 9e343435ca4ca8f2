from __future__ import annotations

from .constants import ACCOUNT_TYPES
from .defaults import default_account_rows
from ..base import ColumnDefinition, TableModel


class AccountTableModel(TableModel):
    """Schema + defaults for the account editor."""

    def __init__(self) -> None:
        columns = [
            ColumnDefinition("Name", "Name"),
            ColumnDefinition(
                "Type",
                "Account Type",
                kind="select",
                default="isa",
                options=list(ACCOUNT_TYPES),
                help="workplace_pension/sipp/isa/lisa/gia",
            ),
            ColumnDefinition(
                "Balance",
                "Balance (GBP)",
                kind="number",
                default=0.0,
                min_value=0.0,
                step=500.0,
                format="%.2f",
            ),
            ColumnDefinition(
                "Annual Contribution",
                "Annual Contribution (GBP)",
                kind="number",
                default=0.0,
                min_value=0.0,
                step=500.0,
                format="%.2f",
            ),
            ColumnDefinition("Contribution Growth (%)", "Contribution Growth (%)", kind="number", default=0.0, step=0.5),
            ColumnDefinition("Expected Return (%)", "Expected Return (%)", kind="number", default=5.0, step=0.25),
            ColumnDefinition(
                "Employer Contribution (%)",
                "Employer Contribution (%)",
                kind="number",
                default=0.0,
                min_value=0.0,
                step=0.5,
                help="Workplace pension only",
            ),
            ColumnDefinition(
                "Salary for Match",
                "Salary for Match (GBP)",
                kind="number",
                default=0.0,
                min_value=0.0,
                step=1000.0,
                format="%.2f",
                help="Workplace pension only",
            ),
            ColumnDefinition(
                "Owner",
                "Owner",
                kind="select",
                default="",
                options=["", "person1", "person2"],
                help="Couple mode only (blank = person1)",
            ),
        ]

        super().__init__("accounts", columns, default_account_rows())
