import pandas as pd

from ..data_model import AccumulationResult, RetirementResult

TREATMENT_COLUMNS = ["PensionBalance", "IsaBalance", "LisaBalance", "TaxableBalance"]
REQUIRED_COLUMNS = {"Phase", "Age", "CalendarYear", *TREATMENT_COLUMNS}


def accumulation_frame(result: AccumulationResult) -> pd.DataFrame:
    """One row per accumulation year."""
    records = []
    for entry in result.years:
        records.append(
            {
                "Phase": "accumulation",
                "Age": entry.age,
                "CalendarYear": entry.year,
                "TotalBalance": entry.total_balance,
                "PensionBalance": entry.pension_balance,
                "IsaBalance": entry.isa_balance,
                "LisaBalance": entry.lisa_balance,
                "TaxableBalance": entry.taxable_balance,
                "Contributions": entry.contributions,
                "Returns": entry.returns,
            }
        )
    return pd.DataFrame(records)


def retirement_frame(result: RetirementResult) -> pd.DataFrame:
    """One row per drawdown year."""
    records = []
    for entry in result.years:
        records.append(
            {
                "Phase": "retirement",
                "Age": entry.age,
                "CalendarYear": entry.year,
                "StartingBalance": entry.starting_balance,
                "TotalBalance": entry.ending_balance,
                "PensionBalance": entry.pension_balance,
                "IsaBalance": entry.isa_balance,
                "LisaBalance": entry.lisa_balance,
                "TaxableBalance": entry.taxable_balance,
                "StatePension": entry.state_pension,
                "GrossIncome": entry.gross_income,
                "PensionWithdrawal": entry.pension_withdrawal,
                "IsaWithdrawal": entry.isa_withdrawal,
                "LisaWithdrawal": entry.lisa_withdrawal,
                "TaxableWithdrawal": entry.taxable_withdrawal,
                "TaxFreeLumpSum": entry.tax_free_lump_sum,
                "TotalWithdrawal": entry.total_withdrawal,
                "TaxableIncome": entry.taxable_income,
                "IncomeTax": entry.income_tax,
                "CapitalGainsTax": entry.capital_gains_tax,
                "TotalTax": entry.total_tax,
                "NetIncome": entry.net_income,
                "Shortfall": entry.shortfall,
                "PortfolioDepleted": entry.portfolio_depleted,
            }
        )
    return pd.DataFrame(records)


def timeline_frame(accumulation: AccumulationResult, retirement: RetirementResult) -> pd.DataFrame:
    """Both phases stacked in age order, accumulation first within an age."""
    frames = [df for df in (accumulation_frame(accumulation), retirement_frame(retirement)) if not df.empty]
    if not frames:
        return pd.DataFrame()
    df = pd.concat(frames, ignore_index=True)
    df["PhaseOrder"] = (df["Phase"] == "retirement").astype(int)
    df = df.sort_values(["Age", "PhaseOrder"], kind="stable").drop(columns="PhaseOrder")
    return df.reset_index(drop=True)


def treatment_totals(df: pd.DataFrame) -> pd.DataFrame:
    """Closing balance per tax treatment at the end of each phase."""
    if df.empty:
        return df
    missing = REQUIRED_COLUMNS.difference(df.columns)
    if missing:
        raise KeyError(f"Missing required columns: {', '.join(sorted(missing))}")
    ordered = df.sort_values(["Phase", "Age"])
    return ordered.groupby("Phase", as_index=False)[["Age", *TREATMENT_COLUMNS]].last()
