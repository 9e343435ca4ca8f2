# engine/state.py
import logging
from typing import Any, Dict, List, Optional

from ..data_model import (
    Account,
    Assumptions,
    HouseholdProfile,
    Profile,
    default_accounts,
    default_assumptions,
    default_household,
    household_from_profile,
    records_to_accounts,
)
from .storage import load_inputs, save_inputs, storage_path_from_env

logger = logging.getLogger(__name__)


class PlannerState:
    """The three planner inputs, loaded at startup and saved on every change."""

    def __init__(self, storage_path: Optional[str] = None):
        self.storage_path = storage_path or storage_path_from_env()
        raw = load_inputs(self.storage_path)
        self.accounts: List[Account] = self._load_accounts(raw)
        self.household: HouseholdProfile = self._load_household(raw)
        self.assumptions: Assumptions = self._load_assumptions(raw)

    @staticmethod
    def _load_accounts(raw: Dict[str, Any]) -> List[Account]:
        if "accounts" not in raw:
            return default_accounts()
        try:
            return records_to_accounts(raw["accounts"] or [])
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Stored accounts invalid (%s); using defaults", exc)
            return default_accounts()

    @staticmethod
    def _load_household(raw: Dict[str, Any]) -> HouseholdProfile:
        try:
            if raw.get("household"):
                return HouseholdProfile.from_dict(raw["household"])
            if raw.get("profile"):
                return household_from_profile(Profile.from_dict(raw["profile"]))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Stored household invalid (%s); using defaults", exc)
        return default_household()

    @staticmethod
    def _load_assumptions(raw: Dict[str, Any]) -> Assumptions:
        try:
            if raw.get("assumptions"):
                return Assumptions.from_dict(raw["assumptions"])
        except (TypeError, ValueError) as exc:
            logger.warning("Stored assumptions invalid (%s); using defaults", exc)
        return default_assumptions()

    def set_accounts(self, accounts: List[Account]) -> None:
        self.accounts = list(accounts)
        self._save()

    def set_household(self, household: HouseholdProfile) -> None:
        self.household = household
        self._save()

    def set_profile(self, profile: Profile) -> None:
        self.set_household(household_from_profile(profile))

    def set_assumptions(self, assumptions: Assumptions) -> None:
        self.assumptions = assumptions
        self._save()

    def reset(self) -> None:
        self.accounts = default_accounts()
        self.household = default_household()
        self.assumptions = default_assumptions()
        self._save()

    def to_payload(self) -> Dict[str, Any]:
        return {
            "accounts": [account.to_dict() for account in self.accounts],
            "household": self.household.to_dict(),
            "assumptions": self.assumptions.to_dict(),
        }

    def _save(self) -> None:
        save_inputs(self.storage_path, self.to_payload())
