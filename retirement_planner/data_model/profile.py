from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Literal, Mapping, Optional

STATE_PENSION_AGE = 66
MINIMUM_PENSION_ACCESS_AGE = 55
DEFAULT_PRIVATE_PENSION_AGE = 57
FULL_STATE_PENSION_WEEKLY = 221.20
FULL_STATE_PENSION_ANNUAL = FULL_STATE_PENSION_WEEKLY * 52

TAX_BRACKET_TARGETS: tuple[str, ...] = ("personal_allowance", "basic_rate", "higher_rate", "no_limit")
HOUSEHOLD_MODES: tuple[str, ...] = ("single", "couple")

TaxBracketTarget = Literal["personal_allowance", "basic_rate", "higher_rate", "no_limit"]

_CAMEL_KEYS = {
    "currentAge": "current_age",
    "retirementAge": "retirement_age",
    "lifeExpectancy": "life_expectancy",
    "privatePensionAge": "private_pension_age",
    "statePensionAge": "state_pension_age",
    "statePensionAmount": "state_pension_amount",
    "isScottish": "is_scottish",
    "taxBracketTarget": "tax_bracket_target",
}


def _snake(data: Mapping[str, Any]) -> dict[str, Any]:
    return {_CAMEL_KEYS.get(key, key): value for key, value in data.items()}


def parse_flag(value: Any) -> bool:
    """Boolean from JSON, form or editor input ('false', '0', 'no' are False)."""
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "1", "yes", "y", "on"):
            return True
        if text in ("false", "0", "no", "n", "off", ""):
            return False
        raise ValueError(f"Not a true/false value: {value!r}")
    return bool(value)


def parse_bracket_target(value: Any) -> str:
    target = str(value or "basic_rate").strip().lower()
    if target not in TAX_BRACKET_TARGETS:
        raise ValueError(f"Unknown tax bracket target: {value!r}")
    return target


@dataclass
class PersonProfile:
    name: str = "Person 1"
    current_age: int = 35
    retirement_age: int = 60
    life_expectancy: int = 90
    private_pension_age: int = DEFAULT_PRIVATE_PENSION_AGE
    state_pension_age: int = STATE_PENSION_AGE
    is_scottish: bool = False
    tax_bracket_target: str = "basic_rate"

    def can_access_pension(self, age: int) -> bool:
        return age >= self.private_pension_age

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], defaults: Optional["PersonProfile"] = None) -> "PersonProfile":
        base = defaults or cls()
        data = _snake(data)
        return cls(
            name=str(data.get("name", base.name)),
            current_age=int(data.get("current_age", base.current_age)),
            retirement_age=int(data.get("retirement_age", base.retirement_age)),
            life_expectancy=int(data.get("life_expectancy", base.life_expectancy)),
            private_pension_age=int(data.get("private_pension_age", base.private_pension_age)),
            state_pension_age=int(data.get("state_pension_age", base.state_pension_age)),
            is_scottish=parse_flag(data.get("is_scottish", base.is_scottish)),
            tax_bracket_target=parse_bracket_target(data.get("tax_bracket_target", base.tax_bracket_target)),
        )


@dataclass
class HouseholdProfile:
    mode: str = "single"
    person1: PersonProfile = field(default_factory=PersonProfile)
    person2: Optional[PersonProfile] = None
    state_pension_amount: float = FULL_STATE_PENSION_ANNUAL

    @property
    def is_couple(self) -> bool:
        return self.mode == "couple" and self.person2 is not None

    def people(self) -> dict[str, PersonProfile]:
        people = {"person1": self.person1}
        if self.is_couple:
            people["person2"] = self.person2
        return people

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "person1": self.person1.to_dict(),
            "person2": self.person2.to_dict() if self.person2 is not None else None,
            "state_pension_amount": self.state_pension_amount,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HouseholdProfile":
        data = _snake(data)
        mode = str(data.get("mode", "single")).strip().lower()
        if mode not in HOUSEHOLD_MODES:
            raise ValueError(f"Unknown household mode: {data.get('mode')!r}")
        person1 = PersonProfile.from_dict(data.get("person1") or {}, default_person_profile())
        person2 = None
        if mode == "couple":
            person2 = PersonProfile.from_dict(data.get("person2") or {}, default_person2_profile())
        default_amount = FULL_STATE_PENSION_ANNUAL * (2 if mode == "couple" else 1)
        return cls(
            mode=mode,
            person1=person1,
            person2=person2,
            state_pension_amount=float(data.get("state_pension_amount", default_amount)),
        )


@dataclass
class Profile:
    """Single-person profile used by stored data from before households existed."""

    current_age: int = 35
    retirement_age: int = 60
    life_expectancy: int = 90
    private_pension_age: int = DEFAULT_PRIVATE_PENSION_AGE
    state_pension_age: int = STATE_PENSION_AGE
    state_pension_amount: float = FULL_STATE_PENSION_ANNUAL
    is_scottish: bool = False
    tax_bracket_target: str = "basic_rate"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Profile":
        # Older stored profiles may lack newer fields; fill from defaults.
        base = cls()
        data = _snake(data)
        return cls(
            current_age=int(data.get("current_age", base.current_age)),
            retirement_age=int(data.get("retirement_age", base.retirement_age)),
            life_expectancy=int(data.get("life_expectancy", base.life_expectancy)),
            private_pension_age=int(data.get("private_pension_age", base.private_pension_age)),
            state_pension_age=int(data.get("state_pension_age", base.state_pension_age)),
            state_pension_amount=float(data.get("state_pension_amount", base.state_pension_amount)),
            is_scottish=parse_flag(data.get("is_scottish", base.is_scottish)),
            tax_bracket_target=parse_bracket_target(data.get("tax_bracket_target", base.tax_bracket_target)),
        )


def default_person_profile() -> PersonProfile:
    return PersonProfile()


def default_person2_profile() -> PersonProfile:
    return PersonProfile(name="Person 2", current_age=33, retirement_age=60, life_expectancy=92)


def default_household(mode: str = "single") -> HouseholdProfile:
    if mode == "couple":
        return HouseholdProfile(
            mode="couple",
            person1=default_person_profile(),
            person2=default_person2_profile(),
            state_pension_amount=FULL_STATE_PENSION_ANNUAL * 2,
        )
    return HouseholdProfile()


def default_profile() -> Profile:
    return Profile()


def household_from_profile(profile: Profile, name: str = "Person 1") -> HouseholdProfile:
    return HouseholdProfile(
        mode="single",
        person1=PersonProfile(
            name=name,
            current_age=profile.current_age,
            retirement_age=profile.retirement_age,
            life_expectancy=profile.life_expectancy,
            private_pension_age=profile.private_pension_age,
            state_pension_age=profile.state_pension_age,
            is_scottish=profile.is_scottish,
            tax_bracket_target=profile.tax_bracket_target,
        ),
        person2=None,
        state_pension_amount=profile.state_pension_amount,
    )


def profile_from_household(household: HouseholdProfile) -> Profile:
    """Legacy single profile for person1.

    The legacy shape has no name, so `name` is not carried; pass it back to
    `household_from_profile` to restore it. person2 is not represented.
    """
    person = household.person1
    return Profile(
        current_age=person.current_age,
        retirement_age=person.retirement_age,
        life_expectancy=person.life_expectancy,
        private_pension_age=person.private_pension_age,
        state_pension_age=person.state_pension_age,
        state_pension_amount=household.state_pension_amount,
        is_scottish=person.is_scottish,
        tax_bracket_target=person.tax_bracket_target,
    )


def single_person_household(household: HouseholdProfile, person: str, state_pension_amount: float) -> HouseholdProfile:
    """Single-mode household for one member of a couple."""
    profile = household.people()[person]
    return HouseholdProfile(mode="single", person1=replace(profile), state_pension_amount=state_pension_amount)
