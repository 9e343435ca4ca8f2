import pandas as pd
import pytest

from retirement_planner.data_model import (
    ACCOUNT_TYPES,
    Account,
    AccountTableModel,
    Assumptions,
    HouseholdProfile,
    Profile,
    dataframe_to_accounts,
    default_accounts,
    default_household,
    household_from_profile,
    profile_from_household,
    records_to_accounts,
)
from retirement_planner.data_model.profile import FULL_STATE_PENSION_ANNUAL, PersonProfile


@pytest.mark.parametrize(
    "account_type, treatment",
    [
        ("workplace_pension", "pension"),
        ("sipp", "pension"),
        ("isa", "isa"),
        ("lisa", "lisa"),
        ("gia", "taxable"),
    ],
)
def test_every_account_type_has_a_treatment(account_type, treatment):
    account = Account(name="x", type=account_type)

    assert account.tax_treatment() == treatment
    assert account.label()
    assert account.is_pension() == (treatment == "pension")
    assert account.is_tax_free() == (account_type in ("isa", "lisa"))


def test_account_from_dict_accepts_camel_case_and_generates_ids():
    first = Account.from_dict({"name": "Pot", "type": "SIPP", "annualContribution": "1200", "employerContribution": ""})
    second = Account.from_dict({"name": "Pot", "type": "sipp"})

    assert first.type == "sipp"
    assert first.annual_contribution == 1200.0
    assert first.employer_contribution is None
    assert first.owner_or_default() == "person1"
    assert first.id != second.id


@pytest.mark.parametrize("data", [{"name": "x", "type": "bonds"}, {"name": "x", "type": "isa", "owner": "person3"}])
def test_account_from_dict_rejects_unknown_values(data):
    with pytest.raises(ValueError):
        Account.from_dict(data)


def test_records_to_accounts_skips_unnamed_rows():
    accounts = records_to_accounts([{"name": "", "type": "isa"}, {"name": "GIA", "type": "gia", "owner": "person2"}])

    assert [(a.name, a.owner) for a in accounts] == [("GIA", "person2")]


def test_editor_rows_parse_percentages():
    model = AccountTableModel()
    df = model.create_default_df()

    accounts = dataframe_to_accounts(df)

    assert [a.type for a in accounts] == ["workplace_pension", "isa"]
    assert accounts[0].expected_return == pytest.approx(0.07)
    assert accounts[0].contribution_growth_rate == pytest.approx(0.02)
    assert accounts[0].employer_contribution == pytest.approx(5.0)
    assert accounts[0].owner is None


def test_editor_rows_with_blank_optional_cells():
    df = pd.DataFrame(
        [
            {"Name": "LISA", "Type": "lisa", "Balance": 100.0, "Employer Contribution (%)": float("nan"), "Owner": None},
            {"Name": " ", "Type": "isa"},
        ]
    )

    accounts = dataframe_to_accounts(df)

    assert len(accounts) == 1
    assert accounts[0].employer_contribution is None
    assert accounts[0].salary_for_match is None


def test_table_schema_covers_every_account_type():
    type_column = next(col for col in AccountTableModel().columns if col.field == "Type")

    assert type_column.options == list(ACCOUNT_TYPES)


def test_default_accounts_are_fresh_objects():
    first = default_accounts()
    first[0].balance = 0.0

    second = default_accounts()

    assert second[0].balance == 50_000.0
    assert first[0].id != second[0].id


def test_household_from_dict_defaults():
    single = HouseholdProfile.from_dict({})
    couple = HouseholdProfile.from_dict({"mode": "couple"})

    assert single.people().keys() == {"person1"}
    assert single.state_pension_amount == pytest.approx(FULL_STATE_PENSION_ANNUAL)
    assert couple.is_couple
    assert couple.person2.current_age == 33
    assert couple.state_pension_amount == pytest.approx(2 * FULL_STATE_PENSION_ANNUAL)


def test_household_rejects_unknown_mode_and_bracket():
    with pytest.raises(ValueError):
        HouseholdProfile.from_dict({"mode": "group"})
    with pytest.raises(ValueError):
        HouseholdProfile.from_dict({"person1": {"taxBracketTarget": "top_rate"}})


def test_household_round_trips_through_dict():
    household = default_household("couple")

    assert HouseholdProfile.from_dict(household.to_dict()) == household


def test_couple_mode_without_partner_behaves_as_single():
    household = HouseholdProfile(mode="couple", person1=PersonProfile(), person2=None)

    assert not household.is_couple
    assert list(household.people()) == ["person1"]


def test_legacy_profile_adapters_round_trip():
    profile = Profile.from_dict({"currentAge": 48, "isScottish": True, "taxBracketTarget": "higher_rate"})

    household = household_from_profile(profile)

    assert household.mode == "single"
    assert household.person1.is_scottish
    assert profile_from_household(household) == profile


def test_assumptions_from_dict():
    assumptions = Assumptions.from_dict({"inflationRate": "0.025", "targetRetirementIncome": ""})

    assert assumptions.inflation_rate == 0.025
    assert assumptions.target_retirement_income is None
    assert assumptions.safe_withdrawal_rate == 0.04
    assert assumptions.inflate_tax_bands is True


def test_person_pension_access():
    person = PersonProfile(private_pension_age=57)

    assert not person.can_access_pension(56)
    assert person.can_access_pension(57)


@pytest.mark.parametrize(
    "raw, expected",
    [("false", False), ("False", False), ("0", False), ("no", False), ("", False), ("true", True), ("1", True), (True, True), (0, False)],
)
def test_flags_parse_strings(raw, expected):
    assert Assumptions.from_dict({"inflateTaxBands": raw}).inflate_tax_bands is expected
    assert PersonProfile.from_dict({"isScottish": raw}).is_scottish is expected
    assert Profile.from_dict({"is_scottish": raw}).is_scottish is expected


def test_unrecognised_flag_text_is_rejected():
    with pytest.raises(ValueError):
        Assumptions.from_dict({"inflate_tax_bands": "maybe"})


def test_profile_round_trip_keeps_name_when_supplied():
    household = HouseholdProfile(mode="single", person1=PersonProfile(name="Alex", current_age=41))

    profile = profile_from_household(household)

    assert household_from_profile(profile).person1.name == "Person 1"
    assert household_from_profile(profile, name="Alex") == household


def test_editor_rows_with_missing_cells_are_not_read_as_nan():
    df = pd.DataFrame([{"Name": "ISA", "Type": "isa", "Id": "keep"}, {"Type": "gia", "Balance": 10.0}])

    accounts = dataframe_to_accounts(df)

    assert [(a.id, a.name, a.balance) for a in accounts] == [("keep", "ISA", 0.0)]
