import pytest

from retirement_planner import api
from retirement_planner.engine.state import PlannerState


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(api, "planner_state", PlannerState(str(tmp_path / "planner.json")))
    api.app.config.update(TESTING=True)
    return api.app.test_client()


def test_health_and_cors(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_schema_lists_account_columns(client):
    payload = client.get("/api/schema").get_json()

    fields = [column["field"] for column in payload["accounts"]["columns"]]
    assert fields[:3] == ["Name", "Type", "Balance"]
    assert {item["value"] for item in payload["accountTypes"]} == {"workplace_pension", "sipp", "isa", "lisa", "gia"}
    assert "no_limit" in payload["taxBracketTargets"]


def test_accounts_round_trip(client):
    rows = [{"name": "My ISA", "type": "isa", "balance": 1000, "expectedReturn": 0.05, "id": "isa-1"}]

    saved = client.post("/api/accounts", json={"accounts": rows})
    fetched = client.get("/api/accounts").get_json()

    assert saved.status_code == 200
    assert fetched["accounts"][0]["id"] == "isa-1"
    assert fetched["accounts"][0]["expected_return"] == 0.05


@pytest.mark.parametrize(
    "body",
    [
        {"accounts": "nope"},
        {"accounts": [{"type": "isa"}]},
        {"accounts": [{"name": "X", "type": "crypto"}]},
    ],
)
def test_bad_accounts_are_rejected(client, body):
    response = client.post("/api/accounts", json=body)

    assert response.status_code == 400
    assert "error" in response.get_json()
    assert len(api.planner_state.accounts) == 2


def test_household_and_profile_endpoints(client):
    response = client.post(
        "/api/household",
        json={"mode": "couple", "person1": {"currentAge": 40}, "person2": {"currentAge": 37}},
    )
    assert response.status_code == 200
    household = client.get("/api/household").get_json()
    assert household["mode"] == "couple"
    assert household["person2"]["current_age"] == 37

    assert client.post("/api/household", json={"mode": "trio"}).status_code == 400

    client.post("/api/profile", json={"currentAge": 52, "statePensionAmount": 10000})
    profile = client.get("/api/profile").get_json()
    assert profile["current_age"] == 52
    assert profile["state_pension_amount"] == 10000
    assert client.get("/api/household").get_json()["mode"] == "single"


def test_assumptions_endpoint(client):
    client.post("/api/assumptions", json={"inflationRate": 0.02, "targetRetirementIncome": None})

    assumptions = client.get("/api/assumptions").get_json()

    assert assumptions["inflation_rate"] == 0.02
    assert assumptions["target_retirement_income"] is None


def test_projection_returns_both_phases(client):
    response = client.get("/api/projection?startYear=2030")
    payload = response.get_json()

    assert response.status_code == 200
    assert payload["accumulation"][0]["CalendarYear"] == 2030
    assert payload["accumulation"][0]["Phase"] == "accumulation"
    assert payload["retirement"][0]["Age"] == 60
    assert payload["summary"]["final_balance"] == pytest.approx(payload["accumulation"][-1]["TotalBalance"])


def test_projection_without_accounts(client):
    client.post("/api/accounts", json={"accounts": []})

    payload = client.get("/api/projection").get_json()

    assert payload == {"summary": None, "accumulation": [], "retirement": []}


def test_projection_rejects_bad_start_year(client):
    assert client.get("/api/projection?startYear=soon").status_code == 400


def test_reset(client):
    client.post("/api/accounts", json={"accounts": []})

    payload = client.post("/api/reset").get_json()

    assert len(payload["accounts"]) == 2
    assert payload["household"]["mode"] == "single"


def test_saved_accounts_survive_a_restart(client, tmp_path):
    rows = [
        {"name": "ISA", "type": "isa", "balance": 5000},
        {"name": "GIA", "type": "gia", "balance": 2000, "owner": "person2"},
    ]

    saved = client.post("/api/accounts", json={"accounts": rows}).get_json()["accounts"]
    reloaded = PlannerState(str(tmp_path / "planner.json"))

    assert len(reloaded.accounts) == len(saved) == 2
    assert [a.id for a in reloaded.accounts] == [row["id"] for row in saved]


@pytest.mark.parametrize("name", ["", "   ", None])
def test_unnamed_account_is_rejected(client, tmp_path, name):
    response = client.post("/api/accounts", json={"accounts": [{"name": name, "type": "isa", "balance": 5000}]})

    assert response.status_code == 400
    assert response.get_json() == {"error": "Account name is required."}
    assert len(PlannerState(str(tmp_path / "planner.json")).accounts) == 2


def test_editor_rows_are_accepted(client, tmp_path):
    rows = [
        {"Name": "Work", "Type": "workplace_pension", "Balance": 1000, "Expected Return (%)": 5, "Employer Contribution (%)": 3, "Salary for Match": 40000},
        {"Name": "", "Type": "isa"},
    ]

    response = client.post("/api/accounts", json={"rows": rows})

    assert response.status_code == 200
    reloaded = PlannerState(str(tmp_path / "planner.json")).accounts
    assert [(a.name, a.type) for a in reloaded] == [("Work", "workplace_pension")]
    assert reloaded[0].expected_return == pytest.approx(0.05)
    assert reloaded[0].employer_contribution == 3.0


def test_editor_rows_must_be_a_list(client):
    assert client.post("/api/accounts", json={"rows": {"Name": "x"}}).status_code == 400
