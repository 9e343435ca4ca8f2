"""REST backend for the retirement planner."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List

import pandas as pd
from flask import Flask, jsonify, request

from retirement_planner.data_model import (
    ACCOUNT_TYPE_LABELS,
    TAX_BRACKET_TARGETS,
    Account,
    AccountTableModel,
    Assumptions,
    HouseholdProfile,
    Profile,
    dataframe_to_accounts,
    profile_from_household,
)
from retirement_planner.engine.aggregate import accumulation_frame, retirement_frame
from retirement_planner.engine.projection import run_projection
from retirement_planner.engine.state import PlannerState

logger = logging.getLogger(__name__)

app = Flask(__name__)

planner_state = PlannerState()

ACCOUNT_MODEL = AccountTableModel()


def _is_nan(value: Any) -> bool:
    try:
        return not math.isfinite(value)
    except (TypeError, ValueError):
        return False


def _sanitize_records(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    clean_rows: List[Dict[str, Any]] = []
    for row in records:
        clean_rows.append({key: (None if _is_nan(value) else value) for key, value in row.items()})
    return clean_rows


def _bad_request(message: str):
    return jsonify({"error": message}), 400


@app.after_request
def apply_cors_headers(response):
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response


@app.get("/api/health")
def healthcheck():
    return jsonify({"status": "ok"})


@app.get("/api/schema")
def get_schema():
    payload = ACCOUNT_MODEL.to_payload()
    payload["defaults"] = _sanitize_records(payload["defaults"])
    return jsonify(
        {
            "accounts": payload,
            "accountTypes": [{"label": label, "value": value} for value, label in ACCOUNT_TYPE_LABELS.items()],
            "taxBracketTargets": list(TAX_BRACKET_TARGETS),
            "householdModes": ["single", "couple"],
        }
    )


@app.get("/api/accounts")
def get_accounts():
    return jsonify({"accounts": [account.to_dict() for account in planner_state.accounts]})


def _accounts_from_payload(payload: Dict[str, Any]) -> List[Account]:
    """Accounts from stored-shape records or from account editor rows.

    Editor rows skip blank names like any table editor; stored-shape records
    must each be named so that what is saved is what reloads.
    """
    if "rows" in payload:
        rows = payload["rows"]
        if not isinstance(rows, list):
            raise TypeError("Rows must be a list.")
        if not rows:
            return []
        return dataframe_to_accounts(pd.DataFrame(rows))

    records = payload.get("accounts")
    if not isinstance(records, list) or not all(isinstance(row, dict) for row in records):
        raise TypeError("Accounts must be a list.")
    for row in records:
        if not str(row.get("name", "") or "").strip():
            raise ValueError("Account name is required.")
    return [Account.from_dict(row) for row in records]


@app.post("/api/accounts")
def save_accounts():
    payload = request.get_json(silent=True) or {}
    try:
        accounts = _accounts_from_payload(payload)
    except KeyError as exc:
        return _bad_request(f"Account is missing field {exc.args[0]!r}.")
    except (TypeError, ValueError) as exc:
        return _bad_request(str(exc))
    planner_state.set_accounts(accounts)
    return jsonify({"message": "Accounts saved.", "accounts": [a.to_dict() for a in accounts]})


@app.get("/api/household")
def get_household():
    return jsonify(planner_state.household.to_dict())


@app.post("/api/household")
def save_household():
    payload = request.get_json(silent=True) or {}
    try:
        household = HouseholdProfile.from_dict(payload)
    except (TypeError, ValueError) as exc:
        return _bad_request(str(exc))
    planner_state.set_household(household)
    return jsonify({"message": "Household saved.", "household": household.to_dict()})


@app.get("/api/profile")
def get_profile():
    return jsonify(profile_from_household(planner_state.household).to_dict())


@app.post("/api/profile")
def save_profile():
    payload = request.get_json(silent=True) or {}
    try:
        profile = Profile.from_dict(payload)
    except (TypeError, ValueError) as exc:
        return _bad_request(str(exc))
    planner_state.set_profile(profile)
    return jsonify({"message": "Profile saved.", "household": planner_state.household.to_dict()})


@app.get("/api/assumptions")
def get_assumptions():
    return jsonify(planner_state.assumptions.to_dict())


@app.post("/api/assumptions")
def save_assumptions():
    payload = request.get_json(silent=True) or {}
    try:
        assumptions = Assumptions.from_dict(payload)
    except (TypeError, ValueError) as exc:
        return _bad_request(str(exc))
    planner_state.set_assumptions(assumptions)
    return jsonify({"message": "Assumptions saved.", "assumptions": assumptions.to_dict()})


@app.get("/api/projection")
def get_projection():
    try:
        start_year = int(request.args["startYear"]) if "startYear" in request.args else None
    except ValueError:
        return _bad_request("startYear must be an integer.")
    projection = run_projection(
        planner_state.accounts,
        planner_state.household,
        planner_state.assumptions,
        start_year=start_year,
    )
    if projection is None:
        return jsonify({"summary": None, "accumulation": [], "retirement": []})
    logger.info(
        "Projection run: %s accounts, %s mode",
        len(planner_state.accounts),
        planner_state.household.mode,
    )
    summary = projection.summary()
    return jsonify(
        {
            "summary": {key: (None if _is_nan(value) else value) for key, value in summary.items()},
            "accumulation": _sanitize_records(accumulation_frame(projection.accumulation).to_dict("records")),
            "retirement": _sanitize_records(retirement_frame(projection.retirement).to_dict("records")),
        }
    )


@app.post("/api/reset")
def reset_inputs():
    planner_state.reset()
    return jsonify({"message": "Inputs reset to defaults.", **planner_state.to_payload()})


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=False, port=8000)
