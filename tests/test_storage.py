import json
import math

from retirement_planner.api import _sanitize_records
from retirement_planner.engine.storage import (
    DEFAULT_STORAGE_PATH,
    STORAGE_ENV_VAR,
    _sanitize_json_compat,
    load_inputs,
    save_inputs,
    storage_path_from_env,
)


def test_sanitize_json_compat_replaces_special_numbers():
    payload = {
        "float": math.nan,
        "list": [1, float("inf"), -float("inf")],
        "tuple": (2.5, math.nan),
        "nested": {"value": math.nan},
    }

    clean = _sanitize_json_compat(payload)

    assert clean == {
        "float": None,
        "list": [1, None, None],
        "tuple": [2.5, None],
        "nested": {"value": None},
    }


def test_save_inputs_persists_sanitized_values(tmp_path):
    path = tmp_path / "nested" / "planner.json"
    data = {"assumptions": {"inflation_rate": math.nan}, "accounts": [{"balance": float("inf")}]}

    save_inputs(str(path), data)

    with path.open("r", encoding="utf-8") as handle:
        stored = json.load(handle)

    assert stored == {"assumptions": {"inflation_rate": None}, "accounts": [{"balance": None}]}
    assert not (tmp_path / "nested" / "planner.json.tmp").exists()


def test_load_inputs_round_trip(tmp_path):
    path = tmp_path / "planner.json"
    save_inputs(str(path), {"household": {"mode": "single"}})

    assert load_inputs(str(path)) == {"household": {"mode": "single"}}


def test_load_inputs_tolerates_missing_empty_and_corrupt_files(tmp_path):
    missing = tmp_path / "missing.json"
    empty = tmp_path / "empty.json"
    empty.write_text("  ", encoding="utf-8")
    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    wrong_shape = tmp_path / "list.json"
    wrong_shape.write_text("[1, 2]", encoding="utf-8")

    for path in (missing, empty, corrupt, wrong_shape):
        assert load_inputs(str(path)) == {}


def test_storage_path_from_env(monkeypatch, tmp_path):
    monkeypatch.delenv(STORAGE_ENV_VAR, raising=False)
    assert storage_path_from_env() == DEFAULT_STORAGE_PATH

    monkeypatch.setenv(STORAGE_ENV_VAR, str(tmp_path / "custom.json"))
    assert storage_path_from_env() == str(tmp_path / "custom.json")


def test_sanitize_records_used_for_api_payloads():
    rows = [{"value": float("nan"), "other": 5, "label": "isa", "flag": True}]

    clean = _sanitize_records(rows)

    assert clean == [{"value": None, "other": 5, "label": "isa", "flag": True}]
