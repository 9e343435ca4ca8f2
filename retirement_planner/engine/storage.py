# engine/storage.py
import json
import logging
import math
import os
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = "user_data/planner.json"
STORAGE_ENV_VAR = "RETIREMENT_PLANNER_DATA"


def storage_path_from_env() -> str:
    return os.environ.get(STORAGE_ENV_VAR) or DEFAULT_STORAGE_PATH


def ensure_user_data_dir(path: str) -> None:
    folder = os.path.dirname(path)
    if folder and not os.path.exists(folder):
        os.makedirs(folder, exist_ok=True)


def _sanitize_json_compat(value: Any):
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(value, dict):
        return {key: _sanitize_json_compat(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize_json_compat(item) for item in value]
    return value


def load_inputs(path: str) -> Dict[str, Any]:
    """Stored accounts/household/assumptions payload, or {} if none is usable."""
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_text = f.read().strip()
            if not raw_text:
                return {}
            data = json.loads(raw_text)
    except (json.JSONDecodeError, OSError):
        logger.warning("Ignoring unreadable planner data at %s", path)
        return {}
    if not isinstance(data, dict):
        return {}
    return _sanitize_json_compat(data)


def save_inputs(path: str, payload: Dict[str, Any]) -> None:
    ensure_user_data_dir(path)
    tmp_path = f"{path}.tmp"
    clean = _sanitize_json_compat(payload)
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(clean, f, allow_nan=False, indent=2)
    os.replace(tmp_path, path)
    logger.info("Saved planner data to %s", path)
