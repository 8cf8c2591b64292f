# engine/storage.py
import json
import logging
import math
import os
from typing import Any, Dict

logger = logging.getLogger(__name__)


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
    if isinstance(value, list):
        return [_sanitize_json_compat(item) for item in value]
    return value


def _parse_custom_value(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def load_custom_returns(path: str) -> Dict[int, float]:
    """Read the ``{"year": pct}`` map; blank entries and junk are dropped."""
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_text = f.read().strip()
            if not raw_text:
                return {}
            raw = json.loads(raw_text)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Could not read custom returns from %s: %s", path, exc)
        return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring custom returns in %s: expected an object", path)
        return {}

    res: Dict[int, float] = {}
    for key, value in raw.items():
        try:
            year = int(key)
        except (TypeError, ValueError):
            continue
        pct = _parse_custom_value(value)
        if pct is not None:
            res[year] = pct
    return res


def save_custom_returns(path: str, returns: Dict[int, float]) -> None:
    ensure_user_data_dir(path)
    tmp_path = f"{path}.tmp"
    clean = _sanitize_json_compat({str(year): value for year, value in sorted(returns.items())})
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(clean, f, allow_nan=False)
    os.replace(tmp_path, path)
    logger.info("Saved %d custom returns to %s", len(returns), path)
