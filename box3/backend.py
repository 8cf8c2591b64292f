"""REST backend for the box 3 wealth tax comparison."""

from __future__ import annotations

import io
import logging
import os
from typing import Any, Dict, List

from flask import Flask, jsonify, request, send_file

from box3.data_model import (
    REGIME_LABELS,
    REGIME_ORDER,
    RegimeConfigs,
    YearReturn,
    coerce_number,
    default_plan,
    get_default_configs,
    returns_from_mapping,
)
from box3.engine.aggregate import result_frame, summarize
from box3.engine.contributions import build_contributions_by_year, clamp_amount, total_contributed
from box3.engine.simulator import run_simulation
from box3.engine.state import CustomReturnsState
from box3.engine.storage import _sanitize_json_compat
from box3.market.data import (
    CPI_DATA,
    get_all_years,
    get_available_years,
    get_returns,
    list_indices,
)
from box3.market.ingestion import UploadError, build_template_workbook, parse_returns_file

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.getenv("BOX3_DATA_DIR", os.path.join(BASE_DIR, "user_data"))


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_log_level(name: str, default: str = "INFO") -> str:
    level = str(os.getenv(name, default)).strip().upper()
    return level if isinstance(logging.getLevelName(level), int) else default


LOG_LEVEL = _env_log_level("BOX3_LOG_LEVEL")
PORT = _env_int("BOX3_PORT", 8000)

CUSTOM_INDEX = "custom"
TEMPLATE_FILENAME = "box3_returns_template.xlsx"

logger = logging.getLogger(__name__)

app = Flask(__name__)

custom_state = CustomReturnsState(os.path.join(DATA_DIR, "custom_returns.json"))


class InvalidRequest(ValueError):
    pass


def _truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _extract_payload_value(payload: dict, *keys: str, default=None):
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return default


def _optional_int(value: Any, label: str) -> int | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidRequest(f"Invalid {label}.")


def _index_years(index_key: str) -> List[int]:
    if index_key == CUSTOM_INDEX:
        return custom_state.years()
    return get_available_years(index_key)


def _default_period(index_key: str) -> tuple[int | None, int | None]:
    years = _index_years(index_key) or get_available_years("sp500")
    if not years:
        return None, None
    start = default_plan()["defaultStartYear"]
    return (start if start in years else years[0]), years[-1]


def _resolve_index(index_key: str) -> str:
    if index_key == CUSTOM_INDEX:
        if not custom_state.has_data():
            raise InvalidRequest("No custom returns have been entered yet.")
        return index_key
    if not get_available_years(index_key):
        raise InvalidRequest(f"Unknown index: {index_key}")
    return index_key


def _resolve_returns(payload: dict, index_key: str, start_year: int, end_year: int) -> List[YearReturn]:
    explicit = payload.get("returns")
    if isinstance(explicit, dict):
        return returns_from_mapping(explicit, start_year, end_year)
    if index_key == CUSTOM_INDEX:
        return custom_state.as_series(start_year, end_year)
    return get_returns(index_key, start_year, end_year)


def _payload(data: Dict[str, Any]):
    return jsonify(_sanitize_json_compat(data))


def _year_keys(mapping: Dict[int, float]) -> Dict[str, float]:
    return {str(year): value for year, value in sorted(mapping.items())}


def _custom_payload() -> Dict[str, Any]:
    return {
        "returns": _year_keys(custom_state.get_all()),
        "years": sorted(set(get_all_years()) | set(custom_state.years())),
    }


@app.errorhandler(InvalidRequest)
def handle_bad_request(exc: InvalidRequest):
    return jsonify({"error": str(exc)}), 400


@app.errorhandler(UploadError)
def handle_upload_error(exc: UploadError):
    return jsonify({"error": str(exc)}), 400


@app.after_request
def apply_cors_headers(response):
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET,POST,DELETE,OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response


@app.get("/api/health")
def healthcheck():
    return jsonify({"status": "ok"})


@app.get("/api/schema")
def get_schema():
    start_year, end_year = _default_period("sp500")
    plan = default_plan()
    plan.update({"startYear": start_year, "endYear": end_year})
    indices = list_indices() + [{"key": CUSTOM_INDEX, "name": "Eigen data", "currency": "EUR"}]
    return jsonify(
        {
            "planDefaults": plan,
            "configs": get_default_configs(),
            "regimes": [{"key": sys.value, "label": REGIME_LABELS[sys]} for sys in REGIME_ORDER],
            "indices": indices,
        }
    )


@app.get("/api/indices")
def list_index_options():
    rows = []
    for item in list_indices():
        rows.append({**item, "years": get_available_years(item["key"])})
    return jsonify({"indices": rows})


@app.get("/api/returns")
def returns_endpoint():
    index_key = _resolve_index(request.args.get("index", "sp500"))
    default_start, default_end = _default_period(index_key)
    start_year = _optional_int(request.args.get("startYear"), "startYear") or default_start
    end_year = _optional_int(request.args.get("endYear"), "endYear") or default_end
    series = _resolve_returns({}, index_key, start_year, end_year)
    return jsonify({"index": index_key, "returns": [item.to_payload() for item in series]})


@app.get("/api/cpi")
def cpi_endpoint():
    return jsonify({"cpi": _year_keys(CPI_DATA)})


@app.get("/api/contributions")
def contributions_endpoint():
    start_year = _optional_int(request.args.get("startYear"), "startYear")
    end_year = _optional_int(request.args.get("endYear"), "endYear")
    if start_year is None or end_year is None or end_year < start_year:
        raise InvalidRequest("Selecteer een geldige periode.")
    base = clamp_amount(request.args.get("base", 0))
    cpi_enabled = _truthy(request.args.get("cpi", "false"))
    schedule = build_contributions_by_year(base, start_year, end_year, cpi_enabled)
    return jsonify(
        {
            "contributions": [
                {
                    "year": year,
                    "cpi": CPI_DATA.get(year, 0.0) if cpi_enabled and year > start_year else None,
                    "monthly": monthly,
                    "yearly": round(monthly * 12, 2),
                }
                for year, monthly in schedule.items()
            ],
            "totalContributed": total_contributed(schedule),
        }
    )


@app.post("/api/simulate")
def simulate():
    payload = request.get_json(silent=True) or {}
    plan = default_plan()

    index_key = str(_extract_payload_value(payload, "index", "indexKey", default=plan["index"]))
    explicit = payload.get("returns")
    if isinstance(explicit, dict):
        years = [item.year for item in returns_from_mapping(explicit)]
        default_start, default_end = (years[0], years[-1]) if years else (None, None)
    else:
        index_key = _resolve_index(index_key)
        default_start, default_end = _default_period(index_key)
    start_year = _optional_int(_extract_payload_value(payload, "startYear", "yearStart"), "startYear") or default_start
    end_year = _optional_int(_extract_payload_value(payload, "endYear", "yearEnd"), "endYear") or default_end

    start_capital = clamp_amount(coerce_number(_extract_payload_value(payload, "startCapital"), plan["startCapital"]))
    monthly = clamp_amount(_extract_payload_value(payload, "monthlyContribution", default=0.0))
    cpi_enabled = _truthy(payload.get("cpiEnabled", False))
    partner = payload.get("fiscalPartner")
    partner_multiplier = None if partner is None else (2 if _truthy(partner) else 1)

    configs = RegimeConfigs.from_mapping(payload.get("configs"), partner_multiplier=partner_multiplier)
    series = _resolve_returns(payload, index_key, start_year, end_year)
    contributions = (
        build_contributions_by_year(monthly, start_year, end_year, cpi_enabled)
        if start_year is not None and end_year is not None
        else {}
    )

    result = run_simulation(start_capital, series, configs, contributions)
    invested = start_capital + total_contributed(contributions)
    logger.info(
        "Simulated %s %s-%s (%d years), start capital %.2f",
        index_key,
        start_year,
        end_year,
        len(series),
        start_capital,
    )

    response: Dict[str, Any] = {
        "result": result.to_payload(),
        "summary": summarize(result, invested),
        "contributions": _year_keys(contributions),
        "totalInvested": invested,
        "configs": configs.to_payload(),
    }
    if _truthy(payload.get("includeTable", False)):
        response["table"] = result_frame(result).to_dict(orient="records")
    return _payload(response)


@app.get("/api/custom-returns")
def get_custom_returns():
    return jsonify(_custom_payload())


@app.post("/api/custom-returns")
def replace_custom_returns():
    payload = request.get_json(silent=True) or {}
    raw = payload.get("returns")
    if not isinstance(raw, dict):
        raise InvalidRequest("Returns must be an object keyed by year.")
    series = returns_from_mapping(raw)
    custom_state.replace({item.year: item.return_pct for item in series})
    return jsonify({"message": "Custom returns saved.", **_custom_payload()})


@app.delete("/api/custom-returns")
def clear_custom_returns():
    custom_state.clear()
    return jsonify({"message": "Custom returns cleared.", **_custom_payload()})


@app.post("/api/custom-returns/year")
def set_custom_year():
    payload = request.get_json(silent=True) or {}
    year = _optional_int(payload.get("year"), "year")
    raw_value = payload.get("return")
    value = None
    if raw_value is not None and raw_value != "":
        value = coerce_number(raw_value, None)
        if value is None:
            raise InvalidRequest("Invalid return.")
    if year is None:
        year = custom_state.add_year(value if value is not None else 0.0)
    else:
        custom_state.set_year(year, value)
    return jsonify({"year": year, **_custom_payload()})


@app.delete("/api/custom-returns/<int:year>")
def delete_custom_year(year: int):
    if year not in custom_state.get_all():
        return jsonify({"error": "Year not found."}), 404
    custom_state.remove_year(year)
    return jsonify({"message": "Year removed.", **_custom_payload()})


@app.post("/api/custom-returns/upload")
def upload_custom_returns():
    """Upload a spreadsheet of returns and store it as the custom series.

    Form fields:
      - file: multipart file (.xlsx or .csv) with Year and Return columns
    """
    if "file" not in request.files:
        raise InvalidRequest("Missing file")
    file = request.files["file"]
    filename = file.filename or "upload.xlsx"
    parsed = parse_returns_file(file.read(), filename)
    custom_state.replace(parsed.returns)
    return jsonify({"status": "imported", "upload": parsed.to_payload(), **_custom_payload()})


@app.get("/api/custom-returns/template")
def download_template():
    return send_file(
        io.BytesIO(build_template_workbook()),
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        as_attachment=True,
        download_name=TEMPLATE_FILENAME,
    )


def main() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.run(debug=False, port=PORT)


if __name__ == "__main__":
    main()
