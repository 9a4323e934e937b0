# ========================
# file: globe_engine/data/climate/validators.py
# ========================
from __future__ import annotations
import math
import re
from typing import Any, Dict, Sequence

from ...core.errors import LoadError

MONTH_TOKEN_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

# Допустимые имена полей: исходный формат и короткий
BASELINE_KEYS = ("baseline_1981_2010_c", "baseline_c")
TREND_KEYS = ("trend_c_per_year",)
HIGH_MONTHS_KEYS = ("high_anomaly_months_gt_2sigma", "high_months")
LOW_MONTHS_KEYS = ("low_anomaly_months_lt_minus_2sigma", "low_months")


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise LoadError(msg)


def pick_key(obj: Dict[str, Any], keys: Sequence[str]) -> str | None:
    for k in keys:
        if k in obj:
            return k
    return None


def _is_number(value: Any) -> bool:
    # bool - подкласс int, но числом в записи не считается
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(float(value))


def _validate_months(months: Any, where: str) -> None:
    _require(isinstance(months, list), f"{where} must be a list of 'YYYY-MM' strings")
    for j, token in enumerate(months):
        _require(
            isinstance(token, str) and MONTH_TOKEN_RE.match(token) is not None,
            f"{where}[{j}] must be a 'YYYY-MM' string, got {token!r}",
        )


def validate_variable(var: Any, where: str) -> None:
    _require(isinstance(var, dict), f"{where} must be an object")
    _require(isinstance(var.get("id"), str) and var["id"], f"{where}.id must be non-empty string")
    _require(isinstance(var.get("name", ""), str), f"{where}.name must be a string")

    bkey = pick_key(var, BASELINE_KEYS)
    _require(bkey is not None, f"{where} is missing baseline (one of {', '.join(BASELINE_KEYS)})")
    _require(_is_number(var[bkey]), f"{where}.{bkey} must be a finite number")

    tkey = pick_key(var, TREND_KEYS)
    _require(tkey is not None, f"{where} is missing trend_c_per_year")
    _require(_is_number(var[tkey]), f"{where}.{tkey} must be a finite number")

    extremes = var.get("extremes", {})
    _require(isinstance(extremes, dict), f"{where}.extremes must be an object")
    for keys in (HIGH_MONTHS_KEYS, LOW_MONTHS_KEYS):
        k = pick_key(extremes, keys)
        if k is not None:
            _validate_months(extremes[k], f"{where}.extremes.{k}")


def validate_document(doc: Any) -> None:
    """Basic structural validation of a climate record document.

    Raises LoadError on the first failing check.
    """
    _require(isinstance(doc, dict), "Climate document must be a JSON object")
    regions = doc.get("regions")
    _require(isinstance(regions, list), "'regions' must be a list")

    seen = set()
    for i, region in enumerate(regions):
        where = f"regions[{i}]"
        _require(isinstance(region, dict), f"{where} must be an object")
        name = region.get("name")
        _require(isinstance(name, str) and name, f"{where}.name must be non-empty string")
        _require(name not in seen, f"{where}.name '{name}' is duplicated")
        seen.add(name)

        variables = region.get("variables")
        _require(isinstance(variables, list), f"{where} ('{name}') is missing 'variables'")
        var_ids = set()
        for j, var in enumerate(variables):
            validate_variable(var, f"{where}.variables[{j}]")
            _require(var["id"] not in var_ids, f"{where}.variables[{j}].id '{var['id']}' is duplicated")
            var_ids.add(var["id"])

    meta = doc.get("metadata", {})
    _require(isinstance(meta, dict), "'metadata' must be an object")
    available = meta.get("variables_available", [])
    _require(
        isinstance(available, list) and all(isinstance(v, str) for v in available),
        "metadata.variables_available must be a list of strings",
    )
