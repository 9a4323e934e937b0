# ========================
# file: globe_engine/data/climate/loader.py
# ========================
from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Union

from ...core.constants import BASELINE_PERIOD
from ...core.errors import LoadError
from ...core.types import ClimateRegion, ClimateVariable
from .store import ClimateMetadata, ClimateRecordStore
from .validators import (
    BASELINE_KEYS,
    HIGH_MONTHS_KEYS,
    LOW_MONTHS_KEYS,
    TREND_KEYS,
    pick_key,
    validate_document,
)

logger = logging.getLogger(__name__)

# Набор данных, поставляемый вместе с пакетом
DEFAULT_DATA_PATH = Path(__file__).resolve().parent / "climate-data.json"


def _load_json_file(path: Union[str, os.PathLike]) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise LoadError(f"Cannot read climate data file '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise LoadError(f"Climate data file '{path}' is not valid JSON: {e}") from e


def _build_variable(raw: Dict[str, Any]) -> ClimateVariable:
    extremes = raw.get("extremes", {})
    high_key = pick_key(extremes, HIGH_MONTHS_KEYS)
    low_key = pick_key(extremes, LOW_MONTHS_KEYS)
    return ClimateVariable(
        id=raw["id"],
        name=raw.get("name", raw["id"]),
        baseline=float(raw[pick_key(raw, BASELINE_KEYS)]),
        trend_per_year=float(raw[pick_key(raw, TREND_KEYS)]),
        high_months=tuple(extremes[high_key]) if high_key else (),
        low_months=tuple(extremes[low_key]) if low_key else (),
    )


def build_store(doc: Dict[str, Any]) -> ClimateRecordStore:
    """Проверяет документ и собирает из него неизменяемое хранилище."""
    validate_document(doc)

    regions = tuple(
        ClimateRegion(
            name=r["name"],
            variables=tuple(_build_variable(v) for v in r["variables"]),
        )
        for r in doc["regions"]
    )
    meta = doc.get("metadata", {})
    metadata = ClimateMetadata(
        variables_available=tuple(meta.get("variables_available", ())),
        baseline_period=str(meta.get("baseline_period", BASELINE_PERIOD)),
        notes=str(meta.get("notes", "")),
    )
    return ClimateRecordStore(regions=regions, metadata=metadata)


def load_climate_data(source: Union[str, os.PathLike, Dict[str, Any], None] = None) -> ClimateRecordStore:
    """Load climate records from a JSON path or a raw dict.

    Args:
        source: path to a JSON document, an already parsed dict, or None for
            the dataset bundled with the package.
    Returns:
        ClimateRecordStore, read-only for the rest of the process lifetime.
    Raises:
        LoadError: malformed or incomplete records (fails before any rendering).
    """
    if source is None:
        source = DEFAULT_DATA_PATH

    if isinstance(source, dict):
        doc = source
        origin = "<dict>"
    elif isinstance(source, (str, os.PathLike)):
        doc = _load_json_file(source)
        origin = str(source)
    else:
        raise TypeError("source must be a path, a dict or None")

    store = build_store(doc)
    logger.info(
        "Loaded %d climate regions from %s (baseline period %s)",
        len(store), origin, store.metadata.baseline_period,
    )
    return store
