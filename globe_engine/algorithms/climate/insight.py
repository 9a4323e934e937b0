# ==============================================================================
# Файл: globe_engine/algorithms/climate/insight.py
# Назначение: Сводка по году и слою для информационной панели (числа, без текста
# интерпретации - формулировки остаются на стороне UI).
# ==============================================================================
from __future__ import annotations
import logging
import math
from typing import List, Optional

from ...core.constants import DEFAULT_VARIABLE_ID, SERIES_END_YEAR, SERIES_START_YEAR
from ...core.layers import LAYER_DROUGHT, LAYER_FIRE_RISK, get_layer_config
from ...core.types import InsightStat, RegionAnomaly, Selection, YearInsight
from ...data.climate.store import ClimateRecordStore
from .extrapolation import regions_with_anomalies
from .layers import global_average_anomaly, layer_value

logger = logging.getLogger(__name__)

# Опорные значения индексов, относительно которых считается изменение
DROUGHT_BASELINE = 0.35
FIRE_RISK_BASELINE = 0.4


def year_percentile(year: int) -> int:
    """Положение года внутри исторической записи, в процентах (за ее пределами - <0 или >100)."""
    span = SERIES_END_YEAR - SERIES_START_YEAR
    return int(math.floor((year - SERIES_START_YEAR) / span * 100 + 0.5))


def _count_above(records: List[RegionAnomaly], threshold: float) -> int:
    return sum(1 for r in records if r.anomaly > threshold)


def year_insight(
        store: ClimateRecordStore,
        year: int,
        layer_id: str,
        selection: Optional[Selection] = None,
        variable_id: str = DEFAULT_VARIABLE_ID,
) -> YearInsight:
    get_layer_config(layer_id)
    records = regions_with_anomalies(store, year, variable_id)
    avg_anomaly = global_average_anomaly(records)

    region_detail = None
    if selection is not None and selection.region:
        region_detail = next((r for r in records if r.name == selection.region), None)
        if region_detail is None:
            logger.debug("Selected region '%s' has no '%s' record", selection.region, variable_id)

    global_avg = layer_value(layer_id, avg_anomaly)

    if layer_id == LAYER_DROUGHT:
        change = (global_avg - DROUGHT_BASELINE) / DROUGHT_BASELINE
        stats = (
            InsightStat("Global index", f"{global_avg * 100:.0f}%"),
            InsightStat("Thermal anomaly", f"{avg_anomaly:+.2f}°C"),
            InsightStat("Affected regions", str(_count_above(records, 1.0))),
        )
    elif layer_id == LAYER_FIRE_RISK:
        change = (global_avg - FIRE_RISK_BASELINE) / FIRE_RISK_BASELINE
        stats = (
            InsightStat("Average risk", f"{global_avg * 100:.0f}%"),
            InsightStat("Base anomaly", f"{avg_anomaly:+.2f}°C"),
            InsightStat("Critical zones", str(_count_above(records, 1.5))),
        )
    else:
        change = global_avg
        stats = (
            InsightStat("Average anomaly", f"{global_avg:+.2f}°C", change=f"{global_avg / 2 * 100:+.0f}%"),
            InsightStat("Monitored regions", str(len(records))),
            InsightStat("Recorded extremes", str(sum(r.high_extreme_count for r in records))),
        )

    return YearInsight(
        year=int(year),
        layer=layer_id,
        global_avg=global_avg,
        change_vs_baseline=change,
        percentile=year_percentile(year),
        stats=stats,
        selection=selection,
        region_detail=region_detail,
    )
