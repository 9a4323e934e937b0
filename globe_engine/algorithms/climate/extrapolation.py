# ==============================================================================
# Файл: globe_engine/algorithms/climate/extrapolation.py
# Назначение: Линейная экстраполяция температуры и аномалии на любой год.
# Все функции чистые: пересчет по требованию, без кэша и без ошибок.
# ==============================================================================
from __future__ import annotations
import logging
from typing import List

from ...core.constants import (
    DEFAULT_VARIABLE_ID,
    REFERENCE_YEAR,
    SERIES_END_YEAR,
    SERIES_START_YEAR,
)
from ...core.types import ClimateVariable, RegionAnomaly, TimeSeriesPoint
from ...data.anchors import get_region_anchor
from ...data.climate.store import ClimateRecordStore

logger = logging.getLogger(__name__)


def anomaly_for_year(baseline: float, trend_per_year: float, year: int) -> float:
    """
    trend * (year - REFERENCE_YEAR).
    baseline в формулу не входит, но остается в сигнатуре ради симметрии
    с temperature_for_year. Годы до опорного дают отрицательный сдвиг.
    """
    return trend_per_year * (year - REFERENCE_YEAR)


def temperature_for_year(baseline: float, trend_per_year: float, year: int) -> float:
    return baseline + anomaly_for_year(baseline, trend_per_year, year)


def extremes_in_year(variable: ClimateVariable, year: int) -> tuple[int, int]:
    """Сколько экстремальных месяцев (жарких, холодных) пришлось на данный год."""
    prefix = f"{int(year):04d}-"
    high = sum(1 for m in variable.high_months if m.startswith(prefix))
    low = sum(1 for m in variable.low_months if m.startswith(prefix))
    return high, low


def regions_with_anomalies(
        store: ClimateRecordStore,
        year: int,
        variable_id: str = DEFAULT_VARIABLE_ID,
) -> List[RegionAnomaly]:
    """
    Производные записи всех регионов на год в порядке хранилища.
    Регионы без нужной переменной пропускаются молча (это не ошибка).
    """
    result: List[RegionAnomaly] = []
    for region in store:
        var = region.variable(variable_id)
        if var is None:
            logger.debug("Region '%s' has no variable '%s', skipped", region.name, variable_id)
            continue
        result.append(
            RegionAnomaly(
                name=region.name,
                baseline=var.baseline,
                trend=var.trend_per_year,
                anomaly=anomaly_for_year(var.baseline, var.trend_per_year, year),
                temperature=temperature_for_year(var.baseline, var.trend_per_year, year),
                high_extreme_count=len(var.high_months),
                low_extreme_count=len(var.low_months),
                anchor=get_region_anchor(region.name),
            )
        )
    return result


def generate_time_series(
        store: ClimateRecordStore,
        region_name: str,
        variable_id: str = DEFAULT_VARIABLE_ID,
        start_year: int = SERIES_START_YEAR,
        end_year: int = SERIES_END_YEAR,
) -> List[TimeSeriesPoint]:
    """Ряд по годам включительно; пустой список, если региона или переменной нет."""
    var = store.get_region_variable(region_name, variable_id)
    if var is None:
        return []
    return [
        TimeSeriesPoint(
            year=year,
            temperature=temperature_for_year(var.baseline, var.trend_per_year, year),
            anomaly=anomaly_for_year(var.baseline, var.trend_per_year, year),
        )
        for year in range(int(start_year), int(end_year) + 1)
    ]
