# ==============================================================================
# Файл: globe_engine/algorithms/climate/layers.py
# Назначение: Значение слоя из аномалии и выборка точек слоя вокруг регионов.
# ==============================================================================
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import List, Sequence

from ...core import constants as const
from ...core.layers import LAYER_DROUGHT, LAYER_FIRE_RISK, get_layer_config
from ...core.types import RegionAnomaly
from ...numerics.stateless_rng import derive_seed, jitter


@dataclass(frozen=True)
class LayerSample:
    lat: float
    lon: float
    value: float
    region: str


def _clamp01(x: float) -> float:
    return min(max(x, 0.0), 1.0)


def layer_value(layer_id: str, anomaly: float) -> float:
    """
    Производные индексы растут вместе с температурной аномалией.
    anomaly  -> как есть (°C)
    drought  -> clamp(anomaly/4 + 0.3)
    fireRisk -> clamp(anomaly/3 + 0.4)
    """
    get_layer_config(layer_id)  # неизвестный слой - ConfigurationError
    if layer_id == LAYER_DROUGHT:
        return _clamp01(anomaly / 4.0 + 0.3)
    if layer_id == LAYER_FIRE_RISK:
        return _clamp01(anomaly / 3.0 + 0.4)
    return anomaly


def layer_samples(
        records: Sequence[RegionAnomaly],
        year: int,
        layer_id: str,
        ring_points: int = const.RING_POINT_COUNT,
        spread_deg: float = const.RING_SPREAD_DEG,
) -> List[LayerSample]:
    """
    Для каждого региона с якорем: центральная точка и кольцо из ring_points
    точек с небольшим детерминированным разбросом значения.
    Регионы без якоря на глобус не попадают.
    """
    samples: List[LayerSample] = []
    for rec in records:
        if rec.anchor is None:
            continue
        lat, lon = rec.anchor.lat, rec.anchor.lon
        value = layer_value(layer_id, rec.anomaly)
        samples.append(LayerSample(lat=lat, lon=lon, value=value, region=rec.name))

        seed = derive_seed(int(year), f"{rec.name}/{layer_id}")
        for i in range(ring_points):
            angle = (i / ring_points) * math.pi * 2.0
            samples.append(
                LayerSample(
                    lat=lat + math.cos(angle) * spread_deg,
                    lon=lon + math.sin(angle) * spread_deg,
                    value=value + jitter(i, int(year), seed, const.RING_JITTER),
                    region=rec.name,
                )
            )
    return samples


def global_average_anomaly(records: Sequence[RegionAnomaly]) -> float:
    if not records:
        return 0.0
    return sum(r.anomaly for r in records) / len(records)

