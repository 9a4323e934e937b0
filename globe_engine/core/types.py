# globe_engine/core/types.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, Tuple

import numpy as np

RGB = Tuple[int, int, int]
Vec3 = Tuple[float, float, float]


# =======================================================================
# КЛИМАТИЧЕСКИЕ ЗАПИСИ (неизменяемы после загрузки)
# =======================================================================

@dataclass(frozen=True)
class ClimateVariable:
    """Одна отслеживаемая величина региона (например, t2m)."""

    id: str
    name: str
    baseline: float  # °C, среднее за базовый период
    trend_per_year: float  # °C/год
    high_months: Tuple[str, ...] = ()  # месяцы 'YYYY-MM' с аномалией > +2σ
    low_months: Tuple[str, ...] = ()  # месяцы 'YYYY-MM' с аномалией < -2σ


@dataclass(frozen=True)
class ClimateRegion:
    name: str
    variables: Tuple[ClimateVariable, ...]

    def variable(self, variable_id: str) -> Optional[ClimateVariable]:
        for var in self.variables:
            if var.id == variable_id:
                return var
        return None


@dataclass(frozen=True)
class GeoAnchor:
    lat: float
    lon: float


@dataclass(frozen=True)
class RegionAnomaly:
    """Производная запись региона на конкретный год."""

    name: str
    baseline: float
    trend: float
    anomaly: float
    temperature: float
    high_extreme_count: int
    low_extreme_count: int
    anchor: Optional[GeoAnchor]


@dataclass(frozen=True)
class TimeSeriesPoint:
    year: int
    temperature: float
    anomaly: float


# =======================================================================
# ВЫБОР И СВОДКИ
# =======================================================================

@dataclass(frozen=True)
class Selection:
    lat: float
    lon: float
    region: Optional[str] = None
    value: Optional[float] = None


@dataclass(frozen=True)
class InsightStat:
    label: str
    value: str
    change: Optional[str] = None


@dataclass(frozen=True)
class YearInsight:
    year: int
    layer: str
    global_avg: float
    change_vs_baseline: float
    percentile: int
    stats: Tuple[InsightStat, ...]
    selection: Optional[Selection] = None
    region_detail: Optional[RegionAnomaly] = None


# =======================================================================
# ДЕСКРИПТОРЫ СЦЕНЫ (то, что ядро отдает наружу)
# =======================================================================

@dataclass(frozen=True)
class ScenePoint:
    position: Vec3
    color: RGB
    opacity: float
    value: float
    lat: float
    lon: float
    region: str


@dataclass(frozen=True, eq=False)
class HeatSurface:
    """
    Готовая сетка "теплового пузыря".
    Вершины и нормали в локальных координатах патча (ось +Z смотрит от сферы),
    transform переводит их в мировые координаты.
    """

    positions: np.ndarray  # (V, 3) float32
    normals: np.ndarray  # (V, 3) float32
    colors: np.ndarray  # (V, 4) float32, RGBA в [0..1]
    indices: np.ndarray  # (F, 3) uint32
    transform: np.ndarray  # (4, 4) float64
    temperature: float
    anomaly: float
    max_height: float

    def world_positions(self) -> np.ndarray:
        rot = self.transform[:3, :3]
        offset = self.transform[:3, 3]
        return (self.positions.astype(np.float64) @ rot.T + offset).astype(np.float32)

    def world_normals(self) -> np.ndarray:
        rot = self.transform[:3, :3]
        return (self.normals.astype(np.float64) @ rot.T).astype(np.float32)


@dataclass(frozen=True)
class SurfaceRecord:
    region: str
    mesh: HeatSurface

    @property
    def transform(self) -> np.ndarray:
        return self.mesh.transform


@dataclass(frozen=True)
class SceneFrame:
    year: int
    layer: str
    points: Tuple[ScenePoint, ...]
    surfaces: Tuple[SurfaceRecord, ...]
    metrics: Dict[str, Any] = field(default_factory=dict)

    def header(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "layer": self.layer,
            "points": len(self.points),
            "surfaces": len(self.surfaces),
        }


class ISceneComposer(Protocol):
    """Интерфейс внешнего компоновщика сцены (рендер живет снаружи ядра)."""

    def compose(self, frame: SceneFrame) -> None: ...
