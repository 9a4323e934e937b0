# ==============================================================================
# Файл: globe_engine/numerics/geo.py
# Назначение: Проекция (широта, долгота, радиус) -> точка XYZ и нормаль к сфере.
# ВАЖНО: точки и пузыри обязаны использовать одну и ту же формулу, иначе
# маркер региона и его патч разъедутся.
# ==============================================================================
from __future__ import annotations
import math
from typing import Tuple

import numpy as np

from ..core.types import Vec3

EPS = 1e-12


def to_cartesian(lat: float, lon: float, radius: float) -> Vec3:
    """
    φ = (90 - lat)·π/180, θ = (lon + 180)·π/180
    x = -r·sinφ·cosθ, y = r·cosφ, z = r·sinφ·sinθ
    Ось Y смотрит на северный полюс, (0°, 0°) попадает на +X, (0°, 180°) на -X.
    """
    phi = (90.0 - lat) * (math.pi / 180.0)
    theta = (lon + 180.0) * (math.pi / 180.0)
    x = -(radius * math.sin(phi) * math.cos(theta))
    y = radius * math.cos(phi)
    z = radius * math.sin(phi) * math.sin(theta)
    return x, y, z


def to_cartesian_array(lats: np.ndarray, lons: np.ndarray, radius: float) -> np.ndarray:
    """Векторный вариант to_cartesian. Возвращает (N, 3) float64."""
    phi = (90.0 - np.asarray(lats, dtype=np.float64)) * (np.pi / 180.0)
    theta = (np.asarray(lons, dtype=np.float64) + 180.0) * (np.pi / 180.0)
    sin_phi = np.sin(phi)
    return np.stack(
        [
            -(radius * sin_phi * np.cos(theta)),
            radius * np.cos(phi),
            radius * sin_phi * np.sin(theta),
        ],
        axis=-1,
    )


def surface_normal(x: float, y: float, z: float) -> Vec3:
    """Единичный вектор от центра сферы к точке."""
    n = math.sqrt(x * x + y * y + z * z)
    if n < EPS:
        # Центр сферы: направление не определено, берем северный полюс
        return 0.0, 1.0, 0.0
    return x / n, y / n, z / n


def normalize_vectors(v: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(v, axis=-1, keepdims=True)
    return v / np.maximum(norm, 1e-9)


def anchor_frame(lat: float, lon: float, radius: float) -> Tuple[Vec3, Vec3]:
    """Позиция якоря и нормаль в ней одним вызовом."""
    pos = to_cartesian(lat, lon, radius)
    return pos, surface_normal(*pos)
