# ==============================================================================
# Файл: globe_engine/numerics/heat_surface.py
# Назначение: Процедурная генерация "теплового пузыря" - дискового патча над
# сферой, у которого высота, цвет вершин и прозрачность краев кодируют
# температуру и аномалию региона.
# ==============================================================================
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from numba import njit

from ..core import constants as const
from ..core.errors import ConfigurationError
from ..core.layers import TEMPERATURE_SCALE
from ..core.types import HeatSurface
from ..render.palettes import ColorScale, color_for, hex_to_rgb
from .geo import anchor_frame
from .mesh_utils import build_grid, compose_transform, compute_vertex_normals, rotation_z_to

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeatSurfaceParams:
    """Параметры патча. Проверяются один раз при создании, а не на каждой вершине."""

    radius: float = const.HEAT_PATCH_RADIUS
    resolution: int = const.HEAT_PATCH_RESOLUTION
    exponent: float = const.HEAT_FALLOFF_EXPONENT
    reference_c: float = const.HEAT_REFERENCE_C
    min_height: float = const.HEAT_MIN_HEIGHT
    height_per_c: float = const.HEAT_HEIGHT_PER_C
    anomaly_range: Tuple[float, float] = const.HEAT_ANOMALY_RANGE
    accent_hex: str = const.HEAT_ACCENT_HEX
    edge_alpha_gain: float = const.HEAT_EDGE_ALPHA_GAIN
    anchor_radius: float = const.GLOBE_RADIUS + const.SURFACE_LIFT

    def __post_init__(self):
        if not float(self.radius) > 0.0:
            raise ConfigurationError(f"Heat surface radius must be > 0, got {self.radius}")
        if int(self.resolution) < 1 or int(self.resolution) != self.resolution:
            raise ConfigurationError(f"Heat surface resolution must be an integer >= 1, got {self.resolution}")
        if not float(self.exponent) > 1.0:
            raise ConfigurationError(f"Falloff exponent must be > 1, got {self.exponent}")
        if not float(self.min_height) > 0.0:
            raise ConfigurationError("min_height must be > 0")
        lo, hi = self.anomaly_range
        if not hi > lo:
            raise ConfigurationError(f"anomaly_range must be increasing, got {self.anomaly_range}")
        # Заодно проверяем формат акцентного цвета
        hex_to_rgb(self.accent_hex)


def max_height_for(temperature: float, params: HeatSurfaceParams) -> float:
    """Чем теплее регион, тем выше купол; ниже опорной температуры - минимум."""
    if temperature > params.reference_c:
        return max(params.min_height, params.min_height + (temperature - params.reference_c) * params.height_per_c)
    return params.min_height


def anomaly_factor(anomaly: float, params: HeatSurfaceParams) -> float:
    lo, hi = params.anomaly_range
    return min(max((anomaly - lo) / (hi - lo), 0.0), 1.0)


@njit(cache=True)
def _heat_surface_kernel(
        xs: np.ndarray,
        ys: np.ndarray,
        radius: float,
        max_height: float,
        exponent: float,
        edge_alpha_gain: float,
        base_rgb: np.ndarray,
        tip_rgb: np.ndarray,
        out_z: np.ndarray,
        out_rgba: np.ndarray,
):
    """
    Проход по вершинам: высота купола, цвет (основание -> вершина) и альфа.
    Вне диска вершина остается плоской и полностью прозрачной.
    """
    r2 = radius * radius
    for i in range(xs.shape[0]):
        d2 = xs[i] * xs[i] + ys[i] * ys[i]
        if d2 <= r2:
            base = 1.0 - d2 / r2
            z = max_height * base ** exponent
            t = z / max_height
            for c in range(3):
                out_rgba[i, c] = base_rgb[c] + (tip_rgb[c] - base_rgb[c]) * t
            alpha = base * edge_alpha_gain
            if alpha > 1.0:
                alpha = 1.0
            elif alpha < 0.0:
                alpha = 0.0
            out_rgba[i, 3] = alpha
            out_z[i] = z
        else:
            out_z[i] = 0.0
            for c in range(3):
                out_rgba[i, c] = base_rgb[c]
            out_rgba[i, 3] = 0.0


class HeatSurfaceGenerator:
    """
    Генератор патчей. Детерминирован: одинаковые (temperature, anomaly, lat, lon)
    и параметры дают побитово одинаковые буферы. Патч всегда строится заново.
    """

    def __init__(self, params: Optional[HeatSurfaceParams] = None, color_scale: Optional[ColorScale] = None):
        self.params = params or HeatSurfaceParams()
        self.color_scale = color_scale if color_scale is not None else TEMPERATURE_SCALE
        self._accent = np.asarray(hex_to_rgb(self.params.accent_hex), dtype=np.float64) / 255.0

        # Топология не зависит от входных данных - строим один раз
        self._xs, self._ys, self._indices = build_grid(self.params.radius, int(self.params.resolution))
        self._indices.setflags(write=False)

    @property
    def vertex_count(self) -> int:
        return self._xs.shape[0]

    @property
    def triangle_count(self) -> int:
        return self._indices.shape[0]

    def vertex_colors(self, temperature: float, anomaly: float) -> Tuple[np.ndarray, np.ndarray]:
        """Цвет основания (по шкале температуры) и цвет вершины купола (с акцентом аномалии)."""
        base_rgb = np.asarray(color_for(self.color_scale, temperature), dtype=np.float64) / 255.0
        k = anomaly_factor(anomaly, self.params)
        tip_rgb = base_rgb + (self._accent - base_rgb) * k
        return base_rgb, tip_rgb

    def generate(self, temperature: float, anomaly: float, lat: float, lon: float) -> HeatSurface:
        p = self.params
        max_height = max_height_for(temperature, p)
        base_rgb, tip_rgb = self.vertex_colors(temperature, anomaly)

        n_verts = self.vertex_count
        z = np.empty(n_verts, dtype=np.float64)
        rgba = np.empty((n_verts, 4), dtype=np.float64)
        _heat_surface_kernel(
            self._xs, self._ys, float(p.radius), float(max_height), float(p.exponent),
            float(p.edge_alpha_gain), base_rgb, tip_rgb, z, rgba,
        )

        positions = np.stack([self._xs, self._ys, z], axis=1).astype(np.float32)
        # Нормали только после того, как все высоты выставлены
        normals = compute_vertex_normals(positions, self._indices)

        anchor_pos, anchor_normal = anchor_frame(lat, lon, p.anchor_radius)
        transform = compose_transform(rotation_z_to(anchor_normal), anchor_pos)

        logger.debug(
            "Heat surface at (%.2f, %.2f): T=%.2f°C, anomaly=%.2f°C, max_height=%.3f",
            lat, lon, temperature, anomaly, max_height,
        )
        return HeatSurface(
            positions=positions,
            normals=normals,
            colors=rgba.astype(np.float32),
            indices=self._indices,
            transform=transform,
            temperature=float(temperature),
            anomaly=float(anomaly),
            max_height=float(max_height),
        )
