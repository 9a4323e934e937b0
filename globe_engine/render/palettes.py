# ==============================================================================
# Файл: globe_engine/render/palettes.py
# Назначение: Кусочно-линейные цветовые шкалы слоев и функции-мапперы
# "значение -> цвет / прозрачность".
# ==============================================================================
from __future__ import annotations
import logging
import math
import re
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np
from vispy.color import Colormap

from ..core.constants import OPACITY_FLOOR, OPACITY_SPAN
from ..core.errors import ConfigurationError
from ..core.types import RGB

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")

ColorLike = Union[str, Sequence[int]]


# =============================================================================
# === ПРЕОБРАЗОВАНИЯ ЦВЕТА ===
# =============================================================================

def hex_to_rgb(color: str) -> RGB:
    """'#rrggbb' -> (r, g, b). Некорректная строка - ошибка конфигурации."""
    m = _HEX_RE.match(str(color).strip())
    if not m:
        raise ConfigurationError(f"Color must be hex like '#RRGGBB', got {color!r}")
    return int(m.group(1), 16), int(m.group(2), 16), int(m.group(3), 16)


def rgb_to_hex(rgb: Sequence[int]) -> str:
    r, g, b = (int(c) for c in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def _round_half_up(x: float) -> int:
    # Как Math.round: 0.5 всегда вверх (round() в Python банковский)
    return int(math.floor(x + 0.5))


def _coerce_rgb(color: ColorLike) -> RGB:
    if isinstance(color, str):
        return hex_to_rgb(color)
    channels = tuple(int(c) for c in color)
    if len(channels) != 3 or any(c < 0 or c > 255 for c in channels):
        raise ConfigurationError(f"RGB color must be 3 channels in [0,255], got {color!r}")
    return channels  # type: ignore[return-value]


def lerp_rgb(c0: Sequence[int], c1: Sequence[int], t: float) -> RGB:
    """Покомпонентная линейная интерполяция двух цветов с округлением."""
    return (
        _round_half_up(c0[0] + (c1[0] - c0[0]) * t),
        _round_half_up(c0[1] + (c1[1] - c0[1]) * t),
        _round_half_up(c0[2] + (c1[2] - c0[2]) * t),
    )


# =============================================================================
# === ЦВЕТОВАЯ ШКАЛА ===
# =============================================================================

class ColorScale:
    """
    Упорядоченный набор опорных точек (value, rgb).
    Все проверки делаются в конструкторе: при запросах деления на ноль быть не может.
    """

    __slots__ = ("_values", "_colors")

    def __init__(self, breakpoints: Iterable[Tuple[float, ColorLike]]):
        stops = list(breakpoints)
        if len(stops) < 2:
            raise ConfigurationError("ColorScale needs at least two breakpoints")

        values: List[float] = []
        colors: List[RGB] = []
        for i, stop in enumerate(stops):
            try:
                value, color = stop
                value = float(value)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"ColorScale breakpoint #{i} is malformed: {stop!r}") from e
            if not math.isfinite(value):
                raise ConfigurationError(f"ColorScale breakpoint #{i} value must be finite")
            if values and value <= values[-1]:
                raise ConfigurationError(
                    f"ColorScale breakpoints must be strictly increasing: "
                    f"{value} after {values[-1]} (#{i})"
                )
            values.append(value)
            colors.append(_coerce_rgb(color))

        self._values: Tuple[float, ...] = tuple(values)
        self._colors: Tuple[RGB, ...] = tuple(colors)

    # --- доступ ---
    @property
    def values(self) -> Tuple[float, ...]:
        return self._values

    @property
    def colors(self) -> Tuple[RGB, ...]:
        return self._colors

    @property
    def vmin(self) -> float:
        return self._values[0]

    @property
    def vmax(self) -> float:
        return self._values[-1]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self):
        return iter(zip(self._values, self._colors))

    def __getitem__(self, idx: int) -> Tuple[float, RGB]:
        return self._values[idx], self._colors[idx]

    def __repr__(self) -> str:
        stops = ", ".join(f"({v:g}, {rgb_to_hex(c)})" for v, c in self)
        return f"ColorScale([{stops}])"


# =============================================================================
# === ФУНКЦИИ-МАППЕРЫ ===
# =============================================================================

def color_for(scale: ColorScale, value: float) -> RGB:
    """Цвет для значения: зажим на краях, внутри - линейная интерполяция."""
    values, colors = scale.values, scale.colors
    if value <= values[0]:
        return colors[0]
    if value >= values[-1]:
        return colors[-1]

    # Первая подходящая пара соседних опорных точек
    for i in range(len(values) - 1):
        lo, hi = values[i], values[i + 1]
        if lo <= value <= hi:
            t = (value - lo) / (hi - lo)
            return lerp_rgb(colors[i], colors[i + 1], t)

    # Сюда попадает только NaN: все сравнения ложны
    logger.debug("color_for: non-comparable value %r, falling back to first color", value)
    return colors[0]


def opacity_for(scale: ColorScale, value: float) -> float:
    """Прозрачность в [0.3, 1.0]: у слабых значений остается минимальная видимость."""
    normalized = (value - scale.vmin) / (scale.vmax - scale.vmin)
    if math.isnan(normalized):
        # NaN ведет себя как в color_for: нижний край шкалы
        normalized = 0.0
    return OPACITY_FLOOR + OPACITY_SPAN * min(max(normalized, 0.0), 1.0)


def map_values(scale: ColorScale, values: np.ndarray) -> np.ndarray:
    """
    Векторный вариант color_for для массивов значений.
    Возвращает float32 RGB в [0..1] той же формы + последняя ось 3.
    """
    v = np.asarray(values, dtype=np.float64)
    xs = np.asarray(scale.values, dtype=np.float64)
    cols = np.asarray(scale.colors, dtype=np.float64)

    idx = np.searchsorted(xs, v, side="right")
    idx0 = np.clip(idx - 1, 0, len(xs) - 1)
    idx1 = np.clip(idx, 0, len(xs) - 1)
    x0, x1 = xs[idx0], xs[idx1]
    c0, c1 = cols[idx0], cols[idx1]
    denom = np.where(x1 > x0, x1 - x0, 1.0)
    t = np.clip((v - x0) / denom, 0.0, 1.0)

    rgb = c0 * (1.0 - t)[..., None] + c1 * t[..., None]
    rgb = np.floor(rgb + 0.5)
    return np.clip(rgb / 255.0, 0.0, 1.0).astype(np.float32)


def make_colormap(scale: ColorScale) -> Colormap:
    """Colormap vispy с контрольными точками, нормированными в [0,1]."""
    span = scale.vmax - scale.vmin
    controls = [(v - scale.vmin) / span for v in scale.values]
    rgb = [[c / 255.0 for c in col] for col in scale.colors]
    return Colormap(rgb, controls=controls)
