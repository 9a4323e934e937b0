# ==============================================================================
# Файл: globe_engine/core/constants.py
# Назначение: Глобальные константы ядра (годы, радиусы глобуса, параметры
# "тепловых пузырей").
# ==============================================================================
from __future__ import annotations
from typing import Tuple

# =======================================================================
# ВРЕМЕННАЯ ОСЬ
# =======================================================================

# Единственный источник правды для экстраполяции: начало исторической записи.
# Подписи в старом UI говорили о периоде 1991-2020, но формула всегда
# отсчитывала от 1981 (см. DESIGN.md).
REFERENCE_YEAR = 1981

# Границы ползунка времени (используются только ViewContext)
MIN_YEAR = 1980
MAX_YEAR = 2035

# Подпись базового периода, если в метаданных набора данных её нет
BASELINE_PERIOD = "1981-2010"

# Диапазон по умолчанию для временных рядов
SERIES_START_YEAR = 1981
SERIES_END_YEAR = 2024

# Идентификатор переменной приземной температуры
DEFAULT_VARIABLE_ID = "t2m"

# =======================================================================
# ГЕОМЕТРИЯ ГЛОБУСА (в мировых единицах сцены)
# =======================================================================
GLOBE_RADIUS = 2.0
POINT_RADIUS = 2.08  # маркеры чуть выше поверхности
SURFACE_LIFT = 0.02  # основание пузыря приподнято над сферой

# Кольцо вспомогательных точек вокруг центра региона
RING_POINT_COUNT = 8
RING_SPREAD_DEG = 10.0
RING_JITTER = 0.3  # полный размах шума, т.е. +-0.15

# =======================================================================
# "ТЕПЛОВОЙ ПУЗЫРЬ" (heat blister)
# =======================================================================
HEAT_PATCH_RADIUS = 0.35
HEAT_PATCH_RESOLUTION = 24
HEAT_FALLOFF_EXPONENT = 2.8

HEAT_REFERENCE_C = 15.0
HEAT_MIN_HEIGHT = 0.18
HEAT_HEIGHT_PER_C = 0.07

# Аномалия нормируется на этот диапазон для смешивания с акцентным цветом
HEAT_ANOMALY_RANGE: Tuple[float, float] = (0.0, 2.0)
HEAT_ACCENT_HEX = "#ff3b1f"

# Края пузыря гаснут раньше номинальной границы диска
HEAT_EDGE_ALPHA_GAIN = 1.2

# =======================================================================
# ПРОЗРАЧНОСТЬ ТОЧЕК
# =======================================================================
OPACITY_FLOOR = 0.3
OPACITY_SPAN = 0.7
