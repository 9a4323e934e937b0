# ==============================================================================
# Файл: globe_engine/core/layers.py
# Назначение: Фиксированный перечень слоев глобуса (единицы, иконка, шкала).
# Ядро не содержит логики, завязанной на конкретный слой, кроме выбора шкалы.
# ==============================================================================
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

from .errors import ConfigurationError
from ..render.palettes import ColorScale

LAYER_ANOMALY = "anomaly"
LAYER_DROUGHT = "drought"
LAYER_FIRE_RISK = "fireRisk"
LAYER_IDS: Tuple[str, ...] = (LAYER_ANOMALY, LAYER_DROUGHT, LAYER_FIRE_RISK)


@dataclass(frozen=True)
class LayerConfig:
    id: str
    label: str
    unit: str
    icon: str
    description: str
    color_scale: ColorScale


# Сырые определения слоев. Шкалы проверяются при сборке LAYER_CONFIGS,
# поэтому ошибка в таблице всплывает сразу при импорте.
_RAW_LAYERS: Dict[str, Dict[str, Any]] = {
    LAYER_ANOMALY: {
        "label": "Temperature anomaly",
        "unit": "°C",
        "icon": "🌡️",
        "description": "Temperature difference from the reference period",
        "color_scale": [
            (-2.0, "#3b82f6"),
            (-1.0, "#60a5fa"),
            (0.0, "#fbbf24"),
            (2.0, "#f97316"),
            (4.0, "#dc2626"),
        ],
    },
    LAYER_DROUGHT: {
        "label": "Drought index",
        "unit": "index 0-1",
        "icon": "💧",
        "description": "Water stress level in affected regions",
        "color_scale": [
            (0.0, "#10b981"),
            (0.3, "#fbbf24"),
            (0.6, "#f97316"),
            (0.9, "#dc2626"),
        ],
    },
    LAYER_FIRE_RISK: {
        "label": "Fire risk",
        "unit": "low/medium/high",
        "icon": "🔥",
        "description": "Probability of wildfires",
        "color_scale": [
            (0.0, "#10b981"),
            (0.5, "#fbbf24"),
            (1.0, "#dc2626"),
        ],
    },
}

# Шкала абсолютной температуры для основания "теплового пузыря"
TEMPERATURE_SCALE_STOPS = [
    (-10.0, "#1e3a8a"),
    (0.0, "#38bdf8"),
    (10.0, "#a3e635"),
    (20.0, "#fbbf24"),
    (30.0, "#ef4444"),
]


def build_layer_config(layer_id: str, raw: Mapping[str, Any]) -> LayerConfig:
    """Собирает LayerConfig из словаря. Raises ConfigurationError."""
    for key in ("label", "unit", "icon", "color_scale"):
        if key not in raw:
            raise ConfigurationError(f"Layer '{layer_id}' is missing '{key}'")
    return LayerConfig(
        id=layer_id,
        label=str(raw["label"]),
        unit=str(raw["unit"]),
        icon=str(raw["icon"]),
        description=str(raw.get("description", "")),
        color_scale=ColorScale(raw["color_scale"]),
    )


LAYER_CONFIGS: Dict[str, LayerConfig] = {
    layer_id: build_layer_config(layer_id, raw) for layer_id, raw in _RAW_LAYERS.items()
}

TEMPERATURE_SCALE = ColorScale(TEMPERATURE_SCALE_STOPS)


def get_layer_config(layer_id: str) -> LayerConfig:
    try:
        return LAYER_CONFIGS[layer_id]
    except KeyError:
        raise ConfigurationError(
            f"Unknown layer '{layer_id}', expected one of {', '.join(LAYER_IDS)}"
        ) from None
