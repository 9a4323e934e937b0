# globe_engine/world/context.py
from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional

from ..core.constants import DEFAULT_VARIABLE_ID, MAX_YEAR, MIN_YEAR
from ..core.layers import LAYER_ANOMALY, get_layer_config
from ..core.types import Selection


def clamp_year(year: int) -> int:
    return max(MIN_YEAR, min(MAX_YEAR, int(year)))


@dataclass(frozen=True)
class ViewContext:
    """
    Явное состояние просмотра (год, слой, выбор), которое хост передает в ядро.
    Само ядро состояния не хранит: новый год -> новый контекст.
    """

    year: int
    layer: str = LAYER_ANOMALY
    selection: Optional[Selection] = None
    variable_id: str = DEFAULT_VARIABLE_ID

    def __post_init__(self):
        get_layer_config(self.layer)

    def with_year(self, year: int) -> "ViewContext":
        """Новый контекст с годом, зажатым в диапазон ползунка времени."""
        return replace(self, year=clamp_year(year))

    def step_year(self, delta: int) -> "ViewContext":
        return self.with_year(self.year + int(delta))

    def with_layer(self, layer: str) -> "ViewContext":
        return replace(self, layer=layer)

    def with_selection(self, selection: Optional[Selection]) -> "ViewContext":
        return replace(self, selection=selection)
