# ==============================================================================
# Файл: globe_engine/data/climate/store.py
# Назначение: Хранилище климатических записей. Только чтение после загрузки,
# производные величины здесь не кэшируются.
# ==============================================================================
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple

from ...core.constants import BASELINE_PERIOD
from ...core.types import ClimateRegion, ClimateVariable


@dataclass(frozen=True)
class ClimateMetadata:
    variables_available: Tuple[str, ...] = ()
    baseline_period: str = BASELINE_PERIOD
    notes: str = ""


@dataclass(frozen=True)
class ClimateRecordStore:
    """
    Неизменяемый набор регионов в порядке исходного документа.
    Безопасно читается из любого числа потоков.
    """

    regions: Tuple[ClimateRegion, ...]
    metadata: ClimateMetadata = field(default_factory=ClimateMetadata)

    def __post_init__(self):
        # Индекс по имени строим один раз; порядок задает только regions
        object.__setattr__(self, "_by_name", {r.name: r for r in self.regions})

    def __iter__(self) -> Iterator[ClimateRegion]:
        return iter(self.regions)

    def __len__(self) -> int:
        return len(self.regions)

    @property
    def region_names(self) -> Tuple[str, ...]:
        return tuple(r.name for r in self.regions)

    def get_region(self, name: str) -> Optional[ClimateRegion]:
        by_name: Dict[str, ClimateRegion] = self._by_name  # type: ignore[attr-defined]
        return by_name.get(name)

    def get_region_variable(self, region_name: str, variable_id: str) -> Optional[ClimateVariable]:
        region = self.get_region(region_name)
        if region is None:
            return None
        return region.variable(variable_id)
