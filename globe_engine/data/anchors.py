# ==============================================================================
# Файл: globe_engine/data/anchors.py
# Назначение: Статическая таблица географических якорей регионов.
# Это забота визуализации, а не научной записи: связь только по имени.
# ==============================================================================
from __future__ import annotations
from typing import Dict, Optional

from ..core.types import GeoAnchor

REGION_ANCHORS: Dict[str, GeoAnchor] = {
    "Sudamérica": GeoAnchor(lat=-15.0, lon=-60.0),
    "Centroamérica": GeoAnchor(lat=15.0, lon=-85.0),
    "Europa": GeoAnchor(lat=50.0, lon=15.0),
}


def get_region_anchor(region_name: str) -> Optional[GeoAnchor]:
    return REGION_ANCHORS.get(region_name)
