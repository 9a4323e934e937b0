# ========================
# file: globe_engine/data/climate/__init__.py
# ========================
from .loader import DEFAULT_DATA_PATH, build_store, load_climate_data
from .store import ClimateMetadata, ClimateRecordStore

__all__ = [
    "DEFAULT_DATA_PATH",
    "build_store",
    "load_climate_data",
    "ClimateMetadata",
    "ClimateRecordStore",
]
