# ==============================================================================
# Файл: globe_engine/core/export/__init__.py
# Назначение: Точка входа в пакет для экспорта данных.
# ==============================================================================
from __future__ import annotations

from .image_exporters import render_layer_preview, write_layer_preview
from .json_exporters import frame_to_dict, write_scene_frame_json, write_time_series_json
from .numpy_exporters import read_surfaces_npz, write_surfaces_npz

__all__ = [
    "render_layer_preview",
    "write_layer_preview",
    "frame_to_dict",
    "write_scene_frame_json",
    "write_time_series_json",
    "read_surfaces_npz",
    "write_surfaces_npz",
]
