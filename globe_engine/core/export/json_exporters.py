# ==============================================================================
# Файл: globe_engine/core/export/json_exporters.py
# Назначение: Запись кадра сцены и временных рядов в JSON.
# ==============================================================================
from __future__ import annotations
import dataclasses
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Sequence

import numpy as np

from ..types import SceneFrame, TimeSeriesPoint
from ...render.palettes import rgb_to_hex

logger = logging.getLogger(__name__)


def _ensure_path_exists(path: str) -> None:
    """Убеждается, что директория для файла существует."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def _default_serializer(o):
    if dataclasses.is_dataclass(o):
        return dataclasses.asdict(o)
    if isinstance(o, np.integer): return int(o)
    if isinstance(o, np.floating): return float(o)
    if isinstance(o, np.ndarray): return o.tolist()
    raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


def _atomic_write_json(path: str, data: Any) -> None:
    """Атомарно записывает данные в JSON файл для предотвращения битых файлов."""
    path = str(path)
    _ensure_path_exists(path)
    tmp_path = path + ".tmp"
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2, default=_default_serializer)
    os.replace(tmp_path, path)
    logger.debug("JSON file saved: %s", path)


def frame_to_dict(frame: SceneFrame, surfaces_file: str | None = None) -> Dict[str, Any]:
    """Легковесное описание кадра: точки целиком, пузыри - только заголовки."""
    points: List[Dict[str, Any]] = [
        {
            "position": [float(c) for c in p.position],
            "color": rgb_to_hex(p.color),
            "opacity": round(float(p.opacity), 4),
            "value": float(p.value),
            "lat": float(p.lat),
            "lon": float(p.lon),
            "region": p.region,
        }
        for p in frame.points
    ]
    surfaces = [
        {
            "region": s.region,
            "temperature": s.mesh.temperature,
            "anomaly": s.mesh.anomaly,
            "max_height": s.mesh.max_height,
            "vertices": int(s.mesh.positions.shape[0]),
            "triangles": int(s.mesh.indices.shape[0]),
            "transform": s.transform.tolist(),
        }
        for s in frame.surfaces
    ]
    data = {**frame.header(), "points": points, "surfaces": surfaces, "metrics": dict(frame.metrics)}
    if surfaces_file:
        data["files"] = {"surfaces": surfaces_file}
    return data


def write_scene_frame_json(path: str, frame: SceneFrame, surfaces_file: str | None = None) -> None:
    _atomic_write_json(path, frame_to_dict(frame, surfaces_file))


def write_time_series_json(path: str, region: str, series: Sequence[TimeSeriesPoint]) -> None:
    _atomic_write_json(path, {"region": region, "series": [dataclasses.asdict(p) for p in series]})
