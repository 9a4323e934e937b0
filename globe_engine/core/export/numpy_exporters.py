# ==============================================================================
# Файл: globe_engine/core/export/numpy_exporters.py
# Назначение: Сохранение/загрузка буферов тепловых пузырей (NPZ).
# ==============================================================================
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Dict

import numpy as np

from ..types import HeatSurface, SceneFrame

logger = logging.getLogger(__name__)

_FIELDS = ("positions", "normals", "colors", "indices", "transform")


def _ensure_path_exists(path: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def write_surfaces_npz(path: str, frame: SceneFrame) -> None:
    """Все пузыри кадра в одном .npz: ключи вида '<region>/<field>'."""
    path = str(path)
    arrays: Dict[str, np.ndarray] = {}
    for rec in frame.surfaces:
        for name in _FIELDS:
            arrays[f"{rec.region}/{name}"] = getattr(rec.mesh, name)
        arrays[f"{rec.region}/scalars"] = np.array(
            [rec.mesh.temperature, rec.mesh.anomaly, rec.mesh.max_height], dtype=np.float64
        )

    _ensure_path_exists(path)
    tmp_path = path + ".tmp"
    with open(tmp_path, "wb") as f:
        np.savez_compressed(f, **arrays)
    os.replace(tmp_path, path)
    logger.debug("NPZ file saved: %s (%d surfaces)", path, len(frame.surfaces))


def read_surfaces_npz(path: str) -> Dict[str, HeatSurface]:
    """Обратная операция к write_surfaces_npz."""
    out: Dict[str, HeatSurface] = {}
    with np.load(str(path)) as data:
        regions = sorted({key.rsplit("/", 1)[0] for key in data.files})
        for region in regions:
            temperature, anomaly, max_height = (float(v) for v in data[f"{region}/scalars"])
            out[region] = HeatSurface(
                positions=data[f"{region}/positions"],
                normals=data[f"{region}/normals"],
                colors=data[f"{region}/colors"],
                indices=data[f"{region}/indices"],
                transform=data[f"{region}/transform"],
                temperature=temperature,
                anomaly=anomaly,
                max_height=max_height,
            )
    return out
