# ==============================================================================
# Файл: globe_engine/numerics/mesh_utils.py
# Назначение: Общие геометрические утилиты для патчей на сфере:
# регулярная сетка, нормали вершин, поворот "ось Z -> нормаль сферы".
# ==============================================================================
from __future__ import annotations
import math
from typing import Sequence, Tuple

import numpy as np

from .geo import normalize_vectors


def build_grid(half_size: float, resolution: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Плоская квадратная сетка со стороной 2*half_size и resolution x resolution квадов.
    Возвращает (xs, ys, indices): координаты вершин (строки по Y) и треугольники.
    """
    n = resolution + 1
    axis = np.linspace(-half_size, half_size, n, dtype=np.float64)
    ys, xs = np.meshgrid(axis, axis, indexing="ij")

    # Два треугольника на квад, обход против часовой стрелки при взгляде с +Z
    row = np.arange(resolution, dtype=np.uint32)
    i0 = (row[:, None] * n + row[None, :]).ravel()
    i1 = i0 + 1
    i2 = i0 + n
    i3 = i2 + 1
    tris_a = np.stack([i0, i1, i3], axis=1)
    tris_b = np.stack([i0, i3, i2], axis=1)
    indices = np.empty((2 * resolution * resolution, 3), dtype=np.uint32)
    indices[0::2] = tris_a
    indices[1::2] = tris_b
    return xs.ravel(), ys.ravel(), indices


def compute_vertex_normals(positions: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """
    Нормали вершин как сумма нормалей смежных граней (взвешены площадью).
    Вершины без граней получают +Z.
    """
    pos = positions.astype(np.float64, copy=False)
    v0 = pos[indices[:, 0]]
    v1 = pos[indices[:, 1]]
    v2 = pos[indices[:, 2]]
    face_n = np.cross(v1 - v0, v2 - v0)

    acc = np.zeros_like(pos)
    for k in range(3):
        np.add.at(acc, indices[:, k], face_n)

    lengths = np.linalg.norm(acc, axis=1)
    degenerate = lengths < 1e-12
    acc[degenerate] = (0.0, 0.0, 1.0)
    return normalize_vectors(acc).astype(np.float32)


def rotation_z_to(normal: Sequence[float]) -> np.ndarray:
    """
    Матрица поворота 3x3, переводящая локальную ось +Z в направление normal
    (формула Родрига по кратчайшей дуге).
    """
    n = np.asarray(normal, dtype=np.float64)
    n = n / max(float(np.linalg.norm(n)), 1e-12)
    z = np.array([0.0, 0.0, 1.0])

    c = float(np.dot(z, n))
    if c > 1.0 - 1e-12:
        return np.eye(3)
    if c < -1.0 + 1e-12:
        # Противоположное направление: поворот на pi вокруг X
        return np.diag([1.0, -1.0, -1.0])

    axis = np.cross(z, n)
    s = math.sqrt(max(0.0, 1.0 - c * c))
    axis /= s
    kx, ky, kz = axis
    K = np.array([[0.0, -kz, ky], [kz, 0.0, -kx], [-ky, kx, 0.0]])
    return np.eye(3) + s * K + (1.0 - c) * (K @ K)


def compose_transform(rotation: np.ndarray, translation: Sequence[float]) -> np.ndarray:
    """4x4 матрица: сначала поворот, затем перенос."""
    m = np.eye(4)
    m[:3, :3] = rotation
    m[:3, 3] = np.asarray(translation, dtype=np.float64)
    return m
