# ==============================================================================
# Файл: globe_engine/world/scene.py
# Назначение: Сборка кадра сцены (точки слоя + тепловые пузыри) для внешнего
# компоновщика. Ядро отдает только неизменяемые дескрипторы.
# ==============================================================================
from __future__ import annotations
import logging
import time
from collections import OrderedDict
from typing import Optional, Tuple

from ..algorithms.climate.extrapolation import regions_with_anomalies
from ..algorithms.climate.layers import layer_samples
from ..core.constants import POINT_RADIUS
from ..core.layers import get_layer_config
from ..core.types import HeatSurface, ISceneComposer, SceneFrame, ScenePoint, SurfaceRecord
from ..data.climate.store import ClimateRecordStore
from ..numerics.geo import to_cartesian
from ..numerics.heat_surface import HeatSurfaceGenerator, HeatSurfaceParams
from ..render.palettes import ColorScale, color_for, opacity_for
from .context import ViewContext

logger = logging.getLogger(__name__)

# (регион, год, переменная, параметры генератора, шкала основания)
CacheKey = Tuple[str, int, str, HeatSurfaceParams, ColorScale]


class SurfaceCache:
    """
    Необязательная мемоизация пузырей по ключу (регион, год, переменная) плюс
    параметры и шкала генератора. От слоя пузырь не зависит, поэтому слой в ключ
    не входит. Только оптимизация: без кэша результат тот же.
    """

    def __init__(self, max_entries: int = 256):
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.max_entries = max_entries
        self._items: "OrderedDict[CacheKey, HeatSurface]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._items)

    def get(self, key: CacheKey) -> Optional[HeatSurface]:
        surface = self._items.get(key)
        if surface is None:
            self.misses += 1
            return None
        self._items.move_to_end(key)
        self.hits += 1
        return surface

    def put(self, key: CacheKey, surface: HeatSurface) -> None:
        self._items[key] = surface
        self._items.move_to_end(key)
        while len(self._items) > self.max_entries:
            self._items.popitem(last=False)

    def clear(self) -> None:
        self._items.clear()


def build_scene_frame(
        store: ClimateRecordStore,
        context: ViewContext,
        generator: Optional[HeatSurfaceGenerator] = None,
        cache: Optional[SurfaceCache] = None,
) -> SceneFrame:
    """
    Пересобирает кадр для (год, слой) из контекста.
    Вызывается на смену входных данных, а не на каждый кадр рендера.
    """
    t_start = time.perf_counter()
    layer = get_layer_config(context.layer)
    scale = layer.color_scale
    generator = generator or HeatSurfaceGenerator()

    records = regions_with_anomalies(store, context.year, context.variable_id)

    points = []
    for s in layer_samples(records, context.year, context.layer):
        points.append(
            ScenePoint(
                position=to_cartesian(s.lat, s.lon, POINT_RADIUS),
                color=color_for(scale, s.value),
                opacity=opacity_for(scale, s.value),
                value=s.value,
                lat=s.lat,
                lon=s.lon,
                region=s.region,
            )
        )

    surfaces = []
    for rec in records:
        if rec.anchor is None:
            logger.debug("Region '%s' has no anchor, no heat surface", rec.name)
            continue
        key = (rec.name, int(context.year), context.variable_id, generator.params, generator.color_scale)
        mesh = cache.get(key) if cache is not None else None
        if mesh is None:
            mesh = generator.generate(rec.temperature, rec.anomaly, rec.anchor.lat, rec.anchor.lon)
            if cache is not None:
                cache.put(key, mesh)
        surfaces.append(SurfaceRecord(region=rec.name, mesh=mesh))

    elapsed_ms = (time.perf_counter() - t_start) * 1000.0
    frame = SceneFrame(
        year=int(context.year),
        layer=context.layer,
        points=tuple(points),
        surfaces=tuple(surfaces),
        metrics={"regions": len(records), "build_ms": elapsed_ms},
    )
    logger.info(
        "Scene frame %d/%s: %d points, %d surfaces (%.1f ms)",
        frame.year, frame.layer, len(frame.points), len(frame.surfaces), elapsed_ms,
    )
    return frame


def compose_scene(
        composer: ISceneComposer,
        store: ClimateRecordStore,
        context: ViewContext,
        generator: Optional[HeatSurfaceGenerator] = None,
        cache: Optional[SurfaceCache] = None,
) -> SceneFrame:
    """Собирает кадр и отдает его компоновщику. Компоновщик владеет GPU-ресурсами."""
    frame = build_scene_frame(store, context, generator=generator, cache=cache)
    composer.compose(frame)
    return frame
