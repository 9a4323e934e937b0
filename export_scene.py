# export_scene.py
import argparse
import logging
import re
import sys
from pathlib import Path

from globe_engine.algorithms.climate.extrapolation import generate_time_series
from globe_engine.algorithms.climate.insight import year_insight
from globe_engine.core.constants import DEFAULT_VARIABLE_ID
from globe_engine.core.errors import GlobeEngineError
from globe_engine.core.export import (
    write_layer_preview,
    write_scene_frame_json,
    write_surfaces_npz,
    write_time_series_json,
)
from globe_engine.core.layers import LAYER_IDS
from globe_engine.data.climate import load_climate_data
from globe_engine.setup_logging import setup_logging
from globe_engine.world.context import ViewContext
from globe_engine.world.scene import build_scene_frame

# --- НАСТРОЙКИ ---
ARTIFACTS_ROOT = Path(__file__).parent / "artifacts"

logger = logging.getLogger(__name__)


def series_filename(region: str) -> str:
    """Имя файла ряда: все, кроме букв, цифр и дефиса, заменяется на '_' (без выхода из папки)."""
    return re.sub(r"[^\w\-]+", "_", region) + ".json"


def export_scene(data_path, year: int, layer: str, out_dir: Path, variable_id: str = DEFAULT_VARIABLE_ID) -> Path:
    """Выгружает кадр (год, слой): scene.json + surfaces.npz + preview.png + ряды по регионам."""
    store = load_climate_data(data_path)
    context = ViewContext(year=year, layer=layer, variable_id=variable_id)
    frame = build_scene_frame(store, context)

    frame_dir = out_dir / f"{layer}_{year}"
    write_surfaces_npz(str(frame_dir / "surfaces.npz"), frame)
    write_scene_frame_json(str(frame_dir / "scene.json"), frame, surfaces_file="surfaces.npz")
    write_layer_preview(str(frame_dir / "preview.png"), frame)

    for region in store.region_names:
        series = generate_time_series(store, region, variable_id)
        if series:
            write_time_series_json(str(frame_dir / "series" / series_filename(region)), region, series)

    insight = year_insight(store, year, layer, variable_id=variable_id)
    for stat in insight.stats:
        logger.info("  %s: %s%s", stat.label, stat.value, f" ({stat.change})" if stat.change else "")

    logger.info("Frame exported to %s", frame_dir)
    return frame_dir


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Export a climate globe scene frame for a year and layer")
    parser.add_argument("-y", "--year", type=int, default=2024, help="Query year")
    parser.add_argument("-l", "--layer", choices=LAYER_IDS, default=LAYER_IDS[0], help="Layer id")
    parser.add_argument("-i", "--input", type=str, default=None,
                        help="Climate data JSON (defaults to the bundled dataset)")
    parser.add_argument("-o", "--output", type=str, default=str(ARTIFACTS_ROOT), help="Output directory")
    parser.add_argument("--variable", type=str, default=DEFAULT_VARIABLE_ID, help="Variable id")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    try:
        export_scene(args.input, args.year, args.layer, Path(args.output), args.variable)
    except GlobeEngineError as e:
        logger.error("Export failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
