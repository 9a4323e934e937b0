# ==============================================================================
# Файл: globe_engine/core/export/image_exporters.py
# Назначение: Плоское превью слоя (равнопромежуточная проекция) в PNG.
# ==============================================================================
from __future__ import annotations
import logging
from pathlib import Path

from PIL import Image, ImageDraw

from ..types import SceneFrame

logger = logging.getLogger(__name__)

BACKGROUND_RGBA = (12, 18, 38, 255)
GRATICULE_RGBA = (60, 70, 100, 255)


def _ensure_path_exists(path: str) -> None:
    """Убеждается, что директория для файла существует."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def lonlat_to_pixel(lat: float, lon: float, width: int, height: int) -> tuple[float, float]:
    x = (lon + 180.0) / 360.0 * (width - 1)
    y = (90.0 - lat) / 180.0 * (height - 1)
    return x, y


def render_layer_preview(frame: SceneFrame, width: int = 720, point_px: int = 5) -> Image.Image:
    """Рисует точки кадра на карте мира: цвет и прозрачность как на глобусе."""
    height = width // 2
    img = Image.new("RGBA", (width, height), BACKGROUND_RGBA)
    draw = ImageDraw.Draw(img)

    # Сетка каждые 30 градусов
    for lon in range(-180, 181, 30):
        x, _ = lonlat_to_pixel(0.0, lon, width, height)
        draw.line([(x, 0), (x, height - 1)], fill=GRATICULE_RGBA, width=1)
    for lat in range(-90, 91, 30):
        _, y = lonlat_to_pixel(lat, 0.0, width, height)
        draw.line([(0, y), (width - 1, y)], fill=GRATICULE_RGBA, width=1)

    overlay = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    odraw = ImageDraw.Draw(overlay)
    for p in frame.points:
        x, y = lonlat_to_pixel(p.lat, p.lon, width, height)
        alpha = int(round(255 * p.opacity))
        odraw.ellipse(
            [x - point_px, y - point_px, x + point_px, y + point_px],
            fill=(*p.color, alpha),
        )
    return Image.alpha_composite(img, overlay)


def write_layer_preview(path: str, frame: SceneFrame, width: int = 720) -> None:
    path = str(path)
    _ensure_path_exists(path)
    render_layer_preview(frame, width=width).convert("RGB").save(path, format="PNG")
    logger.debug("Preview saved: %s", path)
