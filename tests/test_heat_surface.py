# ==============================================================================
# Файл: tests/test_heat_surface.py
# Назначение: Юнит-тесты генератора "тепловых пузырей".
# ==============================================================================
import unittest

import numpy as np

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from globe_engine.core.errors import ConfigurationError
from globe_engine.numerics.geo import surface_normal, to_cartesian
from globe_engine.numerics.heat_surface import (
    HeatSurfaceGenerator,
    HeatSurfaceParams,
    anomaly_factor,
    max_height_for,
)
from globe_engine.render.palettes import hex_to_rgb


class TestHeatSurface(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.generator = HeatSurfaceGenerator()
        cls.params = cls.generator.params

    def test_topology(self):
        print("\n[TEST] Running test_topology...")
        n = self.params.resolution
        surf = self.generator.generate(25.0, 1.0, 50.0, 15.0)

        self.assertEqual(self.generator.vertex_count, (n + 1) ** 2)
        self.assertEqual(self.generator.triangle_count, 2 * n * n)
        self.assertEqual(surf.positions.shape, ((n + 1) ** 2, 3))
        self.assertEqual(surf.normals.shape, surf.positions.shape)
        self.assertEqual(surf.colors.shape, ((n + 1) ** 2, 4))
        self.assertEqual(surf.indices.shape, (2 * n * n, 3))
        self.assertEqual(surf.positions.dtype, np.float32)
        self.assertEqual(surf.indices.dtype, np.uint32)
        self.assertFalse(surf.indices.flags.writeable)
        print("[TEST] test_topology: OK")

    def test_deterministic(self):
        """Одинаковые входы -> побитово одинаковые буферы."""
        print("\n[TEST] Running test_deterministic...")
        a = self.generator.generate(25.8, 0.9, 15.0, -85.0)
        b = HeatSurfaceGenerator().generate(25.8, 0.9, 15.0, -85.0)
        for name in ("positions", "normals", "colors", "indices", "transform"):
            self.assertTrue(np.array_equal(getattr(a, name), getattr(b, name)), name)
        self.assertEqual(a.max_height, b.max_height)
        print("[TEST] test_deterministic: OK")

    def test_outside_disc_is_transparent(self):
        print("\n[TEST] Running test_outside_disc_is_transparent...")
        surf = self.generator.generate(25.0, 1.0, 50.0, 15.0)
        pos = surf.positions.astype(np.float64)
        d2 = pos[:, 0] ** 2 + pos[:, 1] ** 2
        r2 = self.params.radius ** 2

        outside = d2 > r2 * (1.0 + 1e-6)
        inside = d2 < r2 * (1.0 - 1e-3)
        self.assertTrue(outside.any())
        self.assertTrue(np.all(surf.colors[outside, 3] == 0.0))
        self.assertTrue(np.all(pos[outside, 2] == 0.0))
        self.assertTrue(np.all(surf.colors[inside, 3] > 0.0))
        self.assertTrue(np.all(surf.colors[:, 3] <= 1.0))
        print("[TEST] test_outside_disc_is_transparent: OK")

    def test_peak_height(self):
        print("\n[TEST] Running test_peak_height...")
        warm = self.generator.generate(25.0, 1.0, 50.0, 15.0)
        expected = self.params.min_height + 10.0 * self.params.height_per_c
        self.assertAlmostEqual(warm.max_height, expected, places=9)
        self.assertAlmostEqual(float(warm.positions[:, 2].max()), expected, places=5)

        cold = self.generator.generate(5.0, 0.0, 50.0, 15.0)
        self.assertAlmostEqual(cold.max_height, self.params.min_height, places=9)
        self.assertGreater(float(cold.positions[:, 2].max()), 0.0)
        print("[TEST] test_peak_height: OK")

    def test_height_and_factor_helpers(self):
        print("\n[TEST] Running test_height_and_factor_helpers...")
        self.assertEqual(max_height_for(-40.0, self.params), self.params.min_height)
        self.assertEqual(max_height_for(self.params.reference_c, self.params), self.params.min_height)
        self.assertEqual(anomaly_factor(-1.0, self.params), 0.0)
        self.assertEqual(anomaly_factor(5.0, self.params), 1.0)
        self.assertAlmostEqual(anomaly_factor(1.0, self.params), 0.5)
        print("[TEST] test_height_and_factor_helpers: OK")

    def test_anomaly_accent(self):
        print("\n[TEST] Running test_anomaly_accent...")
        accent = np.asarray(hex_to_rgb(self.params.accent_hex), dtype=np.float64) / 255.0
        base, tip = self.generator.vertex_colors(25.0, 5.0)
        np.testing.assert_allclose(tip, accent, atol=1e-12)
        base, tip = self.generator.vertex_colors(25.0, -1.0)
        np.testing.assert_allclose(tip, base, atol=1e-12)
        print("[TEST] test_anomaly_accent: OK")

    def test_vertex_colour_and_alpha(self):
        """Цвет вершины = lerp(основание, вершина купола, z/max_height), альфа = clamp(base*1.2)."""
        print("\n[TEST] Running test_vertex_colour_and_alpha...")
        p = self.params
        surf = self.generator.generate(24.0, 1.3, -15.0, -60.0)
        base_rgb, tip_rgb = self.generator.vertex_colors(24.0, 1.3)
        pos = surf.positions.astype(np.float64)
        colors = surf.colors.astype(np.float64)

        # вершина купола
        peak = int(np.argmax(pos[:, 2]))
        np.testing.assert_allclose(colors[peak, :3], tip_rgb, atol=1e-5)
        self.assertAlmostEqual(colors[peak, 3], 1.0, places=6)

        # вершина на половине радиуса: base = 0.75
        half = int(np.argmin(np.abs(pos[:, 0] - p.radius * 0.5) + np.abs(pos[:, 1])))
        d2 = pos[half, 0] ** 2 + pos[half, 1] ** 2
        self.assertAlmostEqual(d2 / p.radius ** 2, 0.25, places=5)
        base = 1.0 - d2 / p.radius ** 2
        t = base ** p.exponent
        np.testing.assert_allclose(colors[half, :3], base_rgb + (tip_rgb - base_rgb) * t, atol=1e-5)
        self.assertAlmostEqual(colors[half, 3], min(base * p.edge_alpha_gain, 1.0), places=5)
        self.assertAlmostEqual(pos[half, 2], surf.max_height * t, places=5)

        # угол сетки лежит вне диска
        corner = int(np.argmax(pos[:, 0] + pos[:, 1]))
        self.assertEqual(colors[corner, 3], 0.0)
        np.testing.assert_allclose(colors[corner, :3], base_rgb, atol=1e-6)
        print("[TEST] test_vertex_colour_and_alpha: OK")

    def test_normals_are_unit(self):
        print("\n[TEST] Running test_normals_are_unit...")
        surf = self.generator.generate(27.0, 1.5, -15.0, -60.0)
        lengths = np.linalg.norm(surf.normals.astype(np.float64), axis=1)
        np.testing.assert_allclose(lengths, 1.0, atol=1e-5)
        np.testing.assert_allclose(
            np.linalg.norm(surf.world_normals().astype(np.float64), axis=1), 1.0, atol=1e-5
        )
        print("[TEST] test_normals_are_unit: OK")

    def test_transform_places_patch_on_anchor(self):
        print("\n[TEST] Running test_transform_places_patch_on_anchor...")
        lat, lon = 50.0, 15.0
        surf = self.generator.generate(20.0, 1.0, lat, lon)
        anchor = to_cartesian(lat, lon, self.params.anchor_radius)
        normal = surface_normal(*anchor)

        np.testing.assert_allclose(surf.transform[:3, 3], anchor, atol=1e-9)
        np.testing.assert_allclose(surf.transform[:3, 2], normal, atol=1e-9)
        np.testing.assert_allclose(surf.transform[3], [0.0, 0.0, 0.0, 1.0])

        # вершина купола поднята вдоль нормали
        world = surf.world_positions().astype(np.float64)
        top = world[int(np.argmax(surf.positions[:, 2]))]
        expected_top = np.asarray(anchor) + np.asarray(normal) * surf.max_height
        np.testing.assert_allclose(top, expected_top, atol=1e-4)
        print("[TEST] test_transform_places_patch_on_anchor: OK")

    def test_invalid_params(self):
        print("\n[TEST] Running test_invalid_params...")
        for kwargs in (
                {"radius": 0.0},
                {"resolution": 0},
                {"resolution": 2.5},
                {"exponent": 1.0},
                {"min_height": 0.0},
                {"anomaly_range": (1.0, 1.0)},
                {"accent_hex": "red"},
        ):
            with self.assertRaises(ConfigurationError, msg=str(kwargs)):
                HeatSurfaceParams(**kwargs)
        print("[TEST] test_invalid_params: OK")


if __name__ == '__main__':
    unittest.main()
