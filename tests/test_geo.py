# ==============================================================================
# Файл: tests/test_geo.py
# Назначение: Юнит-тесты проекции на сферу и геометрических утилит.
# ==============================================================================
import math
import unittest

import numpy as np

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from globe_engine.numerics.geo import surface_normal, to_cartesian, to_cartesian_array
from globe_engine.numerics.mesh_utils import build_grid, compose_transform, rotation_z_to


class TestToCartesian(unittest.TestCase):

    def test_radius_preserved(self):
        print("\n[TEST] Running test_radius_preserved...")
        for lat in (-90.0, -45.0, 0.0, 15.0, 89.9):
            for lon in (-180.0, -60.0, 0.0, 90.0, 180.0):
                x, y, z = to_cartesian(lat, lon, 2.08)
                self.assertAlmostEqual(math.sqrt(x * x + y * y + z * z), 2.08, places=9)
        print("[TEST] test_radius_preserved: OK")

    def test_reference_directions(self):
        print("\n[TEST] Running test_reference_directions...")
        x, y, z = to_cartesian(0.0, 0.0, 2.0)
        self.assertAlmostEqual(x, 2.0, places=9)
        self.assertAlmostEqual(y, 0.0, places=9)
        self.assertAlmostEqual(z, 0.0, places=9)

        x, y, z = to_cartesian(0.0, 180.0, 2.0)
        self.assertAlmostEqual(x, -2.0, places=9)

        x, y, z = to_cartesian(90.0, 0.0, 2.0)
        self.assertAlmostEqual(y, 2.0, places=9)

        x, y, z = to_cartesian(0.0, 90.0, 1.0)
        self.assertAlmostEqual(z, -1.0, places=9)
        print("[TEST] test_reference_directions: OK")

    def test_array_version_matches(self):
        print("\n[TEST] Running test_array_version_matches...")
        lats = np.array([-15.0, 15.0, 50.0])
        lons = np.array([-60.0, -85.0, 15.0])
        arr = to_cartesian_array(lats, lons, 2.08)
        self.assertEqual(arr.shape, (3, 3))
        for i in range(3):
            np.testing.assert_allclose(arr[i], to_cartesian(lats[i], lons[i], 2.08), atol=1e-12)
        print("[TEST] test_array_version_matches: OK")

    def test_surface_normal(self):
        print("\n[TEST] Running test_surface_normal...")
        n = surface_normal(*to_cartesian(50.0, 15.0, 2.02))
        self.assertAlmostEqual(math.sqrt(sum(c * c for c in n)), 1.0, places=9)
        self.assertEqual(surface_normal(0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        print("[TEST] test_surface_normal: OK")


class TestMeshUtils(unittest.TestCase):

    def test_rotation_maps_z_to_normal(self):
        print("\n[TEST] Running test_rotation_maps_z_to_normal...")
        z = np.array([0.0, 0.0, 1.0])
        for normal in ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, -1.0),
                       surface_normal(*to_cartesian(-15.0, -60.0, 2.0))):
            rot = rotation_z_to(normal)
            np.testing.assert_allclose(rot @ z, normal, atol=1e-9)
            # ортонормированность
            np.testing.assert_allclose(rot @ rot.T, np.eye(3), atol=1e-9)
        print("[TEST] test_rotation_maps_z_to_normal: OK")

    def test_compose_transform(self):
        print("\n[TEST] Running test_compose_transform...")
        m = compose_transform(np.eye(3), (1.0, 2.0, 3.0))
        self.assertEqual(m.shape, (4, 4))
        np.testing.assert_allclose(m @ np.array([0.0, 0.0, 0.0, 1.0]), [1.0, 2.0, 3.0, 1.0])
        print("[TEST] test_compose_transform: OK")

    def test_build_grid(self):
        print("\n[TEST] Running test_build_grid...")
        xs, ys, indices = build_grid(1.0, 4)
        self.assertEqual(xs.shape, (25,))
        self.assertEqual(ys.shape, (25,))
        self.assertEqual(indices.shape, (32, 3))
        self.assertEqual(int(indices.max()), 24)
        # все треугольники смотрят на +Z
        pts = np.stack([xs, ys, np.zeros_like(xs)], axis=1)
        v0, v1, v2 = pts[indices[:, 0]], pts[indices[:, 1]], pts[indices[:, 2]]
        self.assertTrue(np.all(np.cross(v1 - v0, v2 - v0)[:, 2] > 0))
        print("[TEST] test_build_grid: OK")


if __name__ == '__main__':
    unittest.main()
