# ==============================================================================
# Файл: tests/test_loader.py
# Назначение: Юнит-тесты загрузки и валидации климатических записей.
# ==============================================================================
import copy
import json
import os
import tempfile
import unittest

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from globe_engine.core.errors import GlobeEngineError, LoadError
from globe_engine.data.climate import DEFAULT_DATA_PATH, build_store, load_climate_data

VALID_DOC = {
    "regions": [
        {
            "name": "Europa",
            "variables": [
                {
                    "id": "t2m",
                    "name": "2m temperature",
                    "baseline_1981_2010_c": 9.4,
                    "trend_c_per_year": 0.04,
                    "extremes": {
                        "high_anomaly_months_gt_2sigma": ["2003-08", "2022-07"],
                        "low_anomaly_months_lt_minus_2sigma": ["2010-12"],
                    },
                }
            ],
        }
    ],
    "metadata": {"variables_available": ["t2m"], "baseline_period": "1981-2010"},
}


def _doc(**patch):
    """Копия валидного документа с подмененными полями первой переменной."""
    doc = copy.deepcopy(VALID_DOC)
    doc["regions"][0]["variables"][0].update(patch)
    return doc


class TestLoadClimateData(unittest.TestCase):

    def test_bundled_dataset(self):
        print("\n[TEST] Running test_bundled_dataset...")
        self.assertTrue(DEFAULT_DATA_PATH.exists())
        store = load_climate_data()

        self.assertEqual(len(store), 3)
        self.assertEqual(store.region_names, ("Sudamérica", "Centroamérica", "Europa"))
        self.assertEqual(store.metadata.baseline_period, "1981-2010")
        self.assertEqual(store.metadata.variables_available, ("t2m",))

        europa = store.get_region_variable("Europa", "t2m")
        self.assertEqual(europa.baseline, 9.4)
        self.assertEqual(europa.trend_per_year, 0.04)
        self.assertEqual(len(europa.high_months), 9)
        self.assertEqual(len(europa.low_months), 4)
        print("[TEST] test_bundled_dataset: OK")

    def test_lookups(self):
        print("\n[TEST] Running test_lookups...")
        store = load_climate_data(VALID_DOC)
        self.assertEqual(store.get_region("Europa").name, "Europa")
        self.assertIsNone(store.get_region("Atlantis"))
        self.assertIsNone(store.get_region_variable("Europa", "pr"))
        self.assertIsNone(store.get_region_variable("Atlantis", "t2m"))
        self.assertIsNone(store.get_region("Europa").variable("pr"))
        print("[TEST] test_lookups: OK")

    def test_short_keys_accepted(self):
        print("\n[TEST] Running test_short_keys_accepted...")
        doc = {
            "regions": [{"name": "X", "variables": [
                {"id": "t2m", "baseline_c": 1.5, "trend_c_per_year": -0.01,
                 "extremes": {"high_months": ["2001-01"], "low_months": []}}]}]
        }
        var = load_climate_data(doc).get_region_variable("X", "t2m")
        self.assertEqual(var.baseline, 1.5)
        self.assertEqual(var.trend_per_year, -0.01)
        self.assertEqual(var.high_months, ("2001-01",))
        self.assertEqual(var.name, "t2m")
        print("[TEST] test_short_keys_accepted: OK")

    def test_load_from_file(self):
        print("\n[TEST] Running test_load_from_file...")
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "records.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump(VALID_DOC, f)
            store = load_climate_data(path)
            self.assertEqual(store.region_names, ("Europa",))
        print("[TEST] test_load_from_file: OK")

    def test_malformed_records(self):
        print("\n[TEST] Running test_malformed_records...")
        missing_variables = copy.deepcopy(VALID_DOC)
        del missing_variables["regions"][0]["variables"]

        duplicated = copy.deepcopy(VALID_DOC)
        duplicated["regions"].append(copy.deepcopy(duplicated["regions"][0]))

        missing_baseline = copy.deepcopy(VALID_DOC)
        del missing_baseline["regions"][0]["variables"][0]["baseline_1981_2010_c"]

        bad_docs = {
            "no regions": {"metadata": {}},
            "missing variables": missing_variables,
            "duplicated region": duplicated,
            "missing baseline": missing_baseline,
            "string baseline": _doc(baseline_1981_2010_c="9.4"),
            "bool trend": _doc(trend_c_per_year=True),
            "nan trend": _doc(trend_c_per_year=float("nan")),
            "bad month": _doc(extremes={"high_anomaly_months_gt_2sigma": ["2023-13"]}),
            "months not list": _doc(extremes={"low_anomaly_months_lt_minus_2sigma": "2010-12"}),
            "empty id": _doc(id=""),
        }
        for label, doc in bad_docs.items():
            with self.assertRaises(LoadError, msg=label):
                load_climate_data(doc)
        with self.assertRaises(LoadError):
            build_store([])
        print("[TEST] test_malformed_records: OK")

    def test_bad_files(self):
        print("\n[TEST] Running test_bad_files...")
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(LoadError):
                load_climate_data(os.path.join(tmp, "missing.json"))

            broken = os.path.join(tmp, "broken.json")
            with open(broken, "w", encoding="utf-8") as f:
                f.write("{ not json")
            with self.assertRaises(LoadError):
                load_climate_data(broken)
        print("[TEST] test_bad_files: OK")

    def test_load_error_is_engine_error(self):
        print("\n[TEST] Running test_load_error_is_engine_error...")
        self.assertTrue(issubclass(LoadError, GlobeEngineError))
        with self.assertRaises(TypeError):
            load_climate_data(42)
        print("[TEST] test_load_error_is_engine_error: OK")


if __name__ == '__main__':
    unittest.main()
