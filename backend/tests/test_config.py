import os
import unittest
from unittest import mock

import backend.config as config_module


class AnalysisSettingsTests(unittest.TestCase):
    def setUp(self) -> None:
        config_module.load_settings.cache_clear()

    def tearDown(self) -> None:
        config_module.load_settings.cache_clear()

    def _load(self, **env):
        with mock.patch.dict(os.environ, env):
            return config_module.load_settings().analysis

    def test_defaults(self) -> None:
        analysis = self._load()
        self.assertEqual(analysis.max_alternatives, 4)
        self.assertEqual(analysis.frequency_weight, 0.6)
        self.assertEqual(analysis.recency_weight, 0.4)

    def test_max_alternatives_within_range(self) -> None:
        analysis = self._load(ANALYSIS__MAX_ALTERNATIVES="3")
        self.assertEqual(analysis.max_alternatives, 3)

    def test_max_alternatives_out_of_range(self) -> None:
        for value in ("0", "1", "9"):
            config_module.load_settings.cache_clear()
            with self.assertRaises(RuntimeError, msg=value):
                self._load(ANALYSIS__MAX_ALTERNATIVES=value)

    def test_negative_weight_rejected(self) -> None:
        with self.assertRaises(RuntimeError):
            self._load(ANALYSIS__RECENCY_WEIGHT="-0.4")

    def test_zero_weights_rejected(self) -> None:
        with self.assertRaises(RuntimeError):
            self._load(ANALYSIS__FREQUENCY_WEIGHT="0", ANALYSIS__RECENCY_WEIGHT="0")

    def test_non_positive_window_rejected(self) -> None:
        with self.assertRaises(RuntimeError):
            self._load(ANALYSIS__TREND_WINDOW="0")


if __name__ == "__main__":
    unittest.main()
