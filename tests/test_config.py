import json
import tempfile
import unittest
from pathlib import Path

from fret_recall.core.config import ConfigManager, TunerConfig


class TestTunerConfig(unittest.TestCase):
    def test_defaults(self):
        config = TunerConfig()
        self.assertEqual(config.gate_threshold, 0.01)
        self.assertEqual(config.gate_hold_time, 0.1)
        self.assertEqual(config.smoothing_window, 5)
        self.assertEqual((config.min_frequency, config.max_frequency), (40.0, 2000.0))
        self.assertEqual(config.required_hold, 0.1)
        self.assertEqual(config.input_gain, 1.0)

    def test_invalid_values(self):
        for bad in (
            {"smoothing_window": 0},
            {"min_frequency": 500.0, "max_frequency": 100.0},
            {"min_frequency": 0},
            {"gate_threshold": -0.1},
            {"gate_hold_time": -1},
            {"required_hold": -0.5},
            {"input_gain": 0},
        ):
            with self.assertRaises(ValueError, msg=str(bad)):
                TunerConfig(**bad)

    def test_from_dict_ignores_unknown(self):
        with self.assertLogs("fret_recall.core.config", level="WARNING"):
            config = TunerConfig.from_dict({"required_hold": 0.3, "colour": "red"})
        self.assertEqual(config.required_hold, 0.3)

    def test_round_trip(self):
        config = TunerConfig(input_gain=2.0)
        self.assertEqual(TunerConfig.from_dict(config.to_dict()), config)

    def test_replace(self):
        config = TunerConfig().replace(required_hold=0)
        self.assertEqual(config.required_hold, 0)
        with self.assertRaises(ValueError):
            config.replace(smoothing_window=0)


class TestConfigManager(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config_dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_creates_defaults(self):
        manager = ConfigManager(str(self.config_dir))
        for name in ("tuner", "audio_input", "game"):
            self.assertTrue((self.config_dir / f"{name}.json").exists())
        self.assertEqual(manager.get_tuner_config(), TunerConfig())
        self.assertEqual(manager.get_config("game")["scale"], "All notes")

    def test_update_persists(self):
        manager = ConfigManager(str(self.config_dir))
        self.assertTrue(manager.update_config("tuner", {"gate_threshold": 0.05}))

        reloaded = ConfigManager(str(self.config_dir))
        self.assertEqual(reloaded.get_tuner_config().gate_threshold, 0.05)

    def test_missing_keys_filled_from_defaults(self):
        (self.config_dir / "tuner.json").write_text(json.dumps({"required_hold": 0.25}))
        config = ConfigManager(str(self.config_dir)).get_tuner_config()
        self.assertEqual(config.required_hold, 0.25)
        self.assertEqual(config.smoothing_window, 5)

    def test_corrupt_file_uses_defaults(self):
        (self.config_dir / "tuner.json").write_text("{not json")
        with self.assertLogs("fret_recall.core.config", level="ERROR"):
            manager = ConfigManager(str(self.config_dir))
        self.assertEqual(manager.get_tuner_config(), TunerConfig())

    def test_reset(self):
        manager = ConfigManager(str(self.config_dir))
        manager.update_config("tuner", {"input_gain": 3.0})
        self.assertTrue(manager.reset_config("tuner"))
        self.assertEqual(manager.get_tuner_config().input_gain, 1.0)

    def test_unknown_section(self):
        manager = ConfigManager(str(self.config_dir))
        with self.assertLogs("fret_recall.core.config", level="ERROR"):
            self.assertFalse(manager.update_config("nope", {}))
        self.assertEqual(manager.get_config("nope"), {})


if __name__ == "__main__":
    unittest.main()
