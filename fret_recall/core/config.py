"""Configuration management for Fret Recall components."""

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Optional
import json
import os
from pathlib import Path

from ..logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TunerConfig:
    """Tunable constants for the pitch-tracking and answer-matching pipeline.

    Times are in seconds, the gate threshold is an RMS level on a
    [-1, 1] normalized signal.
    """

    gate_threshold: float = 0.01
    gate_hold_time: float = 0.1
    smoothing_window: int = 5
    min_frequency: float = 40.0
    max_frequency: float = 2000.0
    required_hold: float = 0.1
    input_gain: float = 1.0

    def __post_init__(self):
        if self.smoothing_window < 1:
            raise ValueError(
                f"smoothing_window must be at least 1, got {self.smoothing_window}"
            )
        if self.min_frequency <= 0 or self.min_frequency >= self.max_frequency:
            raise ValueError(
                f"Invalid frequency range [{self.min_frequency}, {self.max_frequency}]"
            )
        if self.gate_threshold < 0:
            raise ValueError(f"gate_threshold must be >= 0, got {self.gate_threshold}")
        if self.gate_hold_time < 0 or self.required_hold < 0:
            raise ValueError("Hold times must be >= 0")
        if self.input_gain <= 0:
            raise ValueError(f"input_gain must be positive, got {self.input_gain}")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "TunerConfig":
        """Build a config from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            logger.warning(f"Ignoring unknown tuner settings: {sorted(unknown)}")
        return cls(**{k: v for k, v in values.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def replace(self, **changes) -> "TunerConfig":
        return replace(self, **changes)


class ConfigManager:
    """Configuration manager for Fret Recall components."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory to store configuration files, or None to use default
        """
        if config_dir is None:
            # Use ~/.config/fret_recall by default
            home = os.path.expanduser("~")
            config_dir = os.path.join(home, ".config", "fret_recall")

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        # Default configurations
        self.default_configs = {
            "tuner": TunerConfig().to_dict(),
            "audio_input": {
                "sample_rate": 44100,
                "frames_per_buffer": 2048,
                "channels": 1,
                "device_id": None,
            },
            "game": {
                "scale": "All notes",
                "string_index": None,
                "duration": 60,
            },
        }

        # Load existing configurations or create default ones
        self.configs = {}
        for config_name, default_config in self.default_configs.items():
            self.configs[config_name] = self.load_config(config_name, default_config)

    def load_config(self, name: str, default_config: Dict[str, Any]) -> Dict[str, Any]:
        """Load configuration from file or create default.

        Args:
            name: Configuration name
            default_config: Default configuration to use if file doesn't exist

        Returns:
            Configuration dictionary
        """
        config_file = self.config_dir / f"{name}.json"

        if config_file.exists():
            try:
                with open(config_file, "r") as f:
                    config = json.load(f)
                if not isinstance(config, dict):
                    raise ValueError("top-level JSON value must be an object")
                logger.info(f"Loaded configuration from {config_file}")

                # Ensure all default keys are present
                for key, value in default_config.items():
                    if key not in config:
                        config[key] = value

                return config
            except (OSError, ValueError) as e:
                logger.error(f"Error loading configuration from {config_file}: {e}")
                return default_config.copy()
        else:
            config = default_config.copy()
            self.save_config(name, config)
            return config

    def save_config(self, name: str, config: Dict[str, Any]) -> bool:
        """Save configuration to file.

        Returns:
            True if saved successfully, False otherwise
        """
        config_file = self.config_dir / f"{name}.json"

        try:
            with open(config_file, "w") as f:
                json.dump(config, f, indent=2)
            logger.info(f"Saved configuration to {config_file}")
            return True
        except OSError as e:
            logger.error(f"Error saving configuration to {config_file}: {e}")
            return False

    def get_config(self, name: str) -> Dict[str, Any]:
        return self.configs.get(name, {}).copy()

    def update_config(self, name: str, updates: Dict[str, Any]) -> bool:
        """Update configuration and save to file.

        Returns:
            True if updated and saved successfully, False otherwise
        """
        if name not in self.configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        self.configs[name].update(updates)
        return self.save_config(name, self.configs[name])

    def reset_config(self, name: str) -> bool:
        """Reset configuration to default.

        Returns:
            True if reset successfully, False otherwise
        """
        if name not in self.default_configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        self.configs[name] = self.default_configs[name].copy()
        return self.save_config(name, self.configs[name])

    def get_tuner_config(self) -> TunerConfig:
        """Build a TunerConfig from the 'tuner' section.

        Raises:
            ValueError: If the stored values are out of range
        """
        return TunerConfig.from_dict(self.get_config("tuner"))
