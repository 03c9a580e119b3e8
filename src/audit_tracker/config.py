"""
Configuration management for the audit tracker.

This module handles loading and managing configuration settings
stored as a JSON file.
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

from .comparator import DEFAULT_TRACKED_METRICS, ComparisonConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("audit_tracker.json")


@dataclass
class TrackerConfig:
    """Configuration for audit tracking."""

    # Directories
    snapshot_dir: str = "."

    # Comparison settings
    tracked_metrics: list = None

    # Audit engine settings
    lighthouse_path: str = "lighthouse"
    chrome_flags: str = "--headless"
    form_factor: str = "desktop"
    audit_timeout: Optional[float] = 300.0

    # Output settings
    verbose: bool = False
    quiet: bool = False

    def __post_init__(self):
        if self.tracked_metrics is None:
            self.tracked_metrics = list(DEFAULT_TRACKED_METRICS)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrackerConfig":
        """Create from dictionary, ignoring unknown keys."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        unknown = set(data) - set(known)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {sorted(unknown)}")
        return cls(**known)

    @classmethod
    def from_file(cls, config_path: Path) -> "TrackerConfig":
        """Load configuration from JSON file."""
        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "r") as f:
                data = json.load(f)
            return cls.from_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")
            return cls()

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to JSON file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    def get_snapshot_dir(self) -> Path:
        """Get snapshot directory as Path."""
        return Path(self.snapshot_dir)

    def comparison_config(self) -> ComparisonConfig:
        return ComparisonConfig(tracked_metrics=tuple(self.tracked_metrics))


class ConfigManager:
    """Manages configuration loading and saving."""

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self.config = TrackerConfig.from_file(self.config_path)

    def get_config(self) -> TrackerConfig:
        """Get the current configuration."""
        return self.config

    def update_config(self, **kwargs) -> None:
        """Update configuration with new values."""
        for key, value in kwargs.items():
            if hasattr(self.config, key):
                setattr(self.config, key, value)

    def save_config(self) -> None:
        """Save configuration to file."""
        self.config.save_to_file(self.config_path)

    def reload_config(self) -> None:
        """Reload configuration from file."""
        self.config = TrackerConfig.from_file(self.config_path)

    def create_default_config(self) -> None:
        """Create a default configuration file."""
        TrackerConfig().save_to_file(self.config_path)
        logger.info(f"Created default configuration at {self.config_path}")
