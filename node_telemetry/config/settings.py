"""
Global Telemetry Settings

Centralized configuration for link telemetry, with JSON file loading and
environment overrides.
"""

from typing import Dict, Any, List, Optional
import os
import json
from dataclasses import dataclass, field

import dotenv

dotenv.load_dotenv()

ENV_PREFIX = "NODE_TELEMETRY_"


@dataclass
class TelemetrySettings:
    """Link sampling and collection settings"""

    # Interval on which links are sampled, in seconds
    link_sample_interval: float = 10.0

    # Interval on which the collector is asked to poll us, in seconds
    metric_collection_interval: float = 30.0

    # sys.platform values on which kernel link statistics are available
    kstat_platforms: List[str] = field(default_factory=lambda: ["sunos5"])

    # See netdb.h
    hostname_max_len: int = 256


@dataclass
class LoggingSettings:
    """Logging configuration"""

    log_level: str = "INFO"


@dataclass
class Settings:
    """Global telemetry settings"""

    debug: bool = False
    version: str = "0.1.0"

    telemetry: TelemetrySettings = field(default_factory=TelemetrySettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def is_kstat_platform(self, platform: str) -> bool:
        """Whether kernel statistics can be sampled on `platform`."""
        return platform in self.telemetry.kstat_platforms

    def apply_env(self, environ: Optional[Dict[str, str]] = None) -> "Settings":
        """Override settings from NODE_TELEMETRY_* environment variables"""
        env = os.environ if environ is None else environ

        platforms = env.get(f"{ENV_PREFIX}KSTAT_PLATFORMS")
        if platforms is not None:
            self.telemetry.kstat_platforms = [
                p.strip() for p in platforms.split(",") if p.strip()
            ]

        interval = env.get(f"{ENV_PREFIX}LINK_SAMPLE_INTERVAL")
        if interval is not None:
            self.telemetry.link_sample_interval = float(interval)

        level = env.get(f"{ENV_PREFIX}LOG_LEVEL")
        if level is not None:
            self.logging.log_level = level.upper()

        if env.get(f"{ENV_PREFIX}DEBUG", "").lower() in ("1", "true", "yes"):
            self.debug = True

        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary"""
        return {
            "debug": self.debug,
            "version": self.version,
            "telemetry": {
                "link_sample_interval": self.telemetry.link_sample_interval,
                "metric_collection_interval": self.telemetry.metric_collection_interval,
                "kstat_platforms": list(self.telemetry.kstat_platforms),
                "hostname_max_len": self.telemetry.hostname_max_len,
            },
            "logging": {
                "log_level": self.logging.log_level,
            },
        }

    def save_to_file(self, file_path: str) -> None:
        """Save current settings to a JSON file"""
        with open(file_path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_from_file(cls, file_path: str) -> "Settings":
        """Load settings from a JSON file"""
        with open(file_path, "r") as f:
            data = json.load(f)

        telemetry = TelemetrySettings(**data.get("telemetry", {}))
        logging = LoggingSettings(**data.get("logging", {}))

        return cls(
            debug=data.get("debug", False),
            version=data.get("version", "0.1.0"),
            telemetry=telemetry,
            logging=logging,
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings().apply_env()
    return _settings


def initialize_settings(config_file: Optional[str] = None, **overrides) -> Settings:
    """Initialize settings with optional config file and overrides"""
    global _settings

    if config_file and os.path.exists(config_file):
        _settings = Settings.load_from_file(config_file)
    else:
        _settings = Settings()

    _settings.apply_env()

    for key, value in overrides.items():
        if hasattr(_settings, key):
            setattr(_settings, key, value)
        elif hasattr(_settings.telemetry, key):
            setattr(_settings.telemetry, key, value)

    return _settings


def reset_settings() -> None:
    """Reset settings to default (useful for testing)"""
    global _settings
    _settings = None
