"""Application settings loader from YAML configuration."""
import os
import yaml
from decimal import Decimal
from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass

from spendtrail.utils.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


@dataclass
class AppSettings:
    """Application-wide settings loaded from YAML."""

    # App info
    app_name: str
    app_version: str

    # Logging
    log_level: str

    # Parsing
    currency_symbols: List[str]
    rail_keywords: List[str]
    min_amount: Decimal
    max_amount: Decimal
    max_name_length: int

    # LLM
    llm_model_name: str
    llm_max_retries: int
    llm_backoff_factor: float
    llm_max_backoff: float
    llm_default_confidence: int
    llm_max_description_length: int

    # Preferences
    preference_initial_confidence: int
    preference_confidence_step: int
    preference_fuzzy_threshold: int
    preference_example_limit: int

    # Paths
    home_dir: str
    preferences_dir: str

    # Secrets come from the environment only
    gemini_api_key: Optional[str] = None

    @property
    def home_path(self) -> Path:
        return Path(os.getenv("SPENDTRAIL_HOME") or self.home_dir).expanduser()

    @property
    def preferences_path(self) -> Path:
        return self.home_path / self.preferences_dir

    @classmethod
    def load(cls, config_path: Path = None) -> "AppSettings":
        """
        Load settings from a YAML file.

        Resolution order: explicit path, $SPENDTRAIL_CONFIG, packaged defaults.

        Raises:
            ConfigError: If the file is missing, unreadable or lacks a key
        """
        if config_path is None:
            env_path = os.getenv("SPENDTRAIL_CONFIG")
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}")

        try:
            return cls(
                app_name=config["app"]["name"],
                app_version=str(config["app"]["version"]),
                log_level=config["logging"]["level"],
                currency_symbols=list(config["parsing"]["currency_symbols"]),
                rail_keywords=list(config["parsing"]["rail_keywords"]),
                min_amount=Decimal(str(config["parsing"]["min_amount"])),
                max_amount=Decimal(str(config["parsing"]["max_amount"])),
                max_name_length=config["parsing"]["max_name_length"],
                llm_model_name=config["llm"]["model_name"],
                llm_max_retries=config["llm"]["max_retries"],
                llm_backoff_factor=float(config["llm"]["backoff_factor"]),
                llm_max_backoff=float(config["llm"]["max_backoff"]),
                llm_default_confidence=config["llm"]["default_confidence"],
                llm_max_description_length=config["llm"]["max_description_length"],
                preference_initial_confidence=config["preferences"]["initial_confidence"],
                preference_confidence_step=config["preferences"]["confidence_step"],
                preference_fuzzy_threshold=config["preferences"]["fuzzy_match_threshold"],
                preference_example_limit=config["preferences"]["example_limit"],
                home_dir=config["paths"]["home_dir"],
                preferences_dir=config["paths"]["preferences_dir"],
                gemini_api_key=os.getenv("GEMINI_API_KEY")
            )
        except (KeyError, TypeError) as e:
            raise ConfigError(f"Missing configuration key in {config_path}: {e}")


# Global settings instance
_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings.load()
    return _settings
