"""Application settings loader from YAML configuration."""
import os
import yaml
from pathlib import Path
from typing import Optional
from dataclasses import dataclass

from budgetwise.utils.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "resources" / "config.yaml"


@dataclass
class AppSettings:
    """Application-wide settings loaded from config.yaml."""

    # App info
    app_name: str
    app_version: str

    # Logging
    log_level: str
    log_max_file_size_mb: int
    log_backup_count: int

    # Backend API
    api_base_url: str
    api_timeout_seconds: float

    # LLM
    llm_primary_model: str
    llm_fallback_model: str
    llm_endpoint_path: str
    llm_relay_url: Optional[str]
    llm_timeout_seconds: float
    llm_temperature: float
    llm_max_tokens: int

    # Paths
    context_file: str
    refusal_patterns_file: Optional[str]

    @property
    def llm_endpoint_url(self) -> str:
        """Primary model endpoint on the backend API."""
        return self.api_base_url.rstrip("/") + "/" + self.llm_endpoint_path.lstrip("/")

    @classmethod
    def load(cls, config_path: Path = None) -> "AppSettings":
        """Load settings from YAML file."""
        if config_path is None:
            env_path = os.getenv("BUDGETWISE_CONFIG")
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

        try:
            return cls(
                app_name=config["app"]["name"],
                app_version=str(config["app"]["version"]),
                log_level=config["logging"]["level"],
                log_max_file_size_mb=config["logging"]["max_file_size_mb"],
                log_backup_count=config["logging"]["backup_count"],
                api_base_url=config["api"]["base_url"],
                api_timeout_seconds=float(config["api"]["timeout_seconds"]),
                llm_primary_model=config["llm"]["primary_model"],
                llm_fallback_model=config["llm"]["fallback_model"],
                llm_endpoint_path=config["llm"]["endpoint_path"],
                llm_relay_url=config["llm"].get("relay_url") or None,
                llm_timeout_seconds=float(config["llm"]["timeout_seconds"]),
                llm_temperature=float(config["llm"]["temperature"]),
                llm_max_tokens=int(config["llm"]["max_tokens"]),
                context_file=config["paths"]["context_file"],
                refusal_patterns_file=config["paths"].get("refusal_patterns_file")
            )
        except (KeyError, TypeError) as e:
            raise ConfigError(f"Invalid configuration file {config_path}: missing {e}") from e


# Global settings instance
_settings: AppSettings = None


def get_settings() -> AppSettings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings.load()
    return _settings
