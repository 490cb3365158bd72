"""Configuration management using Pydantic for validation."""

from pathlib import Path
from typing import Any, Dict, Literal

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ScrapeConfig(BaseSettings):
    """Search page fetching configuration."""

    endpoint: str = "https://archiveofourown.org"
    fandom: str = "Avatar: The Last Airbender"
    creators: str = ""
    user_agent: str = "fandom-vis/0.1 (personal research scraper)"
    timeout: int = 60
    interval_seconds: float | None = None
    threads: int = Field(default=1, ge=1)
    retry_attempts: int = Field(default=3, ge=1)


class IndexConfig(BaseSettings):
    """Search index configuration from environment variables."""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    # If set (e.g. ":memory:"), QdrantClient will use local/in-memory mode and no server is required.
    qdrant_location: str = Field(default="")
    qdrant_host: str = Field(default="localhost")
    qdrant_port: int = Field(default=6333)
    qdrant_api_key: str = Field(default="")
    qdrant_https: bool = Field(default=False)

    works_collection: str = Field(default="works")
    chunk_size: int = Field(default=1024)


class ShipsConfig(BaseSettings):
    """Ship network query configuration."""

    min_works: int = Field(default=50, ge=0)
    limit: int = Field(default=1000, ge=1)
    ship_kind: Literal["romantic", "platonic"] = "romantic"


class ReportConfig(BaseSettings):
    """Report rendering configuration."""

    width: float = 1150.0
    margin: float = 75.0
    font_size_large: str = "14px"
    wrap_labels: bool = False
    saturation: float = 0.68
    value: float = 0.69
    proportion_limit: int = 5
    significant_ship_limit: int = 5
    significant_tag_limit: int = 10

    @field_validator("saturation", "value")
    @classmethod
    def validate_unit_interval(cls, v: float) -> float:
        """Validate color components are between 0 and 1."""
        if not 0 <= v <= 1:
            raise ValueError("Color saturation/value must be between 0 and 1")
        return v


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = "INFO"
    file: str = "logs/fandomvis.log"
    rotation: str = "10 MB"
    retention: str = "1 week"


class Config(BaseSettings):
    """Main configuration class."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )

    # Configuration sections
    scrape: ScrapeConfig = Field(default_factory=ScrapeConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    ships: ShipsConfig = Field(default_factory=ShipsConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Data paths
    works_path: Path = Field(default=Path("data/works.jsonl"))
    reports_path: Path = Field(default=Path("data/reports"))

    @staticmethod
    def _deep_merge_dict(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        """Deep-merge two dicts (overrides win).

        This is used to apply environment-derived overrides on top of YAML defaults.
        """
        merged: Dict[str, Any] = dict(base)
        for key, value in overrides.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge_dict(merged[key], value)
            else:
                merged[key] = value
        return merged

    @classmethod
    def from_yaml(cls, yaml_path: str | Path = "config/config.yaml") -> "Config":
        """Load configuration from YAML file and environment variables.

        Precedence (highest to lowest):
        1) Environment variables / .env
        2) YAML file
        3) Model defaults

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance with loaded settings

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML file is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(yaml_path) as f:
            yaml_config = yaml.safe_load(f) or {}

        if not isinstance(yaml_config, dict):
            raise ValueError(f"YAML config root must be a mapping/dict: {yaml_path}")

        # Nested BaseSettings (like IndexConfig) do NOT pick up plain env vars
        # (e.g. QDRANT_HOST) via the parent model, so index overrides are computed
        # separately and merged under "index".
        env_overrides = cls().model_dump(exclude_defaults=True)

        index_env_overrides = IndexConfig().model_dump(exclude_defaults=True)
        if index_env_overrides:
            env_overrides["index"] = cls._deep_merge_dict(
                (
                    yaml_config.get("index", {})
                    if isinstance(yaml_config.get("index", {}), dict)
                    else {}
                ),
                index_env_overrides,
            )

        merged = cls._deep_merge_dict(yaml_config, env_overrides)

        return cls(**merged)

    def validate_config(self) -> None:
        """Validate configuration settings.

        Raises:
            ValueError: If configuration is invalid
        """
        self.works_path.parent.mkdir(parents=True, exist_ok=True)
        self.reports_path.mkdir(parents=True, exist_ok=True)

        if self.index.chunk_size < 1:
            raise ValueError(f"Index chunk_size must be positive, got {self.index.chunk_size}")
        if self.scrape.interval_seconds is not None and self.scrape.interval_seconds < 0:
            raise ValueError("Scrape interval_seconds cannot be negative")


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get or create global configuration instance.

    Returns:
        Global Config instance

    Raises:
        RuntimeError: If configuration hasn't been initialized
    """
    global _config
    if _config is None:
        raise RuntimeError("Configuration not initialized. Call load_config() first.")
    return _config


def load_config(yaml_path: str | Path = "config/config.yaml") -> Config:
    """Load and validate configuration.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        Loaded and validated Config instance
    """
    global _config
    _config = Config.from_yaml(yaml_path)
    _config.validate_config()
    return _config


def reset_config() -> None:
    """Reset global configuration (mainly for testing)."""
    global _config
    _config = None
