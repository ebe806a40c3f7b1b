"""
Configuration settings using Pydantic v2.

Supports loading from YAML files and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


def _to_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


class PartingConfig(BaseModel):
    """Parting detection parameters."""

    merge_inclusive: bool = Field(
        default=True,
        description="Merge neighbouring candles in an inclusive relationship before detection",
    )

    model_config = {
        "validate_assignment": True,
        "extra": "forbid",
    }


class ChartConfig(BaseModel):
    """Parting chart configuration."""

    width: float = Field(default=14.0, description="Figure width in inches", ge=4.0, le=40.0)
    height: float = Field(default=8.0, description="Figure height in inches", ge=3.0, le=20.0)
    max_bars: int = Field(
        default=200, description="Only the most recent N candles are drawn", ge=10, le=5000
    )
    dpi: int = Field(default=150, description="Resolution of saved images", ge=50, le=600)

    # Color scheme
    top_color: str = Field(default="#d62728", description="Top parting marker color")
    bottom_color: str = Field(default="#1f77b4", description="Bottom parting marker color")
    line_color: str = Field(default="purple", description="Line joining consecutive partings")

    model_config = {
        "validate_assignment": True,
        "extra": "forbid",
    }


class AppConfig(BaseModel):
    """Application-wide configuration."""

    parting: PartingConfig = Field(default_factory=PartingConfig)
    chart: ChartConfig = Field(default_factory=ChartConfig)

    # Path settings
    data_dir: str = Field(default="data/raw", description="Raw candle data directory")
    output_dir: str = Field(default="output", description="Output directory")
    log_dir: str = Field(default="logs", description="Log directory")

    # Logging settings
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_to_file: bool = Field(default=False, description="Enable file logging")

    model_config = {
        "validate_assignment": True,
        "extra": "forbid",
    }

    @classmethod
    def from_yaml(cls, path: str | Path) -> AppConfig:
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If the YAML is invalid or not a mapping
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {path}")

        data = cls._apply_env_overrides(data)

        return cls(**data)

    @classmethod
    def from_yaml_or_default(cls, path: str | Path | None = None) -> AppConfig:
        """
        Load configuration from YAML file or use defaults.

        Args:
            path: Optional path to YAML configuration file

        Returns:
            AppConfig instance
        """
        if path is None:
            default_paths = [
                Path("config.yaml"),
                Path("config/config.yaml"),
            ]

            for default_path in default_paths:
                if default_path.exists():
                    path = default_path
                    break

        if path and Path(path).exists():
            return cls.from_yaml(path)

        data = cls._apply_env_overrides({})
        return cls(**data)

    @classmethod
    def _apply_env_overrides(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Apply environment variable overrides to configuration.

        Environment variables are prefixed with CHANMORPH_
        Example: CHANMORPH_CHART_MAX_BARS=500
        """
        env_mappings = {
            "CHANMORPH_PARTING_MERGE_INCLUSIVE": ("parting", "merge_inclusive", _to_bool),
            "CHANMORPH_CHART_MAX_BARS": ("chart", "max_bars", int),
            "CHANMORPH_LOG_LEVEL": ("log_level", None, str),
            "CHANMORPH_LOG_TO_FILE": ("log_to_file", None, _to_bool),
            "CHANMORPH_OUTPUT_DIR": ("output_dir", None, str),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue
            if key is not None:
                # Nested config (e.g., chart.max_bars)
                nested = data.get(section) or {}
                nested[key] = converter(env_value)
                data[section] = nested
            else:
                data[section] = converter(env_value)

        return data

    def to_yaml(self, path: str | Path) -> None:
        """
        Save configuration to YAML file.

        Args:
            path: Path where to save the configuration
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False, sort_keys=False)
