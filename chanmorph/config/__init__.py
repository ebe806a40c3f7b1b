"""Configuration management module."""

from .settings import AppConfig, ChartConfig, PartingConfig

__all__ = ["AppConfig", "ChartConfig", "PartingConfig"]
