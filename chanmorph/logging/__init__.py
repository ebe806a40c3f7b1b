"""Logging configuration module."""

from .logger import configure_from_config, configure_logging, get_logger, reset_logging

__all__ = ["configure_logging", "configure_from_config", "get_logger", "reset_logging"]
