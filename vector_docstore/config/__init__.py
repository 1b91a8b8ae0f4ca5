"""Configuration management."""

from .settings import Settings
from .logging import get_logger, setup_logging

__all__ = ["Settings", "setup_logging", "get_logger"]
