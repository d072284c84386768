"""Configuration and logging helpers."""
from .config import Settings, get_settings
from .logger import setup_logging, get_logger

__all__ = ["Settings", "get_settings", "setup_logging", "get_logger"]
