"""Configuration loading for the checklist engine."""

from .engine_config import load_config, get_config, DEFAULTS, CONFIG_PATH

__all__ = ["load_config", "get_config", "DEFAULTS", "CONFIG_PATH"]
