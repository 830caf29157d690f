"""Configuration module for voice2action."""

from voice2action.config.loader import get_config_path, load_config
from voice2action.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]
