"""Configuration management."""

from prsuggest.config.loader import load_config
from prsuggest.config.settings import Settings

__all__ = ["Settings", "load_config"]
