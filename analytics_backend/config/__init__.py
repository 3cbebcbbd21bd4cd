"""Configuration package for the analytics period engine"""

from .settings import get_settings, clear_settings_cache, Settings

__all__ = ["get_settings", "clear_settings_cache", "Settings"]
