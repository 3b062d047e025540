"""
Configuration package for orgdown

Provides application settings via environment variables using pydantic-settings.
"""

from .settings import appsettings, AppSettings, options_resolve

__all__ = ["appsettings", "AppSettings", "options_resolve"]
