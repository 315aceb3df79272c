"""
Configuration package for the announcement service.

Environment settings are loaded once and shared through `settings`.
"""

from app.config.settings import settings, get_settings, Settings

__all__ = ['settings', 'get_settings', 'Settings']
