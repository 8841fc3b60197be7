"""Core: config, limiter, exception handlers, and application bootstrap.

Single place for settings (get_settings) and app wiring helpers.
"""

from app.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
