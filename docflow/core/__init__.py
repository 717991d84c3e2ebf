"""Core: config, exception handlers, rate limits and application lifespan.

Single place for settings and shared constants.
"""

from docflow.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
