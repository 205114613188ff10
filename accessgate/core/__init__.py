"""Core: config, constants, and exception handlers.

Single place for settings and shared constants.
"""

from accessgate.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
