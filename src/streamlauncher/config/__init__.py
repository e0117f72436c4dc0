"""Configuration management for streamlauncher."""

from streamlauncher.config.manager import ConfigManager
from streamlauncher.config.schema import LauncherConfig

__all__ = ["ConfigManager", "LauncherConfig"]
