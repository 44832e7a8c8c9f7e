"""Configuration module for Overlay Studio."""

from .loader import ConfigLoader, load_settings
from .settings import (
    EditorSettings,
    ExportSettings,
    MediaSettings,
    RenderSettings,
    Settings,
)

__all__ = [
    "ConfigLoader",
    "EditorSettings",
    "ExportSettings",
    "MediaSettings",
    "RenderSettings",
    "Settings",
    "load_settings",
]
