"""CLI commands for Overlay Studio."""

from .clean import clean
from .config_cmd import config
from .export import export
from .preview import preview
from .probe import probe
from .render import render

__all__ = [
    "clean",
    "config",
    "export",
    "preview",
    "probe",
    "render",
]
