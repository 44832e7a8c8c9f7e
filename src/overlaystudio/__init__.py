"""Overlay Studio: animated text overlays on video with WYSIWYG export."""

__version__ = "0.1.0"
