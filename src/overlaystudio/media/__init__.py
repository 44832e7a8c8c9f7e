"""Source media handling."""

from .probe import MediaInfo, MediaProbeFailure, import_media, probe_media, resolve_media_path

__all__ = [
    "MediaInfo",
    "MediaProbeFailure",
    "import_media",
    "probe_media",
    "resolve_media_path",
]
