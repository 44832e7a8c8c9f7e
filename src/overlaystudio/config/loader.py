"""YAML configuration discovery for Overlay Studio.

A config file holds one mapping per settings section::

    render:
      preset: fast
    export:
      timeout_seconds: 120

Sections found in the file become the base values of ``Settings``; sections
it leaves out are read from the environment (``EXPORT__TIMEOUT_SECONDS``)
and ``.env`` as usual.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings

from .settings import (
    EditorSettings,
    ExportSettings,
    MediaSettings,
    RenderSettings,
    Settings,
)

logger = logging.getLogger(__name__)

# Searched in this order in the working directory
DEFAULT_CONFIG_FILES = ["config.yaml", "config.yml", "overlaystudio.yaml", "overlaystudio.yml"]

SECTION_TYPES: dict[str, type[BaseSettings]] = {
    "editor": EditorSettings,
    "render": RenderSettings,
    "media": MediaSettings,
    "export": ExportSettings,
}


class ConfigLoader:
    """Locates a YAML config file and builds ``Settings`` from it.

    Args:
        config_path: Explicit config file. When it is missing or not given,
            the default file names are searched instead.
    """

    def __init__(self, config_path: Path | str | None = None) -> None:
        self.config_path = Path(config_path) if config_path else None
        self._yaml_config: dict[str, Any] | None = None

    def find_config_file(self, search_dir: Path | None = None) -> Path | None:
        """Return the config file to use, or None when there is none."""
        if self.config_path and self.config_path.exists():
            return self.config_path

        search_dir = search_dir or Path.cwd()
        return next(
            (search_dir / name for name in DEFAULT_CONFIG_FILES if (search_dir / name).exists()),
            None,
        )

    def load_yaml_config(self, path: Path | None = None) -> dict[str, Any]:
        """Read the config file once and cache its top-level mapping.

        Raises:
            ValueError: If the file does not contain a mapping.
        """
        if self._yaml_config is not None:
            return self._yaml_config

        config_file = path or self.find_config_file()
        if config_file is None:
            self._yaml_config = {}
            return self._yaml_config

        logger.debug("Loading configuration from %s", config_file)
        content = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
        if not isinstance(content, dict):
            raise ValueError(f"{config_file} must contain a mapping of settings sections")
        self._yaml_config = content
        return self._yaml_config

    def load_settings(self, config_path: Path | str | None = None) -> Settings:
        """Build ``Settings`` from the YAML sections plus the environment.

        Args:
            config_path: Replace the configured file before loading.
        """
        if config_path:
            self.config_path = Path(config_path)
            self._yaml_config = None

        yaml_config = self.load_yaml_config()
        for name in yaml_config.keys() - SECTION_TYPES.keys():
            logger.warning("Ignoring unknown config section %r", name)

        sections = {
            name: section_type(**yaml_config[name])
            for name, section_type in SECTION_TYPES.items()
            if yaml_config.get(name)
        }
        return Settings(**sections)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from ``config_path`` or the default config files."""
    return ConfigLoader(config_path).load_settings()
