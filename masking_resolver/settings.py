"""Settings for building a masking resolver stack.

Settings file format (``masking.yaml``):

```yaml
search_path:
  - vendor/guava-11.0.1.jar
  - src
name_masks:
  - com.example.Secret
library_mask_files:
  - libraries.list
library_masks:
  - com.google.guava:guava
cache_max_entries: 1024   # 0 = never evict
```

Resolution order for the settings file:
1. Explicit path
2. MASKING_RESOLVER_CONFIG environment variable
3. ./masking.yaml (if present)

MASKING_RESOLVER_MASKS (comma separated) appends name masks.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError

from .cache import AttributionCache
from .cache import LruEviction
from .cache import NoEviction
from .identifier import LibraryIdentifier
from .mask_list import parse_library_masks
from .resolver import MaskingResolver
from .sources import ModuleResolver
from .sources import SearchPathResolver

logger = logging.getLogger(__name__)

CONFIG_ENV = "MASKING_RESOLVER_CONFIG"
MASKS_ENV = "MASKING_RESOLVER_MASKS"
DEFAULT_CONFIG_FILE = Path("masking.yaml")


class SettingsError(ValueError):
    """Settings file could not be read or validated."""


class MaskingSettings(BaseModel):
    """Configuration of a masking resolver stack."""

    search_path: list[str] = Field(default_factory=list, description="Directories and archives to resolve against")
    name_masks: list[str] = Field(default_factory=list, description="Dotted name prefixes to hide")
    library_mask_files: list[str] = Field(default_factory=list, description="Mask-list resources to load")
    library_masks: list[str] = Field(default_factory=list, description="Inline group:artifact entries")
    cache_max_entries: int = Field(default=1024, ge=0, description="Attribution cache capacity (0 = unbounded)")


def _find_config_file(path: str | Path | None) -> Path | None:
    if path is not None:
        return Path(path)
    if env_path := os.getenv(CONFIG_ENV):
        return Path(env_path)
    if DEFAULT_CONFIG_FILE.exists():
        return DEFAULT_CONFIG_FILE
    return None


def load_settings(path: str | Path | None = None) -> MaskingSettings:
    """Load settings from YAML plus environment overrides.

    Args:
        path: Settings file (optional, see module docstring for fallbacks)

    Returns:
        MaskingSettings

    Raises:
        SettingsError: File unreadable, invalid YAML, or schema mismatch
    """
    data: dict = {}
    config_file = _find_config_file(path)
    if config_file is not None:
        try:
            with open(config_file, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise SettingsError(f"Failed to read settings from {config_file}: {e}") from e
        if not isinstance(data, dict):
            raise SettingsError(f"Settings in {config_file} must be a mapping")
        logger.debug(f"Loaded settings from {config_file}")

    try:
        settings = MaskingSettings(**data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {config_file}: {e}") from e

    if env_masks := os.getenv(MASKS_ENV):
        settings.name_masks.extend(mask.strip() for mask in env_masks.split(",") if mask.strip())

    return settings


def build_resolver(settings: MaskingSettings, parent: ModuleResolver | None = None) -> MaskingResolver:
    """Build a MaskingResolver from settings.

    Args:
        settings: Loaded settings
        parent: Resolver to wrap (defaults to a SearchPathResolver over settings.search_path)

    Returns:
        Configured MaskingResolver
    """
    if parent is None:
        parent = SearchPathResolver(settings.search_path)

    policy = LruEviction(settings.cache_max_entries) if settings.cache_max_entries else NoEviction()
    cache = AttributionCache(LibraryIdentifier().identify, policy)

    resolver = MaskingResolver(parent, settings.name_masks, cache=cache)
    for resource in settings.library_mask_files:
        resolver.load_library_masks(resource)
    resolver.add_library_masks(parse_library_masks(settings.library_masks))
    return resolver


__all__ = ["MaskingSettings", "SettingsError", "build_resolver", "load_settings"]
