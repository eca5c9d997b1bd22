"""Configuration management: TOML loading and settings model.

Usage:
    >>> from site_snapshot.config import load_settings, SnapshotSettings
"""

from site_snapshot.config.loader import load_settings
from site_snapshot.config.models import SnapshotSettings

__all__ = ["load_settings", "SnapshotSettings"]
