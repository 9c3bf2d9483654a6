"""Canonical default path selection across registry path vocabularies."""

from collections.abc import Mapping

# Checked in order; the first key present wins.
DEFAULT_PATH_KEYS = ("BLOCKS", "CURRENT_REGISTRY_PATH", "NEW_YORK_V4_PATH")


def select_default_path(paths: Mapping[str, str]) -> str | None:
    """Return the default registry path, or None if no known key is present."""
    for key in DEFAULT_PATH_KEYS:
        if key in paths:
            return paths[key]
    return None
