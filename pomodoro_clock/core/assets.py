from __future__ import annotations

"""Loading of bundled assets with an in-memory cache."""

from pathlib import Path


ASSETS_DIR = Path(__file__).resolve().parents[1] / "assets"
_BYTES_CACHE: dict[str, bytes] = {}


def get_asset_path(relative: str) -> Path:
    """Resolve a path relative to the package `assets/` directory."""
    return ASSETS_DIR / relative


def load_asset_bytes(relative: str) -> bytes:
    """Read an asset once and serve later calls from the cache."""
    if relative in _BYTES_CACHE:
        return _BYTES_CACHE[relative]

    data = get_asset_path(relative).read_bytes()
    _BYTES_CACHE[relative] = data
    return data
