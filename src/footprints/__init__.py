"""
footprints
==========

Record visited places per traveler and highlight them on a World, China or USA map.
"""

from importlib.metadata import PackageNotFoundError, version


try:
    __version__ = version("travel-footprints")
except PackageNotFoundError:  # pragma: no cover - occurs in local dev before install
    __version__ = "0.0.0"

__all__ = ["__version__"]
