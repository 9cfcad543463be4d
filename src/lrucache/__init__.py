from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version


def _package_version() -> str:
    try:
        return version("lrucache")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

from lrucache.cache import LRUCache  # noqa: E402
from lrucache.errors import (  # noqa: E402
    LRUCacheCapacityError,
    LRUCacheConfigError,
    LRUCacheError,
    LRUCacheScriptError,
    LRUCacheStateError,
)

__all__ = [
    "LRUCache",
    "LRUCacheCapacityError",
    "LRUCacheConfigError",
    "LRUCacheError",
    "LRUCacheScriptError",
    "LRUCacheStateError",
    "__version__",
]
