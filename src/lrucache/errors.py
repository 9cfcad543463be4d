"""lrucache exception hierarchy.

Keep this module small and dependency-free: it is imported by every other
module and by tests.
"""


class LRUCacheError(Exception):
    """Base exception for all lrucache errors."""


class LRUCacheConfigError(LRUCacheError):
    """Raised for invalid user configuration."""


class LRUCacheCapacityError(LRUCacheConfigError, ValueError):
    """Raised when a cache is constructed with a non-positive capacity."""


class LRUCacheStateError(LRUCacheError):
    """Raised when the recency list and key index disagree, or a list primitive is misused."""


class LRUCacheScriptError(LRUCacheError):
    """Raised for a malformed line in a replay script."""

    def __init__(self, message: str, *, lineno: int | None = None) -> None:
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)
        self.lineno = lineno
