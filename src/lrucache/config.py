"""Driver configuration loading for lrucache.

This module is intentionally small and deterministic: it only reads
`lrucache.toml` and performs light type validation. The cache itself takes
no configuration besides its capacity.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lrucache.errors import LRUCacheConfigError

CONFIG_FILENAME = "lrucache.toml"

DEFAULT_CAPACITY = 5
DEFAULT_DEMO_COUNT = 10
DEFAULT_KEY_PREFIX = "key"


@dataclass(frozen=True)
class CacheConfig:
    capacity: int


@dataclass(frozen=True)
class DemoConfig:
    count: int
    key_prefix: str
    show_values: bool


@dataclass(frozen=True)
class LRUCacheConfig:
    version: int
    cache: CacheConfig
    demo: DemoConfig


def default_config() -> LRUCacheConfig:
    """Configuration used when no `lrucache.toml` is found."""

    return LRUCacheConfig(
        version=1,
        cache=CacheConfig(capacity=DEFAULT_CAPACITY),
        demo=DemoConfig(count=DEFAULT_DEMO_COUNT, key_prefix=DEFAULT_KEY_PREFIX, show_values=False),
    )


def find_project_root(start: Path) -> Path:
    """Walk upward from `start` (file or directory) looking for `lrucache.toml`."""

    cur = start
    try:
        if cur.is_file():
            cur = cur.parent
    except OSError:
        cur = cur.parent

    cur = cur.resolve()
    while True:
        if (cur / CONFIG_FILENAME).is_file():
            return cur
        if cur.parent == cur:
            break
        cur = cur.parent

    raise LRUCacheConfigError(
        f"Could not find {CONFIG_FILENAME} by walking upward from start path."
    )


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise LRUCacheConfigError(f"Expected [{name}] to be a table.")
    return value


def _as_bool(value: Any, *, name: str) -> bool:
    if not isinstance(value, bool):
        raise LRUCacheConfigError(f"Expected {name} to be a boolean.")
    return value


def _as_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise LRUCacheConfigError(f"Expected {name} to be an integer.")
    return value


def _as_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise LRUCacheConfigError(f"Expected {name} to be a string.")
    return value


def load_config(*, root: Path | None = None, config_path: Path | None = None) -> LRUCacheConfig:
    """Load and validate `lrucache.toml`.

    If neither `root` nor `config_path` are provided, the project root is
    discovered by walking upward from the current working directory.
    """

    if config_path is None:
        if root is None:
            root = find_project_root(Path.cwd())
        config_path = root / CONFIG_FILENAME

    try:
        raw = config_path.read_bytes()
    except FileNotFoundError as e:
        raise LRUCacheConfigError(f"Missing {CONFIG_FILENAME} at: {config_path}") from e
    except OSError as e:
        raise LRUCacheConfigError(f"Failed reading config file: {config_path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise LRUCacheConfigError(f"Config is not valid UTF-8: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise LRUCacheConfigError(f"Invalid TOML in {config_path}: {e}") from e

    version = data.get("version", None)
    if version is None:
        raise LRUCacheConfigError(f"Missing required `version = 1` in {CONFIG_FILENAME}.")
    version_i = _as_int(version, name="version")
    if version_i != 1:
        raise LRUCacheConfigError(f"Unsupported config version: {version_i} (expected 1).")

    cache_tbl = _as_table(data.get("cache"), name="cache")
    demo_tbl = _as_table(data.get("demo"), name="demo")

    if "capacity" in cache_tbl:
        capacity = _as_int(cache_tbl["capacity"], name="cache.capacity")
    else:
        capacity = DEFAULT_CAPACITY

    if "count" in demo_tbl:
        count = _as_int(demo_tbl["count"], name="demo.count")
    else:
        count = DEFAULT_DEMO_COUNT

    if "key_prefix" in demo_tbl:
        key_prefix = _as_str(demo_tbl["key_prefix"], name="demo.key_prefix")
    else:
        key_prefix = DEFAULT_KEY_PREFIX

    if "show_values" in demo_tbl:
        show_values = _as_bool(demo_tbl["show_values"], name="demo.show_values")
    else:
        show_values = False

    # Validation
    if capacity < 1:
        raise LRUCacheConfigError("Invalid config: cache.capacity must be >= 1.")

    if count < 0:
        raise LRUCacheConfigError("Invalid config: demo.count must be >= 0.")

    return LRUCacheConfig(
        version=version_i,
        cache=CacheConfig(capacity=capacity),
        demo=DemoConfig(count=count, key_prefix=key_prefix, show_values=show_values),
    )


def load_config_or_default(
    *, root: Path | None = None, config_path: Path | None = None
) -> LRUCacheConfig:
    """Like `load_config`, but fall back to defaults when no file can be found.

    An explicit `config_path` must exist; only the upward search is lenient.
    """

    if config_path is not None:
        return load_config(root=root, config_path=config_path)
    if root is None:
        try:
            root = find_project_root(Path.cwd())
        except LRUCacheConfigError:
            return default_config()
    if not (root / CONFIG_FILENAME).is_file():
        return default_config()
    return load_config(root=root)
