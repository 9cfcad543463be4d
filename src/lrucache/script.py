"""Replay scripts: a line-oriented list of cache operations.

Each non-blank, non-comment line is one of::

    put KEY VALUE
    get KEY
    remove KEY
    show
    len

VALUE is the rest of the line after KEY and may contain spaces. Keys and
values are kept as strings.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Literal

from lrucache.cache import LRUCache
from lrucache.errors import LRUCacheScriptError

OpName = Literal["put", "get", "remove", "show", "len"]

_ARITY: dict[str, int] = {"put": 2, "get": 1, "remove": 1, "show": 0, "len": 0}


@dataclass(frozen=True, slots=True)
class Operation:
    op: OpName
    lineno: int
    key: str | None = None
    value: str | None = None


def parse_line(line: str, *, lineno: int) -> Operation | None:
    """Parse one script line. Returns None for blank lines and comments."""

    text = line.strip()
    if not text or text.startswith("#"):
        return None

    parts = text.split(maxsplit=2)
    name = parts[0].lower()
    if name not in _ARITY:
        raise LRUCacheScriptError(f"unknown operation {parts[0]!r}", lineno=lineno)

    args = parts[1:]
    if len(args) != _ARITY[name]:
        raise LRUCacheScriptError(
            f"{name} takes {_ARITY[name]} argument(s), got {len(args)}", lineno=lineno
        )

    if name == "put":
        return Operation(op="put", lineno=lineno, key=args[0], value=args[1])
    if name in ("get", "remove"):
        return Operation(op=name, lineno=lineno, key=args[0])  # type: ignore[arg-type]
    return Operation(op=name, lineno=lineno)  # type: ignore[arg-type]


def parse_script(lines: Iterable[str]) -> list[Operation]:
    """Parse a whole script up front so a bad line fails before anything runs."""

    ops: list[Operation] = []
    for lineno, line in enumerate(lines, start=1):
        op = parse_line(line, lineno=lineno)
        if op is not None:
            ops.append(op)
    return ops


def format_entries(cache: LRUCache[str, object], *, show_values: bool = False) -> str:
    """Keys from most to least recently used, space separated (`key=value` with values)."""

    if show_values:
        return " ".join(f"{k}={v}" for k, v in cache.items())
    return " ".join(str(k) for k in cache)


def run_script(cache: LRUCache[str, str], ops: Iterable[Operation]) -> Iterator[str]:
    """Apply ``ops`` to ``cache`` in order, yielding one output line per reporting op."""

    for op in ops:
        if op.op == "put":
            assert op.key is not None and op.value is not None
            cache.put(op.key, op.value)
        elif op.op == "get":
            assert op.key is not None
            yield str(cache.get(op.key))
        elif op.op == "remove":
            assert op.key is not None
            yield str(cache.remove(op.key))
        elif op.op == "show":
            yield format_entries(cache)
        elif op.op == "len":
            yield str(len(cache))
        else:  # pragma: no cover
            raise LRUCacheScriptError(f"unknown operation {op.op!r}", lineno=op.lineno)
