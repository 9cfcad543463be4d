from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from lrucache import __version__
from lrucache.cache import LRUCache
from lrucache.errors import LRUCacheConfigError, LRUCacheScriptError
from lrucache.script import format_entries, parse_script, run_script

if TYPE_CHECKING:  # pragma: no cover
    from lrucache.config import LRUCacheConfig


EXIT_OK = 0
EXIT_CONFIG_OR_USAGE = 2
EXIT_IO_ERROR = 3


def _add_common_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--root",
        type=str,
        default=None,
        help="Project root (defaults to searching upward from cwd for lrucache.toml).",
    )
    p.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to lrucache.toml (defaults to <root>/lrucache.toml).",
    )
    p.add_argument(
        "--capacity",
        type=int,
        default=None,
        help="Cache capacity override.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lrucache")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    demo_p = subparsers.add_parser(
        "demo", help="Insert sample entries one by one and print the recency order."
    )
    _add_common_flags(demo_p)
    demo_p.add_argument("--count", type=int, default=None, help="Number of entries to insert.")
    demo_p.add_argument("--key-prefix", type=str, default=None, help="Prefix for sample keys.")
    demo_p.add_argument(
        "--values",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Print key=value pairs instead of bare keys (overrides demo.show_values).",
    )

    replay_p = subparsers.add_parser("replay", help="Run a script of cache operations.")
    _add_common_flags(replay_p)
    replay_p.add_argument(
        "script",
        nargs="?",
        default="-",
        help="Script file (defaults to stdin).",
    )

    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def _resolve_root_and_config(args: argparse.Namespace) -> tuple[Path | None, Path | None]:
    root = Path(args.root).resolve() if args.root else None
    config_path = Path(args.config).resolve() if args.config else None
    return root, config_path


def _load_config(args: argparse.Namespace) -> LRUCacheConfig:
    from lrucache.config import load_config_or_default

    root, config_path = _resolve_root_and_config(args)
    return load_config_or_default(root=root, config_path=config_path)


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def _print_error(e: BaseException) -> None:
    msg = (str(e) or repr(e)).strip()
    _eprint(f"error: {msg}")


def _print_lines(lines: Iterable[str], out: TextIO) -> None:
    for line in lines:
        print(line, file=out)


def cmd_demo(args: argparse.Namespace) -> int:
    try:
        cfg = _load_config(args)
        capacity = args.capacity if args.capacity is not None else cfg.cache.capacity
        count = args.count if args.count is not None else cfg.demo.count
        prefix = args.key_prefix if args.key_prefix is not None else cfg.demo.key_prefix
        show_values = args.values if args.values is not None else cfg.demo.show_values

        if count < 0:
            raise LRUCacheConfigError("--count must be >= 0.")

        cache: LRUCache[str, object] = LRUCache(capacity)
        for i in range(count):
            cache.put(f"{prefix}{i}", i)
            print(format_entries(cache, show_values=show_values))
        return EXIT_OK
    except LRUCacheConfigError as e:
        _print_error(e)
        return EXIT_CONFIG_OR_USAGE


def _read_script(path: str) -> list[str]:
    if path == "-":
        return sys.stdin.read().splitlines()
    return Path(path).read_text(encoding="utf-8").splitlines()


def cmd_replay(args: argparse.Namespace) -> int:
    try:
        cfg = _load_config(args)
        capacity = args.capacity if args.capacity is not None else cfg.cache.capacity
        cache: LRUCache[str, str] = LRUCache(capacity)

        try:
            lines = _read_script(args.script)
        except (OSError, UnicodeDecodeError) as e:
            _print_error(e)
            return EXIT_IO_ERROR

        ops = parse_script(lines)
        _print_lines(run_script(cache, ops), sys.stdout)
        return EXIT_OK
    except (LRUCacheConfigError, LRUCacheScriptError) as e:
        _print_error(e)
        return EXIT_CONFIG_OR_USAGE


def main(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(list(sys.argv[1:] if argv is None else argv))
    except SystemExit as e:
        # argparse uses SystemExit for --help/--version and parse errors.
        code = e.code
        return int(code) if isinstance(code, int) else EXIT_CONFIG_OR_USAGE

    if args.command == "demo":
        return cmd_demo(args)
    if args.command == "replay":
        return cmd_replay(args)

    return EXIT_CONFIG_OR_USAGE


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
