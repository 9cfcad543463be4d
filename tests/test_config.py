from __future__ import annotations

from pathlib import Path

import pytest

from lrucache.config import (
    default_config,
    find_project_root,
    load_config,
    load_config_or_default,
)
from lrucache.errors import LRUCacheConfigError


def test_load_minimal_config_defaults_apply(tmp_path: Path) -> None:
    (tmp_path / "lrucache.toml").write_text("version = 1\n", encoding="utf-8")
    cfg = load_config(root=tmp_path)

    assert cfg.version == 1
    assert cfg.cache.capacity == 5
    assert cfg.demo.count == 10
    assert cfg.demo.key_prefix == "key"
    assert cfg.demo.show_values is False
    assert cfg == default_config()


def test_load_config_overrides_work(tmp_path: Path) -> None:
    (tmp_path / "lrucache.toml").write_text(
        "\n".join(
            [
                "version = 1",
                "",
                "[cache]",
                "capacity = 2",
                "",
                "[demo]",
                "count = 4",
                'key_prefix = "k"',
                "show_values = true",
                "",
            ]
        )
        + "\n",
        encoding="utf-8",
    )

    cfg = load_config(root=tmp_path)
    assert cfg.cache.capacity == 2
    assert cfg.demo.count == 4
    assert cfg.demo.key_prefix == "k"
    assert cfg.demo.show_values is True


def test_invalid_toml_raises(tmp_path: Path) -> None:
    p = tmp_path / "lrucache.toml"
    p.write_text("version = \n", encoding="utf-8")
    with pytest.raises(LRUCacheConfigError):
        load_config(root=tmp_path)


def test_missing_config_raises(tmp_path: Path) -> None:
    with pytest.raises(LRUCacheConfigError):
        load_config(config_path=tmp_path / "lrucache.toml")


def test_missing_version_raises(tmp_path: Path) -> None:
    (tmp_path / "lrucache.toml").write_text("[cache]\ncapacity = 3\n", encoding="utf-8")
    with pytest.raises(LRUCacheConfigError, match="version"):
        load_config(root=tmp_path)


def test_unsupported_version_raises(tmp_path: Path) -> None:
    (tmp_path / "lrucache.toml").write_text("version = 2\n", encoding="utf-8")
    with pytest.raises(LRUCacheConfigError, match="Unsupported"):
        load_config(root=tmp_path)


@pytest.mark.parametrize(
    "body",
    [
        "version = 1\n[cache]\ncapacity = 0\n",
        "version = 1\n[cache]\ncapacity = -3\n",
        'version = 1\n[cache]\ncapacity = "5"\n',
        "version = 1\n[cache]\ncapacity = true\n",
        "version = 1\n[demo]\ncount = -1\n",
        "version = 1\n[demo]\nkey_prefix = 3\n",
        'version = 1\n[demo]\nshow_values = "yes"\n',
        "version = 1\ncache = 3\n",
    ],
)
def test_invalid_values_raise(tmp_path: Path, body: str) -> None:
    (tmp_path / "lrucache.toml").write_text(body, encoding="utf-8")
    with pytest.raises(LRUCacheConfigError):
        load_config(root=tmp_path)


def test_find_project_root_success(tmp_path: Path) -> None:
    (tmp_path / "lrucache.toml").write_text("version = 1\n", encoding="utf-8")
    deep = tmp_path / "a" / "b"
    deep.mkdir(parents=True)

    assert find_project_root(deep) == tmp_path
    some_file = deep / "x.txt"
    some_file.write_text("x\n", encoding="utf-8")
    assert find_project_root(some_file) == tmp_path


def test_load_config_or_default_without_file(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert load_config_or_default() == default_config()
    assert load_config_or_default(root=tmp_path) == default_config()


def test_load_config_or_default_finds_file_upward(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "lrucache.toml").write_text("version = 1\n[cache]\ncapacity = 9\n", encoding="utf-8")
    deep = tmp_path / "sub"
    deep.mkdir()
    monkeypatch.chdir(deep)
    assert load_config_or_default().cache.capacity == 9


def test_load_config_or_default_explicit_path_must_exist(tmp_path: Path) -> None:
    with pytest.raises(LRUCacheConfigError):
        load_config_or_default(config_path=tmp_path / "nope.toml")
