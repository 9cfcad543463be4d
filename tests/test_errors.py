import pytest

from lrucache.errors import (
    LRUCacheCapacityError,
    LRUCacheConfigError,
    LRUCacheError,
    LRUCacheScriptError,
    LRUCacheStateError,
)


def test_all_errors_are_subclasses_of_lrucache_error() -> None:
    assert issubclass(LRUCacheConfigError, LRUCacheError)
    assert issubclass(LRUCacheCapacityError, LRUCacheError)
    assert issubclass(LRUCacheStateError, LRUCacheError)
    assert issubclass(LRUCacheScriptError, LRUCacheError)


def test_capacity_error_is_a_config_and_value_error() -> None:
    assert issubclass(LRUCacheCapacityError, LRUCacheConfigError)
    assert issubclass(LRUCacheCapacityError, ValueError)


def test_error_message_is_preserved() -> None:
    msg = "boom"
    err = LRUCacheConfigError(msg)
    assert str(err) == msg


def test_script_error_prefixes_line_number() -> None:
    err = LRUCacheScriptError("unknown operation 'pop'", lineno=3)
    assert str(err) == "line 3: unknown operation 'pop'"
    assert err.lineno == 3

    bare = LRUCacheScriptError("empty")
    assert str(bare) == "empty"
    assert bare.lineno is None


def test_can_catch_any_lrucache_error() -> None:
    def raise_one() -> None:
        raise LRUCacheStateError("nope")

    with pytest.raises(LRUCacheError):
        raise_one()
