import pytest

from rollerkit.nested import KeyNotFoundError, get_nested_value, set_nested_value


def test_set_then_get_round_trip():
    data = {"a": {"b": {"c": 1}}}
    set_nested_value(data, ["a", "b", "c"], 42)
    assert get_nested_value(data, ["a", "b", "c"]) == 42


def test_set_top_level_key():
    data = {}
    set_nested_value(data, ["name"], "value")
    assert data == {"name": "value"}


def test_set_none_deletes_key():
    data = {"a": {"b": 1, "c": 2}}
    set_nested_value(data, ["a", "b"], None)
    assert data == {"a": {"c": 2}}


def test_set_none_on_missing_key_leaves_data_unchanged():
    data = {"a": {"c": 2}}
    set_nested_value(data, ["a", "missing"], None)
    assert data == {"a": {"c": 2}}


def test_set_empty_path_raises():
    with pytest.raises(ValueError, match="empty key path"):
        set_nested_value({}, [], 1)


def test_set_through_missing_parent_raises():
    with pytest.raises(ValueError, match="failed to set nested map for key: a"):
        set_nested_value({}, ["a", "b"], 1)


def test_set_through_scalar_parent_raises():
    with pytest.raises(ValueError, match="failed to set nested map for key: a"):
        set_nested_value({"a": 5}, ["a", "b"], 1)


def test_get_missing_key_raises_key_not_found():
    with pytest.raises(KeyNotFoundError) as info:
        get_nested_value({"a": {}}, ["a", "missing"])
    assert info.value.key == "missing"
    assert str(info.value) == "key not found: missing"


def test_get_empty_path_raises():
    with pytest.raises(ValueError, match="empty key path"):
        get_nested_value({"a": 1}, [])


def test_get_through_scalar_raises():
    with pytest.raises(ValueError, match="failed to get nested map for key: a"):
        get_nested_value({"a": "text"}, ["a", "b"])


def test_get_returns_nested_mapping():
    data = {"a": {"b": {"c": 1}}}
    assert get_nested_value(data, ["a", "b"]) == {"c": 1}