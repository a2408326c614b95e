import json

import pytest

from rollerkit.jsonconfig import PathValue, set_json_path, update_json_params


def test_set_creates_nested_objects():
    doc = {}
    set_json_path(doc, "a.b.c", 1)
    assert doc == {"a": {"b": {"c": 1}}}


def test_set_overwrites_existing_value():
    doc = {"a": {"b": "old", "keep": True}}
    set_json_path(doc, "a.b", "new")
    assert doc == {"a": {"b": "new", "keep": True}}


def test_set_array_element_field():
    doc = {"min_deposit": [{"denom": "stake", "amount": "10"}]}
    set_json_path(doc, "min_deposit.0.denom", "amock")
    assert doc == {"min_deposit": [{"denom": "amock", "amount": "10"}]}


def test_minus_one_appends():
    doc = {"items": [1]}
    set_json_path(doc, "items.-1", 2)
    assert doc == {"items": [1, 2]}


def test_index_past_end_pads_with_null():
    doc = {"items": []}
    set_json_path(doc, "items.2", "x")
    assert doc == {"items": [None, None, "x"]}


def test_escaped_dot_is_literal():
    doc = {}
    set_json_path(doc, "a\\.b", "v")
    assert doc == {"a.b": "v"}


def test_scalar_on_path_raises():
    doc = {"a": "text"}
    with pytest.raises(ValueError):
        set_json_path(doc, "a.b", 1)
    assert doc == {"a": "text"}


def test_non_numeric_array_key_raises():
    with pytest.raises(ValueError, match="array index"):
        set_json_path({"items": []}, "items.name", 1)


def test_dataclass_value_is_serialized():
    doc = {}
    set_json_path(doc, "entry", PathValue(path="p", value=[1, 2]))
    assert doc == {"entry": {"path": "p", "value": [1, 2]}}


def test_update_json_params(tmp_path, capsys):
    genesis = {
        "app_state": {
            "mint": {"params": {"mint_denom": "stake"}},
            "gov": {"deposit_params": {"min_deposit": [{"denom": "stake", "amount": "10"}]}},
        },
        "consensus_params": {"block": {"max_gas": "-1"}},
    }
    path = tmp_path / "genesis.json"
    path.write_text(json.dumps(genesis), encoding="utf-8")

    update_json_params(
        path,
        [
            PathValue("app_state.mint.params.mint_denom", "amock"),
            PathValue("app_state.gov.deposit_params.min_deposit.0.denom", "amock"),
            PathValue("consensus_params.block.max_gas", "40000000"),
            PathValue("app_state.evm.params.extra_eips", ["3855"]),
            PathValue("app_state.feemarket.params.no_base_fee", True),
        ],
    )

    result = json.loads(path.read_text(encoding="utf-8"))
    assert result["app_state"]["mint"]["params"]["mint_denom"] == "amock"
    assert result["app_state"]["gov"]["deposit_params"]["min_deposit"] == [
        {"denom": "amock", "amount": "10"}
    ]
    assert result["consensus_params"]["block"]["max_gas"] == "40000000"
    assert result["app_state"]["evm"]["params"]["extra_eips"] == ["3855"]
    assert result["app_state"]["feemarket"]["params"]["no_base_fee"] is True
    assert "app_state.mint.params.mint_denom" in capsys.readouterr().out


def test_update_json_params_failure_leaves_file(tmp_path):
    path = tmp_path / "genesis.json"
    original = json.dumps({"a": "text"})
    path.write_text(original, encoding="utf-8")
    with pytest.raises(ValueError):
        update_json_params(path, [PathValue("a.b", 1)])
    assert path.read_text(encoding="utf-8") == original


def test_update_json_params_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        update_json_params(tmp_path / "absent.json", [PathValue("a", 1)])