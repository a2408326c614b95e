import json

import pytest

from rollerkit.rollapp_types import DenomMetadata, ShowRollappResponse

SAMPLE = {
    "rollapp": {
        "rollapp_id": "myrollapp_1234-1",
        "owner": "dym1owner",
        "genesis_state": {"transfers_enabled": True},
        "registeredDenoms": ["amock", "ibc/ABC"],
        "metadata": {
            "website": "https://example.com",
            "genesis_url": "https://example.com/genesis.json",
            "fee_denom": {"display": "MOCK", "base": "amock", "exponent": 18},
        },
        "genesis_info": {
            "genesis_checksum": "deadbeef",
            "bech32_prefix": "mock",
            "native_denom": {"display": "MOCK", "base": "amock", "exponent": 18},
            "initial_supply": "1000",
            "sealed": True,
        },
        "initial_sequencer": "*",
        "vm_type": "EVM",
        "launched": True,
    },
    "summary": {
        "rollappId": "myrollapp_1234-1",
        "latestStateIndex": {"rollappId": "myrollapp_1234-1", "index": "7"},
        "latestHeight": "100",
    },
}


def test_from_json_reads_rollapp_fields():
    response = ShowRollappResponse.from_json(json.dumps(SAMPLE))
    rollapp = response.rollapp
    assert rollapp.rollapp_id == "myrollapp_1234-1"
    assert rollapp.transfers_enabled is True
    assert rollapp.registered_denoms == ["amock", "ibc/ABC"]
    assert rollapp.vm_type == "EVM"
    assert rollapp.launched is True
    assert rollapp.initial_sequencer == "*"


def test_from_dict_reads_genesis_info():
    genesis = ShowRollappResponse.from_dict(SAMPLE).rollapp.genesis_info
    assert genesis.genesis_checksum == "deadbeef"
    assert genesis.native_denom == DenomMetadata(display="MOCK", base="amock", exponent=18)
    assert genesis.sealed is True


def test_from_dict_reads_metadata_and_summary():
    response = ShowRollappResponse.from_dict(SAMPLE)
    assert response.rollapp.metadata.genesis_url == "https://example.com/genesis.json"
    assert response.rollapp.metadata.fee_denom.base == "amock"
    assert response.summary.latest_state_index.index == "7"
    assert response.summary.latest_finalized_state_index is None
    assert response.summary.latest_height == "100"


def test_missing_optional_parts_take_defaults():
    response = ShowRollappResponse.from_json('{"rollapp": {"rollapp_id": "a_1-1"}}')
    assert response.rollapp.metadata is None
    assert response.rollapp.genesis_info.native_denom is None
    assert response.rollapp.registered_denoms == []
    assert response.summary.rollapp_id == ""


def test_string_exponent_is_accepted():
    data = {"rollapp": {"genesis_info": {"native_denom": {"base": "amock", "exponent": "6"}}}}
    denom = ShowRollappResponse.from_dict(data).rollapp.genesis_info.native_denom
    assert denom.exponent == 6


def test_wrong_type_raises():
    with pytest.raises(ValueError):
        ShowRollappResponse.from_dict({"rollapp": {"frozen": "yes"}})


def test_non_object_json_raises():
    with pytest.raises(ValueError):
        ShowRollappResponse.from_json("[1, 2]")


def test_invalid_json_raises():
    with pytest.raises(json.JSONDecodeError):
        ShowRollappResponse.from_json("not json")