import copy

import pytest
import yaml

from rollerkit.yamlconfig import EibcConfig, add_rollapp_to_eibc, update_nested_yaml

EIBC_CONFIG = {
    "home_dir": "/home/user/.eibc-client",
    "node_address": "http://localhost:36657",
    "db_path": "mongodb://localhost:27017",
    "gas": {"prices": "2000000000adym", "fees": "", "minimum_gas_balance": "40000000000adym"},
    "order_polling": {"indexer_url": "http://localhost:3000", "interval": "30s", "enabled": True},
    "whale": {
        "account_name": "client",
        "keyring_backend": "test",
        "keyring_dir": "/home/user/.eibc",
        "allowed_balance_thresholds": {"adym": "1000"},
    },
    "bots": {
        "number_of_bots": 30,
        "keyring_backend": "test",
        "keyring_dir": "/home/user/.eibc",
        "top_up_factor": 5,
        "max_orders_per_tx": 10,
    },
    "fulfill_criteria": {
        "min_fee_percentage": {"chain": {"rollapp_1-1": 0.1}, "asset": {"adym": 0.5}}
    },
    "log_level": "info",
    "slack": {"enabled": False, "bot_token": "token", "app_token": "token", "channel_id": "general"},
    "skip_refund": True,
}


def test_eibc_config_round_trip():
    assert EibcConfig.from_dict(EIBC_CONFIG).to_dict() == EIBC_CONFIG


def test_eibc_config_defaults_from_empty():
    cfg = EibcConfig.from_dict({})
    assert cfg.whale.allowed_balance_thresholds == {}
    assert cfg.fulfill_criteria.min_fee_percentage.chain == {}
    assert set(cfg.to_dict()) == set(EIBC_CONFIG)


def test_fee_percentages_become_floats():
    cfg = EibcConfig.from_dict({"fulfill_criteria": {"min_fee_percentage": {"chain": {"x_1-1": 1}}}})
    value = cfg.fulfill_criteria.min_fee_percentage.chain["x_1-1"]
    assert isinstance(value, float) and value == 1


def test_remove_chain():
    cfg = EibcConfig.from_dict(copy.deepcopy(EIBC_CONFIG))
    cfg.remove_chain("rollapp_1-1")
    cfg.remove_chain("absent_1-1")
    assert cfg.fulfill_criteria.min_fee_percentage.chain == {}


def test_remove_allowed_balance_threshold():
    cfg = EibcConfig.from_dict(copy.deepcopy(EIBC_CONFIG))
    cfg.remove_allowed_balance_threshold("adym")
    assert cfg.whale.allowed_balance_thresholds == {}


def test_remove_denom():
    cfg = EibcConfig.from_dict(copy.deepcopy(EIBC_CONFIG))
    cfg.remove_denom("adym")
    assert cfg.fulfill_criteria.min_fee_percentage.asset == {}
    assert cfg.fulfill_criteria.min_fee_percentage.chain == {"rollapp_1-1": 0.1}


def test_update_nested_yaml(tmp_path):
    path = tmp_path / "conf.yaml"
    path.write_text(yaml.safe_dump({"a": {"b": 1}, "c": 2}), encoding="utf-8")
    update_nested_yaml(path, {"a.d": 3, "e.f.g": "h"})
    assert yaml.safe_load(path.read_text(encoding="utf-8")) == {
        "a": {"b": 1, "d": 3},
        "c": 2,
        "e": {"f": {"g": "h"}},
    }


def test_update_nested_yaml_scalar_in_path(tmp_path):
    path = tmp_path / "conf.yaml"
    original = yaml.safe_dump({"a": "scalar"})
    path.write_text(original, encoding="utf-8")
    with pytest.raises(ValueError, match="error updating a.b"):
        update_nested_yaml(path, {"a.b": 1})
    assert path.read_text(encoding="utf-8") == original


def test_update_nested_yaml_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        update_nested_yaml(tmp_path / "absent.yaml", {"a": 1})


def test_add_rollapp_to_eibc(tmp_path):
    (tmp_path / "config.yaml").write_text(yaml.safe_dump(EIBC_CONFIG), encoding="utf-8")
    add_rollapp_to_eibc("0.2", "mock_1-1", tmp_path)
    data = yaml.safe_load((tmp_path / "config.yaml").read_text(encoding="utf-8"))
    chains = data["fulfill_criteria"]["min_fee_percentage"]["chain"]
    assert chains == {"rollapp_1-1": 0.1, "mock_1-1": 0.2}
    assert data["home_dir"] == EIBC_CONFIG["home_dir"]


def test_add_rollapp_to_eibc_bad_value(tmp_path):
    (tmp_path / "config.yaml").write_text(yaml.safe_dump(EIBC_CONFIG), encoding="utf-8")
    with pytest.raises(ValueError, match="failed to convert value to float"):
        add_rollapp_to_eibc("abc", "mock_1-1", tmp_path)


def test_add_rollapp_to_eibc_missing_config(tmp_path):
    with pytest.raises(OSError, match="failed to update config"):
        add_rollapp_to_eibc("0.2", "mock_1-1", tmp_path / "nowhere")