import json
import os
import stat
import sys

import pytest

from rollerkit.bash import CommandError
from rollerkit.keys import (
    KeyConfig,
    KeyInfo,
    create_address_binary,
    get_address_binary,
    get_address_info_binary,
    get_export_priv_key_cmd,
    is_address_with_name_in_keyring,
    parse_address_from_output,
    print_addresses_with_title,
)

_FAKE_SCRIPT = """#!{python}
import json, sys
args = sys.argv[1:]
with open(__file__ + ".args", "w") as handle:
    json.dump(args, handle)
if args[:2] == ["keys", "show"] and "--address" in args:
    print("  dym1fakeaddress  ")
elif args[:2] == ["keys", "show"]:
    print(json.dumps({{"name": args[2], "address": "dym1fakeaddress", "pubkey": "pk"}}))
elif args[:2] == ["keys", "add"]:
    print(json.dumps({{"name": args[2], "address": "dym1created", "mnemonic": "alpha beta gamma"}}))
elif args[:2] == ["keys", "list"]:
    print(json.dumps([{{"name": "Hub_Sequencer", "address": "dym1fakeaddress"}}]))
else:
    sys.exit(3)
"""


@pytest.fixture
def fake_binary(tmp_path):
    path = tmp_path / "fakechain"
    path.write_text(_FAKE_SCRIPT.format(python=sys.executable))
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return str(path)


def _recorded_args(binary):
    with open(binary + ".args") as handle:
        return json.load(handle)


def test_parse_address_from_output_reads_fields():
    info = parse_address_from_output(
        json.dumps({"name": "k", "address": "a", "mnemonic": "m", "pubkey": "p", "type": "local"})
    )
    assert info == KeyInfo(name="k", address="a", mnemonic="m", pub_key="p")


def test_parse_address_from_output_defaults_missing_fields():
    assert parse_address_from_output('{"address": "a"}') == KeyInfo(address="a")


def test_parse_address_from_output_rejects_bad_json():
    with pytest.raises(ValueError):
        parse_address_from_output("not json")


def test_parse_address_from_output_rejects_non_object():
    with pytest.raises(ValueError):
        parse_address_from_output("[1, 2]")


def test_show_prints_address_only_by_default(capsys):
    KeyInfo(name="k", address="addr", mnemonic="words").show()
    out = capsys.readouterr().out
    assert "\taddr\n" in out
    assert "words" not in out
    assert "k\n" not in out


def test_show_prints_mnemonic_and_name(capsys):
    KeyInfo(name="keyname", address="addr", mnemonic="words", pub_key="pk").show(
        name=True, mnemonic=True, pub_key=True
    )
    out = capsys.readouterr().out
    assert out.startswith("keyname\n")
    assert "\twords\n" in out
    assert "\tpk\n" in out


def test_print_addresses_with_title(capsys):
    print_addresses_with_title([KeyInfo(name="one", address="a1", mnemonic="m1")])
    out = capsys.readouterr().out
    assert "Addresses" in out
    assert "\tm1\n" in out
    assert "one\n" in out


def test_get_export_priv_key_cmd():
    cfg = KeyConfig(dir="d", id="key", chain_binary="chaind")
    assert get_export_priv_key_cmd(cfg) == [
        "chaind", "keys", "export", "key", "--keyring-backend", "test",
    ]


def test_get_address_binary_strips_output(fake_binary, tmp_path):
    cfg = KeyConfig(dir="hub_keys", id="hub_sequencer", chain_binary=fake_binary)
    assert get_address_binary(cfg, tmp_path) == "dym1fakeaddress"
    args = _recorded_args(fake_binary)
    assert args[args.index("--keyring-dir") + 1] == os.path.join(str(tmp_path), "hub_keys")


def test_get_address_info_binary(fake_binary, tmp_path):
    cfg = KeyConfig(dir="hub_keys", id="hub_sequencer", chain_binary=fake_binary)
    info = get_address_info_binary(cfg, tmp_path)
    assert info.name == "hub_sequencer"
    assert info.pub_key == "pk"


def test_create_address_binary_appends_recover(fake_binary, tmp_path):
    cfg = KeyConfig(dir="d", id="new", chain_binary=fake_binary, should_recover=True)
    info = create_address_binary(cfg, tmp_path)
    assert info.name == "new"
    assert _recorded_args(fake_binary)[-1] == "--recover"


def test_key_config_create_without_recover(fake_binary, tmp_path):
    cfg = KeyConfig(dir="d", id="fresh", chain_binary=fake_binary)
    info = cfg.create(tmp_path)
    assert info.mnemonic == "alpha beta gamma"
    assert "--recover" not in _recorded_args(fake_binary)


def test_is_address_with_name_in_keyring_ignores_case(fake_binary, tmp_path):
    present = KeyConfig(dir="d", id="hub_sequencer", chain_binary=fake_binary)
    absent = KeyConfig(dir="d", id="other", chain_binary=fake_binary)
    assert is_address_with_name_in_keyring(present, tmp_path) is True
    assert is_address_with_name_in_keyring(absent, tmp_path) is False


def test_missing_binary_raises(tmp_path):
    cfg = KeyConfig(dir="d", id="k", chain_binary=str(tmp_path / "does-not-exist"))
    with pytest.raises(CommandError):
        get_address_binary(cfg, tmp_path)