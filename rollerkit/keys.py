"""Wallet keys held in a chain binary's keyring."""

from __future__ import annotations

import json
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from rollerkit.bash import exec_command_with_interactions, exec_command_with_stdout

_KEYRING_BACKEND = "test"


def _text_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"invalid key info: field {key!r} is not a string")
    return value


@dataclass
class KeyInfo:
    """Information about a generated wallet."""

    name: str = ""
    address: str = ""
    mnemonic: str = ""
    pub_key: str = ""

    def show(
        self, *, name: bool = False, mnemonic: bool = False, pub_key: bool = False
    ) -> None:
        """Print the address, optionally with the name, public key and mnemonic."""
        if name:
            print(self.name)
        print(f"\t{self.address}")
        if pub_key:
            print(f"\t{self.pub_key}")
        if mnemonic:
            print(f"\t{self.mnemonic}")
            print()
            print("💡 save this information and keep it safe")
        print()


def _key_info_from_mapping(data: Any) -> KeyInfo:
    if not isinstance(data, Mapping):
        raise ValueError("invalid key info: expected a JSON object")
    return KeyInfo(
        name=_text_field(data, "name"),
        address=_text_field(data, "address"),
        mnemonic=_text_field(data, "mnemonic"),
        pub_key=_text_field(data, "pubkey"),
    )


def parse_address_from_output(output: str) -> KeyInfo:
    """Parse the JSON a chain binary prints for a key."""
    return _key_info_from_mapping(json.loads(output))


@dataclass
class KeyConfig:
    """Where a wallet lives: keyring directory, key name and chain binary."""

    dir: str
    id: str
    chain_binary: str
    type: str = ""
    should_recover: bool = False

    def keyring_dir(self, home: str | os.PathLike[str]) -> str:
        """Return the keyring directory of this key under ``home``."""
        return os.path.join(os.fspath(home), self.dir)

    def _add_args(self, home: str | os.PathLike[str]) -> list[str]:
        args = [
            "keys", "add", self.id,
            "--keyring-backend", _KEYRING_BACKEND,
            "--keyring-dir", self.keyring_dir(home),
            "--output", "json",
        ]
        if self.should_recover:
            args.append("--recover")
        return args

    def create(self, home: str | os.PathLike[str]) -> KeyInfo:
        """Create the key, or recover it interactively when ``should_recover`` is set."""
        args = self._add_args(home)
        if self.should_recover:
            exec_command_with_interactions(self.chain_binary, *args)
            return get_address_info_binary(self, home)
        return parse_address_from_output(exec_command_with_stdout([self.chain_binary, *args]))


def get_address_info_binary(key_config: KeyConfig, home: str | os.PathLike[str]) -> KeyInfo:
    """Return the key's information as reported by its chain binary."""
    output = exec_command_with_stdout(
        [
            key_config.chain_binary,
            "keys", "show", key_config.id,
            "--keyring-backend", _KEYRING_BACKEND,
            "--keyring-dir", key_config.keyring_dir(home),
            "--output", "json",
        ]
    )
    return parse_address_from_output(output)


def get_address_binary(key_config: KeyConfig, home: str | os.PathLike[str]) -> str:
    """Return only the key's address."""
    output = exec_command_with_stdout(
        [
            key_config.chain_binary,
            "keys", "show", key_config.id,
            "--address",
            "--keyring-backend", _KEYRING_BACKEND,
            "--keyring-dir", key_config.keyring_dir(home),
        ]
    )
    return output.strip()


def create_address_binary(key_config: KeyConfig, home: str | os.PathLike[str]) -> KeyInfo:
    """Create the key non-interactively and return its information."""
    output = exec_command_with_stdout([key_config.chain_binary, *key_config._add_args(home)])
    return parse_address_from_output(output)


def is_address_with_name_in_keyring(
    key_config: KeyConfig, home: str | os.PathLike[str]
) -> bool:
    """Return whether the keyring holds a key named like ``key_config.id``."""
    output = exec_command_with_stdout(
        [
            key_config.chain_binary,
            "keys", "list", "--output", "json",
            "--keyring-backend", _KEYRING_BACKEND,
            "--keyring-dir", key_config.keyring_dir(home),
        ]
    )
    print(output)
    entries = json.loads(output)
    if entries is None:
        return False
    if not isinstance(entries, list):
        raise ValueError("invalid key list: expected a JSON array")
    wanted = key_config.id.casefold()
    return any(_key_info_from_mapping(entry).name.casefold() == wanted for entry in entries)


def get_export_priv_key_cmd(key_config: KeyConfig) -> list[str]:
    """Return the command line that exports the key."""
    return [
        key_config.chain_binary,
        "keys", "export", key_config.id,
        "--keyring-backend", _KEYRING_BACKEND,
    ]


def print_addresses_with_title(addresses: Iterable[KeyInfo]) -> None:
    """Print a title followed by every address with its name and mnemonic."""
    print("🔑 Addresses")
    for address in addresses:
        address.show(mnemonic=True, name=True)