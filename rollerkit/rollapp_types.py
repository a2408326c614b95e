"""Rollapp records as reported by the hub's rollapp query."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


def _obj(value: Any, where: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"{where}: expected a JSON object")
    return value


def _str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key}: expected a string")
    return value


def _bool(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"{key}: expected a boolean")
    return value


def _uint(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"{key}: expected an integer")
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    if isinstance(value, int) and value >= 0:
        return value
    raise ValueError(f"{key}: expected a non-negative integer")


def _str_list(data: Mapping[str, Any], key: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"{key}: expected an array of strings")
    return list(value)


@dataclass
class DenomMetadata:
    """A denomination and its display exponent."""

    display: str = ""
    base: str = ""
    exponent: int = 0

    @classmethod
    def _parse(cls, data: Any, where: str) -> DenomMetadata | None:
        if data is None:
            return None
        source = _obj(data, where)
        return cls(
            display=_str(source, "display"),
            base=_str(source, "base"),
            exponent=_uint(source, "exponent"),
        )


@dataclass
class GenesisInfo:
    """Genesis details registered with the rollapp."""

    genesis_checksum: str = ""
    bech32_prefix: str = ""
    native_denom: DenomMetadata | None = None
    initial_supply: str = ""
    sealed: bool = False


@dataclass
class RollappMetadata:
    """Descriptive information published for a rollapp."""

    website: str = ""
    description: str = ""
    logo_url: str = ""
    telegram: str = ""
    x: str = ""
    genesis_url: str = ""
    display_name: str = ""
    tagline: str = ""
    explorer_url: str = ""
    fee_denom: DenomMetadata | None = None


@dataclass
class Rollapp:
    """A rollapp registered on the hub."""

    rollapp_id: str = ""
    owner: str = ""
    pre_launch_time: str = ""
    transfers_enabled: bool = False
    channel_id: str = ""
    frozen: bool = False
    registered_denoms: list[str] = field(default_factory=list)
    metadata: RollappMetadata | None = None
    genesis_info: GenesisInfo = field(default_factory=GenesisInfo)
    initial_sequencer: str = ""
    vm_type: str = ""
    launched: bool = False
    liveness_event_height: str = ""
    last_state_update_height: str = ""


@dataclass
class StateInfoIndex:
    """A position in a rollapp's state updates."""

    rollapp_id: str = ""
    index: str = ""


@dataclass
class Summary:
    """The latest state indexes and heights of a rollapp."""

    rollapp_id: str = ""
    latest_state_index: StateInfoIndex | None = None
    latest_finalized_state_index: StateInfoIndex | None = None
    latest_height: str = ""
    latest_finalized_height: str = ""


def _state_index(value: Any, where: str) -> StateInfoIndex | None:
    if value is None:
        return None
    source = _obj(value, where)
    return StateInfoIndex(rollapp_id=_str(source, "rollappId"), index=_str(source, "index"))


def _rollapp(data: Mapping[str, Any]) -> Rollapp:
    genesis_state = _obj(data.get("genesis_state"), "genesis_state")
    genesis = _obj(data.get("genesis_info"), "genesis_info")
    raw_metadata = data.get("metadata")
    metadata = None
    if raw_metadata is not None:
        source = _obj(raw_metadata, "metadata")
        metadata = RollappMetadata(
            website=_str(source, "website"),
            description=_str(source, "description"),
            logo_url=_str(source, "logo_url"),
            telegram=_str(source, "telegram"),
            x=_str(source, "x"),
            genesis_url=_str(source, "genesis_url"),
            display_name=_str(source, "display_name"),
            tagline=_str(source, "tagline"),
            explorer_url=_str(source, "explorer_url"),
            fee_denom=DenomMetadata._parse(source.get("fee_denom"), "fee_denom"),
        )
    return Rollapp(
        rollapp_id=_str(data, "rollapp_id"),
        owner=_str(data, "owner"),
        pre_launch_time=_str(data, "pre_launch_time"),
        transfers_enabled=_bool(genesis_state, "transfers_enabled"),
        channel_id=_str(data, "channel_id"),
        frozen=_bool(data, "frozen"),
        registered_denoms=_str_list(data, "registeredDenoms"),
        metadata=metadata,
        genesis_info=GenesisInfo(
            genesis_checksum=_str(genesis, "genesis_checksum"),
            bech32_prefix=_str(genesis, "bech32_prefix"),
            native_denom=DenomMetadata._parse(genesis.get("native_denom"), "native_denom"),
            initial_supply=_str(genesis, "initial_supply"),
            sealed=_bool(genesis, "sealed"),
        ),
        initial_sequencer=_str(data, "initial_sequencer"),
        vm_type=_str(data, "vm_type"),
        launched=_bool(data, "launched"),
        liveness_event_height=_str(data, "liveness_event_height"),
        last_state_update_height=_str(data, "last_state_update_height"),
    )


@dataclass
class ShowRollappResponse:
    """The answer of the hub's rollapp show query."""

    rollapp: Rollapp = field(default_factory=Rollapp)
    summary: Summary = field(default_factory=Summary)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ShowRollappResponse:
        """Build a response from parsed JSON; raise ``ValueError`` on wrong types."""
        source = _obj(data, "response")
        summary = _obj(source.get("summary"), "summary")
        return cls(
            rollapp=_rollapp(_obj(source.get("rollapp"), "rollapp")),
            summary=Summary(
                rollapp_id=_str(summary, "rollappId"),
                latest_state_index=_state_index(
                    summary.get("latestStateIndex"), "latestStateIndex"
                ),
                latest_finalized_state_index=_state_index(
                    summary.get("latestFinalizedStateIndex"), "latestFinalizedStateIndex"
                ),
                latest_height=_str(summary, "latestHeight"),
                latest_finalized_height=_str(summary, "latestFinalizedHeight"),
            ),
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> ShowRollappResponse:
        """Parse the JSON the rollapp show query prints."""
        data = json.loads(text)
        if not isinstance(data, Mapping):
            raise ValueError("response: expected a JSON object")
        return cls.from_dict(data)