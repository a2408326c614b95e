"""Sequencer records as reported by the hub, and helpers over them."""

from __future__ import annotations

import base64
import json
import os
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _text_list(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("expected a JSON array")
    return [str(item) for item in value]


def _mapping(value: Any) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError("expected a JSON object")
    return value


@dataclass(frozen=True)
class Coin:
    """An amount of a denomination."""

    denom: str
    amount: int

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


def _coin_from_dict(data: Any) -> Coin:
    source = _mapping(data)
    return Coin(denom=_text(source, "denom"), amount=int(_text(source, "amount") or "0"))


@dataclass
class SnapshotInfo:
    """A state snapshot published by a sequencer."""

    snapshot_url: str = ""
    height: str = ""
    checksum: str = ""


def _snapshot_from_dict(data: Any) -> SnapshotInfo:
    source = _mapping(data)
    return SnapshotInfo(
        snapshot_url=_text(source, "snapshot_url"),
        height=_text(source, "height"),
        checksum=_text(source, "checksum"),
    )


def _snapshot_to_dict(snapshot: SnapshotInfo) -> dict[str, str]:
    items = {
        "snapshot_url": snapshot.snapshot_url,
        "height": snapshot.height,
        "checksum": snapshot.checksum,
    }
    return {key: value for key, value in items.items() if value}


@dataclass
class ContactDetails:
    """How to reach a sequencer's operator."""

    website: str = ""
    telegram: str = ""
    x: str = ""


@dataclass
class Metadata:
    """Extra information a sequencer publishes about itself."""

    moniker: str = ""
    details: str = ""
    p2p_seeds: list[str] = field(default_factory=list)
    rpcs: list[str] = field(default_factory=list)
    evm_rpcs: list[str] = field(default_factory=list)
    rest_api_urls: list[str] = field(default_factory=list)
    explorer_url: str = ""
    genesis_urls: list[str] = field(default_factory=list)
    contact_details: ContactDetails = field(default_factory=ContactDetails)
    extra_data: bytes = b""
    snapshots: list[SnapshotInfo] = field(default_factory=list)
    gas_price: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Metadata:
        """Build metadata from its JSON form; missing values take defaults."""
        source = _mapping(data)
        contact = _mapping(source.get("contact_details"))
        extra = source.get("extra_data")
        snapshots = source.get("snapshots") or []
        if not isinstance(snapshots, list):
            raise ValueError("snapshots: expected a JSON array")
        gas_price = source.get("gas_price")
        return cls(
            moniker=_text(source, "moniker"),
            details=_text(source, "details"),
            p2p_seeds=_text_list(source.get("p2p_seeds")),
            rpcs=_text_list(source.get("rpcs")),
            evm_rpcs=_text_list(source.get("evm_rpcs")),
            rest_api_urls=_text_list(source.get("rest_api_urls")),
            explorer_url=_text(source, "explorer_url"),
            genesis_urls=_text_list(source.get("genesis_urls")),
            contact_details=ContactDetails(
                website=_text(contact, "website"),
                telegram=_text(contact, "telegram"),
                x=_text(contact, "x"),
            ),
            extra_data=base64.b64decode(extra) if extra else b"",
            snapshots=[_snapshot_from_dict(item) for item in snapshots],
            gas_price=0 if gas_price in (None, "") else int(gas_price),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the metadata."""
        return {
            "moniker": self.moniker,
            "details": self.details,
            "p2p_seeds": list(self.p2p_seeds),
            "rpcs": list(self.rpcs),
            "evm_rpcs": list(self.evm_rpcs),
            "rest_api_urls": list(self.rest_api_urls),
            "explorer_url": self.explorer_url,
            "genesis_urls": list(self.genesis_urls),
            "contact_details": {
                "website": self.contact_details.website,
                "telegram": self.contact_details.telegram,
                "x": self.contact_details.x,
            },
            "extra_data": base64.b64encode(self.extra_data).decode("ascii"),
            "snapshots": [_snapshot_to_dict(item) for item in self.snapshots],
            "gas_price": str(self.gas_price),
        }


@dataclass
class SequencerInfo:
    """A sequencer registered for a rollapp."""

    address: str = ""
    dymint_pub_key: dict[str, Any] | None = None
    rollapp_id: str = ""
    metadata: Metadata = field(default_factory=Metadata)
    jailed: bool = False
    proposer: bool = False
    status: str = ""
    tokens: list[Coin] = field(default_factory=list)
    unbonding_height: str = ""
    unbond_time: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SequencerInfo:
        """Build a sequencer from its JSON form."""
        source = _mapping(data)
        pub_key = source.get("dymintPubKey")
        tokens = source.get("tokens") or []
        if not isinstance(tokens, list):
            raise ValueError("tokens: expected a JSON array")
        return cls(
            address=_text(source, "address"),
            dymint_pub_key=dict(_mapping(pub_key)) if pub_key is not None else None,
            rollapp_id=_text(source, "rollappId"),
            metadata=Metadata.from_dict(_mapping(source.get("metadata"))),
            jailed=bool(source.get("jailed", False)),
            proposer=bool(source.get("proposer", False)),
            status=_text(source, "status"),
            tokens=[_coin_from_dict(item) for item in tokens],
            unbonding_height=_text(source, "unbonding_height"),
            unbond_time=_text(source, "unbond_time"),
        )


@dataclass
class Sequencers:
    """The sequencers registered for a rollapp."""

    sequencers: list[SequencerInfo] = field(default_factory=list)

    @classmethod
    def from_json(cls, text: str | bytes) -> Sequencers:
        """Parse the JSON a sequencer listing query prints."""
        source = _mapping(json.loads(text))
        entries = source.get("sequencers") or []
        if not isinstance(entries, list):
            raise ValueError("sequencers: expected a JSON array")
        return cls(sequencers=[SequencerInfo.from_dict(item) for item in entries])


def export_metadata_to_file(metadata: Metadata, filename: str | os.PathLike[str]) -> None:
    """Write ``metadata`` as indented JSON to ``filename``."""
    text = json.dumps(metadata.to_dict(), indent=2)
    try:
        Path(filename).write_text(text, encoding="utf-8")
    except OSError as exc:
        raise OSError(f"error writing to file: {exc}") from exc


def base_denom_to_denom(coin: Coin, exponent: int) -> Coin:
    """Convert a base-denom amount (e.g. ``adym``) to the display denom (``dym``)."""
    divisor = 10**exponent
    quotient = abs(coin.amount) // divisor
    return Coin(denom=coin.denom[1:], amount=quotient if coin.amount >= 0 else -quotient)


def denom_to_base_denom(coin: Coin, exponent: int) -> Coin:
    """Multiply the amount by ``10**exponent``, keeping the denom."""
    return Coin(denom=coin.denom, amount=coin.amount * 10**exponent)


def is_registered_as_sequencer(sequencers: Iterable[SequencerInfo], address: str) -> bool:
    """Return whether any of ``sequencers`` has ``address``."""
    return any(sequencer.address == address for sequencer in sequencers)


def latest_snapshot(sequencers: Sequencers) -> SnapshotInfo | None:
    """Return the snapshot with the greatest positive height, if any."""
    best: SnapshotInfo | None = None
    max_height = 0
    for sequencer in sequencers.sequencers:
        for snapshot in sequencer.metadata.snapshots:
            if not _INTEGER.fullmatch(snapshot.height):
                continue
            height = int(snapshot.height)
            if height > max_height:
                max_height = height
                best = snapshot
    return best


def all_p2p_peers(sequencers: Sequencers) -> list[str]:
    """Return the p2p peers to connect to.

    With several sequencers only the first seed of each is used; with one, all
    of its seeds are.
    """
    entries = sequencers.sequencers
    if len(entries) <= 1:
        return [seed for sequencer in entries for seed in sequencer.metadata.p2p_seeds]
    peers: list[str] = []
    for sequencer in entries:
        if not sequencer.metadata.p2p_seeds:
            raise ValueError(f"sequencer {sequencer.address} has no p2p seeds")
        peers.append(sequencer.metadata.p2p_seeds[0])
    return peers