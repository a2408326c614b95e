"""Editing YAML files and the eIBC client configuration."""

from __future__ import annotations

import math
import os
from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import MISSING, Field, asdict, dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any

import yaml


@dataclass
class GasConfig:
    """Gas settings of the eIBC client."""

    prices: str = ""
    fees: str = ""
    minimum_gas_balance: str = ""


@dataclass
class OrderPollingConfig:
    """Order indexer polling settings."""

    indexer_url: str = ""
    interval: str = ""
    enabled: bool = False


@dataclass
class WhaleConfig:
    """The account that funds the fulfilling bots."""

    account_name: str = ""
    keyring_backend: str = ""
    keyring_dir: str = ""
    allowed_balance_thresholds: dict[str, str] = field(
        default_factory=dict, metadata={"item": str}
    )


@dataclass
class BotConfig:
    """Settings of the order fulfilling bots."""

    number_of_bots: int = 0
    keyring_backend: str = ""
    keyring_dir: str = ""
    top_up_factor: int = 0
    max_orders_per_tx: int = 0


@dataclass
class MinFeePercentage:
    """Minimum fee percentages per chain and per asset."""

    chain: dict[str, float] = field(default_factory=dict, metadata={"item": float})
    asset: dict[str, float] = field(default_factory=dict, metadata={"item": float})


@dataclass
class FulfillCriteria:
    """Criteria an order must meet to be fulfilled."""

    min_fee_percentage: MinFeePercentage = field(default_factory=MinFeePercentage)


@dataclass
class SlackConfig:
    """Slack notification settings."""

    enabled: bool = False
    bot_token: str = ""
    app_token: str = ""
    channel_id: str = ""


def _convert(item: Field, value: Any) -> Any:
    factory = item.default_factory
    if factory is not MISSING and isinstance(factory, type) and is_dataclass(factory):
        return _from_mapping(factory, value)
    item_type = item.metadata.get("item")
    if item_type is not None:
        if not isinstance(value, Mapping):
            raise ValueError(f"expected a mapping, got {type(value).__name__}")
        return {str(key): item_type(entry) for key, entry in value.items()}
    if isinstance(item.default, str):
        return str(value)
    return value


def _from_mapping(cls: type, data: Any) -> Any:
    source = data if isinstance(data, Mapping) else {}
    kwargs = {
        item.name: _convert(item, source[item.name])
        for item in fields(cls)
        if source.get(item.name) is not None
    }
    return cls(**kwargs)


@dataclass
class EibcConfig:
    """The eIBC client configuration file."""

    home_dir: str = ""
    node_address: str = ""
    db_path: str = ""
    gas: GasConfig = field(default_factory=GasConfig)
    order_polling: OrderPollingConfig = field(default_factory=OrderPollingConfig)
    whale: WhaleConfig = field(default_factory=WhaleConfig)
    bots: BotConfig = field(default_factory=BotConfig)
    fulfill_criteria: FulfillCriteria = field(default_factory=FulfillCriteria)
    log_level: str = ""
    slack: SlackConfig = field(default_factory=SlackConfig)
    skip_refund: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EibcConfig:
        """Build a configuration from parsed YAML; missing keys keep defaults."""
        return _from_mapping(cls, data)

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as plain data with the file's keys."""
        return asdict(self)

    def remove_chain(self, chain_id: str) -> None:
        """Forget the minimum fee set for a chain."""
        self.fulfill_criteria.min_fee_percentage.chain.pop(chain_id, None)

    def remove_allowed_balance_threshold(self, denom: str) -> None:
        """Forget the whale balance threshold of a denom."""
        self.whale.allowed_balance_thresholds.pop(denom, None)

    def remove_denom(self, denom: str) -> None:
        """Forget the minimum fee set for an asset."""
        self.fulfill_criteria.min_fee_percentage.asset.pop(denom, None)


def _set_nested(data: MutableMapping[str, Any], keys: Sequence[str], value: Any) -> None:
    for key in keys[:-1]:
        if key not in data:
            data[key] = {}
        child = data[key]
        if not isinstance(child, MutableMapping):
            raise ValueError(f"failed to set nested map for key: {key}")
        data = child
    data[keys[-1]] = value


def update_nested_yaml(
    filename: str | os.PathLike[str], updates: Mapping[str, Any]
) -> None:
    """Set each dotted path in ``updates`` inside a YAML file, creating maps."""
    path = Path(filename)
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"{filename} does not hold a YAML mapping")

    for key_path, value in updates.items():
        try:
            _set_nested(data, key_path.split("."), value)
        except ValueError as exc:
            raise ValueError(f"error updating {key_path}: {exc}") from exc

    path.write_text(yaml.safe_dump(data, default_flow_style=False), encoding="utf-8")


def add_rollapp_to_eibc(value: str, rollapp_id: str, eibc_home: str | os.PathLike[str]) -> None:
    """Set the minimum fee percentage for ``rollapp_id`` in the eIBC config."""
    config_path = Path(eibc_home) / "config.yaml"
    try:
        percentage = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"failed to convert value to float: {exc}") from exc
    if math.isnan(percentage):
        raise ValueError("failed to convert value to float: not a number")

    updates = {f"fulfill_criteria.min_fee_percentage.chain.{rollapp_id}": percentage}
    try:
        update_nested_yaml(config_path, updates)
    except OSError as exc:
        raise OSError(f"failed to update config: {exc}") from exc
    except (ValueError, yaml.YAMLError) as exc:
        raise ValueError(f"failed to update config: {exc}") from exc