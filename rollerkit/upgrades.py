"""Describing software versions and the configuration changes an upgrade needs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rollerkit.jsonconfig import PathValue


@dataclass
class Software:
    """A component of the system, such as the rollapp, relayer or eIBC client."""

    name: str
    binary: str
    current_version: str = ""
    current_version_commit: str = ""


@dataclass
class UpgradeableValue:
    """A configuration value moved from one key to another.

    When ``value`` is ``None`` the old value is kept.
    """

    old_value_path: str
    new_value_path: str
    value: Any = None


@dataclass
class VersionValues:
    """Configuration values to add, move and drop during an upgrade."""

    new_values: list[PathValue] = field(default_factory=list)
    upgradeable_values: list[UpgradeableValue] = field(default_factory=list)
    deprecated_values: list[str] = field(default_factory=list)


@dataclass
class UpgradeModule:
    """One configuration file of a component and the changes it needs."""

    name: str
    config_file_path: str
    values: VersionValues = field(default_factory=VersionValues)


@dataclass
class Version:
    """The upgrade modules that belong to one version (commit, tag or release)."""

    version_identifier: str
    modules: list[UpgradeModule] = field(default_factory=list)


@dataclass
class UpgradeInfo:
    """The target commit of an upgrade and the modules to change."""

    target_version: str
    upgrade_values: list[UpgradeModule] = field(default_factory=list)


def new_software(name: str, binary: str, version: str) -> Software:
    """Return a software record at ``version`` with no known commit."""
    return Software(name=name, binary=binary, current_version=version)