"""Reading values embedded in a rollapp binary's build flags."""

from __future__ import annotations

import re

from rollerkit.bash import exec_command_with_stdout

_BECH32_PATTERNS = {
    "evm": re.compile(
        r"github\.com/dymensionxyz/rollapp-evm/app\.AccountAddressPrefix=(\w+)", re.ASCII
    ),
    "wasm": re.compile(
        r"github\.com/dymensionxyz/rollapp-wasm/app\.AccountAddressPrefix=(\w+)", re.ASCII
    ),
}
_COMMIT_PATTERN = re.compile(r"github\.com/dymensionxyz/dymint/version\.Commit=(\w+)", re.ASCII)


class BuildInfoError(ValueError):
    """Raised when the build information lacks the expected build flags."""

    def __init__(self, message: str = "rollapp binary does not contain build flags") -> None:
        super().__init__(message)


def _ldflags_line(build_info: str) -> str:
    return next((line for line in build_info.split("\n") if "-ldflags" in line), "")


def _capture(pattern: re.Pattern[str] | None, build_info: str) -> str:
    if pattern is None:
        raise BuildInfoError()
    match = pattern.search(_ldflags_line(build_info))
    if match is None:
        raise BuildInfoError()
    return match.group(1)


def extract_bech32_prefix(build_info: str, vm_type: str) -> str:
    """Return the account address prefix set in the build's ldflags."""
    return _capture(_BECH32_PATTERNS.get(vm_type), build_info)


def extract_commit(build_info: str) -> str:
    """Return the dymint commit set in the build's ldflags."""
    return _capture(_COMMIT_PATTERN, build_info)


def read_build_info(binary: str) -> str:
    """Return the module build information of ``binary``."""
    return exec_command_with_stdout(["go", "version", "-m", binary])


def extract_bech32_prefix_from_binary(binary: str, vm_type: str) -> str:
    """Return the account address prefix compiled into ``binary``."""
    print(f"go version -m {binary}")
    return extract_bech32_prefix(read_build_info(binary), vm_type)


def extract_commit_from_binary(binary: str) -> str:
    """Return the dymint commit compiled into ``binary``."""
    return extract_commit(read_build_info(binary))