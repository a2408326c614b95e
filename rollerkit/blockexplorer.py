"""Configuration for the local block explorer."""

from __future__ import annotations

import os
from pathlib import Path

_CHAINS_TEMPLATE = """local:
  chain_id: {chain_id}
  be_json_rpc_urls: [ "{endpoint}" ]
  # disable: true
"""


def generate_chains_yaml(chain_id: str, be_rpc_endpoint: str) -> str:
    """Return the chains YAML used by the block explorer to index a local chain."""
    return _CHAINS_TEMPLATE.format(chain_id=chain_id, endpoint=be_rpc_endpoint)


def write_chains_yaml(file_path: str | os.PathLike[str], content: str) -> None:
    """Write ``content`` to ``file_path``, creating parent directories."""
    path = Path(file_path)
    try:
        path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as exc:
        raise OSError(f"failed to create directory: {exc}") from exc

    try:
        descriptor = os.open(path, os.O_RDWR | os.O_CREAT | os.O_TRUNC, 0o700)
    except OSError as exc:
        raise OSError(f"failed to create file: {exc}") from exc

    with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
        try:
            handle.write(content)
        except OSError as exc:
            raise OSError(f"failed to write to file: {exc}") from exc