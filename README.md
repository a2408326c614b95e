# rollerkit

A library of helpers for operating a RollApp node: validating chain IDs
and token denoms, editing the node's TOML, JSON and YAML configuration
files, running external binaries and parsing what they print, checking
node health, and starting or stopping systemd and launchd services.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

| Module | What it provides |
| --- | --- |
| `rollerkit.chainid` | `validate_chain_id` checks IDs of the form `name_1234-1` and returns a `ChainID` (raises `InvalidRollappIDError`); `get_eth_id` returns the EIP-155 number |
| `rollerkit.validation` | `validate_decimals`, `is_valid_denom` (both raise `ValueError`), `is_valid_token_symbol` |
| `rollerkit.version` | `trim_version_str` and the build version constants |
| `rollerkit.nested` | `get_nested_value` / `set_nested_value` on nested mappings, `KeyNotFoundError` |
| `rollerkit.tomlconfig` | `get_key_from_file`, `update_field_in_file`, `update_fields_in_file`, `remove_field_from_file`, `replace_field_in_file` by dotted key |
| `rollerkit.jsonconfig` | `PathValue`, `set_json_path`, `update_json_params` |
| `rollerkit.yamlconfig` | `update_nested_yaml`, the `EibcConfig` model, `add_rollapp_to_eibc` |
| `rollerkit.blockexplorer` | `generate_chains_yaml`, `write_chains_yaml` |
| `rollerkit.bash` | run commands: `exec_command_with_stdout`, `exec_command_with_stderr`, `exec_cmd`, `exec_cmd_follow`, `exec_command_with_input`, `run_command_every`, `run_cmd_async`; also `extract_tx_hash`, `is_available`, `CommandError` |
| `rollerkit.errorhandling` | `prettify_error_if_exists` (prints and exits with status 1), `run_on_interrupt` |
| `rollerkit.logs` | `get_logger`, `get_roller_logger`: file loggers rotated at 500 MB, three gzipped backups kept for 28 days |
| `rollerkit.keys` | `KeyInfo`, `KeyConfig` and keyring lookups through a chain binary |
| `rollerkit.balances` | `Balance`, `parse_balance_from_response`, `format_balance`, `query_balance`, `print_insufficient_balances_if_any` |
| `rollerkit.sequencer` | `Coin`, `Metadata`, `SequencerInfo`, `Sequencers`, denom conversion, `latest_snapshot`, `all_p2p_peers`, `export_metadata_to_file` |
| `rollerkit.rollapp_types` | `ShowRollappResponse` and the records it contains |
| `rollerkit.filesystem` | `dir_not_empty`, `move_file`, `expand_home_path`, downloads, `extract_tar_gz` (the `data` directory only), `tail_file`, `update_hosts_file`, `remove_service_files` |
| `rollerkit.health` | `RollappHealthResponse`, `is_endpoint_healthy`, `query_failed_da_submissions`, `wait_for_healthy_rollapp` |
| `rollerkit.buildinfo` | read the bech32 prefix or dymint commit from a binary's build flags |
| `rollerkit.migrations` | compare commit dates to decide whether a migration is needed (`require_rollapp_migrate_if_needed`, `MigrationRequiredError`); the API base can be set with `ROLLERKIT_GITHUB_API_URL` |
| `rollerkit.services` | `ServiceConfig` supervising restarting processes; start, stop and restart systemd or launchd services |
| `rollerkit.output` | `OutputHandler` and `Spinner` for console output that can be silenced |
| `rollerkit.upgrades` | records describing software versions and configuration upgrades |

## Examples

Validate a RollApp ID:

```python
from rollerkit.chainid import validate_chain_id, get_eth_id

chain = validate_chain_id("myrollapp_1234-1")
print(chain.name, chain.eip155_id, chain.revision)  # myrollapp 1234 1
print(get_eth_id("myrollapp_1234-1"))               # 1234
```

Update a value in an existing TOML file:

```python
from rollerkit.tomlconfig import update_field_in_file, get_key_from_file

update_field_in_file("dymint.toml", "max_idle_time", "1h0m0s")
print(get_key_from_file("dymint.toml", "max_idle_time"))
```

Format a balance held in the smallest unit:

```python
from rollerkit.balances import Balance, format_balance

print(format_balance(1500000000000000000, 18))                      # 1.5
print(Balance("adym", 1500000000000000000).bigger_denom_str(18))    # 1.5DYM
```

## What it does not do

rollerkit is a library only: it installs no command-line program. It
does not schedule periodic jobs in the system crontab. Most helpers that
talk to a chain do so by running the chain's own binaries, which must be
installed separately.