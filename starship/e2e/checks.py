"""
Endpoint checks run against a live topology.

Every check sends one request, decodes the body and raises AssertionError
with the offending value when the response does not match the config.
"""

from typing import Any, Dict, Mapping

from .client import DEFAULT_HOST, make_request, service_url
from .config_loader import Balance, Chain, Relayer
from .logging_config import setup_logger
from .rpc import eth_block_number, eth_get_balance

logger = setup_logger()

STATUS_PATH = "/status"
STAKING_PARAMS_PATH = "/cosmos/staking/v1beta1/params"
BALANCES_PATH = "/cosmos/bank/v1beta1/balances/{address}"
RELAYER_STATE_PATH = "/state"


def _get_json(url: str) -> Dict[str, Any]:
    data = make_request("GET", url)
    if not isinstance(data, dict):
        raise AssertionError(f"response from {url} should be an object, got {data!r}")
    return data


def _field(data: Any, *path: str) -> Any:
    """Walk nested mappings, failing with the missing key in the message."""
    current = data
    for i, key in enumerate(path):
        if not isinstance(current, Mapping) or key not in current:
            raise AssertionError(f"response has no field {'.'.join(path[: i + 1])}: {data!r}")
        current = current[key]
    return current


def check_status(chain: Chain, host: str = DEFAULT_HOST) -> str:
    """
    Query /status on the chain RPC port and compare the reported network to the chain id.

    Tendermint answers either with the bare status or wrapped in a JSON-RPC
    envelope; both carry the network under result.node_info.
    """
    data = _get_json(service_url(chain.ports.rpc, STATUS_PATH, host))
    status = data if "node_info" in data else _field(data, "result")
    network = _field(status, "node_info", "network")

    if network != chain.id:
        raise AssertionError(f"chain {chain.name}: expected network {chain.id!r}, got {network!r}")
    return network


def check_staking_params(chain: Chain, expected_unbonding_time: str, host: str = DEFAULT_HOST) -> str:
    data = _get_json(service_url(chain.ports.rest, STAKING_PARAMS_PATH, host))
    unbonding_time = _field(data, "params", "unbonding_time")

    if unbonding_time != expected_unbonding_time:
        raise AssertionError(
            f"chain {chain.id}: expected unbonding_time {expected_unbonding_time!r}, got {unbonding_time!r}"
        )
    return unbonding_time


def check_relayer_state(relayer: Relayer, host: str = DEFAULT_HOST) -> str:
    data = _get_json(service_url(relayer.ports.rest, RELAYER_STATE_PATH, host))
    status = _field(data, "status")

    if status != "success":
        raise AssertionError(f"relayer {relayer.name}: expected status 'success', got {status!r}")
    return status


def check_balance(chain: Chain, balance: Balance, host: str = DEFAULT_HOST) -> str:
    """
    Query the bank balances of an address and compare them to the configured coins.

    The address must hold exactly one denom; `amount` and `denom` are
    concatenated and compared to the configured amount, e.g. `100uatom`.
    """
    path = BALANCES_PATH.format(address=balance.address)
    data = _get_json(service_url(chain.ports.rest, path, host))

    balances = _field(data, "balances")
    if not isinstance(balances, list):
        raise AssertionError(f"balances should be an array, got {balances!r}")
    if len(balances) != 1:
        raise AssertionError(f"there should be exactly one balance for {balance.address}, got {len(balances)}: {balances!r}")

    entry = balances[0]
    if not isinstance(entry, Mapping):
        raise AssertionError(f"balance should be a map, got {entry!r}")

    coins = f"{entry.get('amount')}{entry.get('denom')}"
    if coins != balance.amount:
        raise AssertionError(f"balance mismatch for address {balance.address}: expected {balance.amount!r}, got {coins!r}")
    return coins


def check_eth_block(chain: Chain, host: str = DEFAULT_HOST) -> int:
    url = service_url(chain.ports.rest, host=host)
    logger.info("Checking latest block number for chain: %s at %s", chain.name, url)

    block_number = eth_block_number(url)
    if block_number <= 0:
        raise AssertionError(f"chain {chain.name}: block number should be greater than 0, got {block_number}")

    logger.info("Latest block number: %d", block_number)
    return block_number


def check_eth_balance(chain: Chain, balance: Balance, host: str = DEFAULT_HOST) -> str:
    result = eth_get_balance(service_url(chain.ports.rest, host=host), balance.address)

    if result != balance.amount:
        raise AssertionError(f"balance mismatch for address {balance.address}: expected {balance.amount!r}, got {result!r}")
    return result
