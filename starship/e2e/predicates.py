"""
Skip predicates and expected values derived from the topology config.
"""

import os
from typing import List

from .config_loader import Balance, Chain, Relayer

# Networks whose nodes do not serve the cosmos status/staking endpoints.
EXCLUDED_NETWORKS = ("neutron", "ethereum")

DEFAULT_UNBONDING_TIME = "300s"

# Genesis overrides in these topologies change the unbonding time.
UNBONDING_TIME_BY_CONFIG = {
    "one-chain.yaml": "5s",
    "one-chain-custom-scripts.yaml": "15s",
}

CUSTOM_BALANCES_CONFIG = "one-chain.yaml"

# Prefunded by the ethereum genesis on every ethereum chain.
DEFAULT_ETH_BALANCE = Balance(
    address="0x0000000000000000000000000000000000000001",
    amount="0x3635c9adc5dea00000",
)


def is_excluded_network(chain: Chain) -> bool:
    return chain.name in EXCLUDED_NETWORKS


def has_rest_port(chain: Chain) -> bool:
    return chain.ports.rest != 0


def has_rpc_port(chain: Chain) -> bool:
    return chain.ports.rpc != 0


def is_ethereum(chain: Chain) -> bool:
    return chain.name == "ethereum"


def is_ethereum_family(chain: Chain) -> bool:
    """True for `ethereum` and its variants, e.g. `ethereum-execution`."""
    return chain.name.startswith("ethereum")


def is_hermes_with_rest(relayer: Relayer) -> bool:
    return relayer.type == "hermes" and relayer.ports.rest != 0


def expected_unbonding_time(config_file: str) -> str:
    """Return the staking unbonding time the given topology should produce."""
    return UNBONDING_TIME_BY_CONFIG.get(os.path.basename(config_file), DEFAULT_UNBONDING_TIME)


def checks_custom_balances(config_file: str) -> bool:
    """Only the one-chain topology funds custom balances in genesis."""
    return os.path.basename(config_file) == CUSTOM_BALANCES_CONFIG


def eth_balances(chain: Chain) -> List[Balance]:
    """Configured balances of an ethereum chain followed by the genesis default."""
    return list(chain.balances) + [DEFAULT_ETH_BALANCE]
