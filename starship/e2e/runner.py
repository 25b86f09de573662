"""
Expands a topology config into checks and runs them.

`collect_checks` is the single place deciding which chain, relayer and
balance gets which check and when a check is skipped. The pytest harness
parametrizes over its output; `run_checks` runs the same list outside of
pytest and records every outcome instead of stopping at the first failure.
"""

from collections import Counter
from functools import partial
from typing import Dict, List

from .checks import (
    check_balance,
    check_eth_balance,
    check_eth_block,
    check_relayer_state,
    check_staking_params,
    check_status,
)
from .client import DEFAULT_HOST
from .config_loader import Config
from .exceptions import E2EError
from .logging_config import setup_logger
from .models import FAILED, PASSED, SKIPPED, Check, CheckResult
from .predicates import (
    checks_custom_balances,
    eth_balances,
    expected_unbonding_time,
    has_rest_port,
    has_rpc_port,
    is_ethereum,
    is_ethereum_family,
    is_excluded_network,
    is_hermes_with_rest,
)

logger = setup_logger()

STATUS = "chains_status"
STAKING_PARAMS = "chains_staking_params"
RELAYER_STATE = "relayers_state"
BALANCES = "chains_balances"
ETH_BLOCK = "chains_eth_block"
ETH_BALANCES = "chains_eth_balances"


def _noop() -> None:
    return None


def _skipped(name: str, target: str, reason: str) -> Check:
    return Check(name=name, target=target, run=_noop, skip_reason=reason)


def collect_status_checks(config: Config, host: str = DEFAULT_HOST) -> List[Check]:
    checks = []
    for chain in config.chains:
        if is_excluded_network(chain):
            checks.append(_skipped(STATUS, chain.id, f"skip status test for {chain.name}"))
        elif not has_rpc_port(chain):
            checks.append(_skipped(STATUS, chain.id, "skip status test for non rpc endpoint"))
        else:
            checks.append(Check(STATUS, chain.id, partial(check_status, chain, host)))
    return checks


def collect_staking_params_checks(config: Config, config_file: str, host: str = DEFAULT_HOST) -> List[Check]:
    """Staking params are only checked on the first chain, whose genesis the topology overrides."""
    if not config.chains:
        return [_skipped(STAKING_PARAMS, "none", "no chains configured")]

    chain = config.chains[0]
    if not has_rest_port(chain):
        return [_skipped(STAKING_PARAMS, chain.id, "skip staking params test for non rest endpoint")]
    if is_excluded_network(chain):
        return [_skipped(STAKING_PARAMS, chain.id, f"skip staking params test for {chain.name}")]

    expected = expected_unbonding_time(config_file)
    return [Check(STAKING_PARAMS, chain.id, partial(check_staking_params, chain, expected, host))]


def collect_relayer_checks(config: Config, host: str = DEFAULT_HOST) -> List[Check]:
    if config.relayers is None:
        return [_skipped(RELAYER_STATE, "none", "No relayer found")]

    checks = []
    for relayer in config.relayers:
        if is_hermes_with_rest(relayer):
            checks.append(Check(RELAYER_STATE, relayer.name, partial(check_relayer_state, relayer, host)))
        else:
            checks.append(_skipped(RELAYER_STATE, relayer.name, f"no state endpoint for {relayer.type} relayer"))
    return checks


def collect_balance_checks(config: Config, config_file: str, host: str = DEFAULT_HOST) -> List[Check]:
    if not checks_custom_balances(config_file):
        return [_skipped(BALANCES, "none", "skip tests for checking custom balances")]

    checks = []
    for chain in config.chains:
        for balance in chain.balances:
            target = f"{chain.id}:{balance.address}"
            if not has_rest_port(chain):
                checks.append(_skipped(BALANCES, target, "skip balances test for non rest endpoint"))
            else:
                checks.append(Check(BALANCES, target, partial(check_balance, chain, balance, host)))
    return checks


def collect_eth_block_checks(config: Config, host: str = DEFAULT_HOST) -> List[Check]:
    checks = []
    for chain in config.chains:
        if not is_ethereum_family(chain):
            continue
        if not has_rest_port(chain):
            checks.append(_skipped(ETH_BLOCK, chain.id, "skip eth block test for non rest endpoint"))
        else:
            checks.append(Check(ETH_BLOCK, chain.id, partial(check_eth_block, chain, host)))
    return checks


def collect_eth_balance_checks(config: Config, host: str = DEFAULT_HOST) -> List[Check]:
    checks = []
    for chain in config.chains:
        if not is_ethereum(chain):
            continue
        for balance in eth_balances(chain):
            target = f"{chain.id}:{balance.address}"
            if not has_rest_port(chain):
                checks.append(_skipped(ETH_BALANCES, target, "skip eth balance test for non rest endpoint"))
            else:
                checks.append(Check(ETH_BALANCES, target, partial(check_eth_balance, chain, balance, host)))
    return checks


def collect_checks(config: Config, config_file: str, host: str = DEFAULT_HOST) -> List[Check]:
    """
    Expand the topology into the full list of checks, in execution order.

    Args:
        config: Loaded topology.
        config_file: Normalized config file reference; selects expected values.
        host: Host the services are reachable on.

    Returns:
        Checks, including skipped ones with their reason.
    """
    return (
        collect_status_checks(config, host)
        + collect_staking_params_checks(config, config_file, host)
        + collect_relayer_checks(config, host)
        + collect_balance_checks(config, config_file, host)
        + collect_eth_block_checks(config, host)
        + collect_eth_balance_checks(config, host)
    )


def run_check(check: Check) -> CheckResult:
    if check.skip_reason:
        logger.info("%s skipped: %s", check.id, check.skip_reason)
        return CheckResult(check.id, SKIPPED, detail=check.skip_reason)

    try:
        value = check.run()
    except (AssertionError, E2EError) as e:
        logger.error("%s failed: %s", check.id, e)
        return CheckResult(check.id, FAILED, detail=str(e))

    logger.info("%s passed", check.id)
    return CheckResult(check.id, PASSED, value=value)


def run_checks(checks: List[Check]) -> List[CheckResult]:
    """Run every check in order; a failing check never stops the ones after it."""
    return [run_check(check) for check in checks]


def summarize(results: List[CheckResult]) -> Dict[str, int]:
    counts = Counter(result.outcome for result in results)
    return {outcome: counts.get(outcome, 0) for outcome in (PASSED, FAILED, SKIPPED)}
