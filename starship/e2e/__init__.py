"""
Topology config loader and endpoint checks for the e2e harness.
"""

from .config_loader import Balance, Chain, Config, Feature, Port, Relayer, load_config, resolve_config_file
from .runner import collect_checks, run_checks

__all__ = [
    "Balance",
    "Chain",
    "Config",
    "Feature",
    "Port",
    "Relayer",
    "collect_checks",
    "load_config",
    "resolve_config_file",
    "run_checks",
]
