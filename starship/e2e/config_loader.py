"""
Config Loader module - typed view of the starship topology yaml
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .exceptions import ConfigError
from .logging_config import setup_logger

logger = setup_logger()

CONFIG_ENV_KEY = "TEST_CONFIG_FILE"
DEFAULT_CONFIG_FILE = "configs/two-chain.yaml"

# Stripped from the configured path so a reference made from the repo root
# or from the e2e directory resolves to the same file.
STRIPPED_PATH_PREFIXES = ("starship/", "tests/e2e/")

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _mapping(data: Any, where: str) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"Expected a mapping for {where}, got {type(data).__name__}")
    return data


def _sequence(data: Any, where: str) -> List[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise ConfigError(f"Expected a list for {where}, got {type(data).__name__}")
    return data


def _int(value: Any, where: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"Expected an integer for {where}, got {value!r}")
    return value


def _bool(value: Any, where: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigError(f"Expected a boolean for {where}, got {value!r}")
    return value


def _str(value: Any, where: str) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ConfigError(f"Expected a scalar for {where}, got {type(value).__name__}")
    return str(value)


@dataclass(frozen=True)
class Port:
    """Named ports of a service. Zero means the service is not exposed."""

    rest: int = 0
    rpc: int = 0
    grpc: int = 0
    exposer: int = 0
    faucet: int = 0

    @classmethod
    def from_dict(cls, data: Any, where: str = "ports") -> "Port":
        data = _mapping(data, where)
        return cls(
            rest=_int(data.get("rest"), f"{where}.rest"),
            rpc=_int(data.get("rpc"), f"{where}.rpc"),
            grpc=_int(data.get("grpc"), f"{where}.grpc"),
            exposer=_int(data.get("exposer"), f"{where}.exposer"),
            faucet=_int(data.get("faucet"), f"{where}.faucet"),
        )


@dataclass(frozen=True)
class Balance:
    """Expected balance of an address: `100uatom` for cosmos, hex wei for ethereum."""

    address: str
    amount: str

    @classmethod
    def from_dict(cls, data: Any, where: str = "balance") -> "Balance":
        data = _mapping(data, where)
        return cls(address=_str(data.get("address"), f"{where}.address"), amount=_str(data.get("amount"), f"{where}.amount"))


@dataclass(frozen=True)
class Feature:
    """Optional sidecar service such as the faucet, explorer, registry or cometmock."""

    enabled: bool = False
    image: str = ""
    ports: Port = field(default_factory=Port)

    @classmethod
    def from_dict(cls, data: Any, where: str = "feature") -> Optional["Feature"]:
        if data is None:
            return None
        data = _mapping(data, where)
        return cls(
            enabled=_bool(data.get("enabled"), f"{where}.enabled"),
            image=_str(data.get("image"), f"{where}.image"),
            ports=Port.from_dict(data.get("ports"), f"{where}.ports"),
        )


@dataclass(frozen=True)
class Chain:
    """A chain of the topology. `name` is the logical label and may differ from `id`."""

    id: str
    name: str
    num_validators: int = 0
    cometmock: Optional[Feature] = None
    faucet: Optional[Feature] = None
    ports: Port = field(default_factory=Port)
    genesis: Dict[str, Any] = field(default_factory=dict)
    balances: List[Balance] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any, where: str = "chain") -> "Chain":
        data = _mapping(data, where)
        return cls(
            id=_str(data.get("id"), f"{where}.id"),
            name=_str(data.get("name"), f"{where}.name"),
            num_validators=_int(data.get("numValidators"), f"{where}.numValidators"),
            cometmock=Feature.from_dict(data.get("cometmock"), f"{where}.cometmock"),
            faucet=Feature.from_dict(data.get("faucet"), f"{where}.faucet"),
            ports=Port.from_dict(data.get("ports"), f"{where}.ports"),
            genesis=dict(_mapping(data.get("genesis"), f"{where}.genesis")),
            balances=[
                Balance.from_dict(item, f"{where}.balances[{i}]")
                for i, item in enumerate(_sequence(data.get("balances"), f"{where}.balances"))
            ],
        )


@dataclass(frozen=True)
class Relayer:
    """A relayer process bridging two or more chains."""

    name: str
    type: str
    replicas: int = 0
    chains: List[str] = field(default_factory=list)
    ports: Port = field(default_factory=Port)

    @classmethod
    def from_dict(cls, data: Any, where: str = "relayer") -> "Relayer":
        data = _mapping(data, where)
        return cls(
            name=_str(data.get("name"), f"{where}.name"),
            type=_str(data.get("type"), f"{where}.type"),
            replicas=_int(data.get("replicas"), f"{where}.replicas"),
            chains=[_str(c, f"{where}.chains") for c in _sequence(data.get("chains"), f"{where}.chains")],
            ports=Port.from_dict(data.get("ports"), f"{where}.ports"),
        )


def _relayers(data: Any) -> Optional[List[Relayer]]:
    if data is None:
        return None
    return [Relayer.from_dict(item, f"relayers[{i}]") for i, item in enumerate(_sequence(data, "relayers"))]


@dataclass(frozen=True)
class Config:
    """
    Topology config object, built once from the yaml file and read-only afterwards.
    """

    chains: List[Chain] = field(default_factory=list)
    # None when the yaml has no relayers section, as opposed to an empty list
    relayers: Optional[List[Relayer]] = None
    explorer: Optional[Feature] = None
    registry: Optional[Feature] = None
    faucet: Optional[Feature] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Config":
        data = _mapping(data, "config")
        return cls(
            chains=[Chain.from_dict(item, f"chains[{i}]") for i, item in enumerate(_sequence(data.get("chains"), "chains"))],
            relayers=_relayers(data.get("relayers")),
            explorer=Feature.from_dict(data.get("explorer"), "explorer"),
            registry=Feature.from_dict(data.get("registry"), "registry"),
            faucet=Feature.from_dict(data.get("faucet"), "faucet"),
        )

    def has_chain_id(self, chain_id: str) -> bool:
        """Return True if the chain id is found in the list of chains."""
        return any(chain.id == chain_id for chain in self.chains)

    def get_chain(self, chain_id: str) -> Optional[Chain]:
        """Return the first chain with the given id, or None."""
        for chain in self.chains:
            if chain.id == chain_id:
                return chain
        return None


def normalize_config_path(config_file: str) -> str:
    """Strip the known directory prefixes from a config file reference."""
    for prefix in STRIPPED_PATH_PREFIXES:
        config_file = config_file.replace(prefix, "")
    return config_file


def resolve_config_file(environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Resolve the config file reference for this run.

    Args:
        environ: Mapping to read TEST_CONFIG_FILE from. Defaults to os.environ.

    Returns:
        The normalized config file reference.
    """
    if environ is None:
        environ = os.environ

    config_file = environ.get(CONFIG_ENV_KEY, "")
    if not config_file:
        logger.warning("env var %s not set, using default value %s", CONFIG_ENV_KEY, DEFAULT_CONFIG_FILE)
        config_file = DEFAULT_CONFIG_FILE

    return normalize_config_path(config_file)


def _locate(config_file: str) -> str:
    if os.path.isabs(config_file) or os.path.exists(config_file):
        return config_file
    candidate = os.path.join(PROJECT_ROOT, config_file)
    if os.path.exists(candidate):
        return candidate
    return config_file


def load_config(config_file: str) -> Config:
    """
    Read and parse the topology yaml file.

    Args:
        config_file: Normalized config file reference, see resolve_config_file.

    Returns:
        The typed Config.

    Raises:
        ConfigError: If the file is missing, unreadable or malformed.
    """
    config_path = _locate(config_file)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"Config file not readable at {config_path}: {exc}") from exc
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML file {config_path}: {e}") from e

    config = Config.from_dict(raw)
    logger.info("Loaded config %s: %s chains, %s relayers", config_path, len(config.chains), len(config.relayers or []))
    return config
