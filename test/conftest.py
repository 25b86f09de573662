import os
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import MagicMock

import pytest
import requests
from dotenv import load_dotenv

from starship.e2e.client import DEFAULT_HOST, HOST_ENV_KEY
from starship.e2e.config_loader import Config, load_config, resolve_config_file
from starship.e2e.exceptions import ConfigError
from starship.e2e.logging_config import setup_logger
from starship.e2e.models import Check
from starship.e2e.runner import collect_checks

CONFIGS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "configs")

TOPOLOGY_KEY = pytest.StashKey[Tuple[Config, List[Check]]]()

logger = setup_logger()


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add --e2e to run the live checks against a running topology."""
    parser.addoption(
        "--e2e",
        action="store_true",
        default=False,
        help="Run live checks against the topology named by TEST_CONFIG_FILE.",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Load the topology once per session; a broken config aborts the whole run."""
    if not config.getoption("--e2e"):
        return

    logger.info("setting up e2e integration test suite...")
    load_dotenv()
    config_file = resolve_config_file()
    try:
        topology = load_config(config_file)
    except ConfigError as e:
        pytest.exit(f"e2e setup failed: {e}", returncode=pytest.ExitCode.INTERRUPTED)

    host = os.environ.get(HOST_ENV_KEY) or DEFAULT_HOST
    config.stash[TOPOLOGY_KEY] = (topology, collect_checks(topology, config_file, host))


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    """Parametrize tests marked with `checks(name)` by the collected checks of that name."""
    marker = metafunc.definition.get_closest_marker("checks")
    if marker is None:
        return

    checks: List[Check] = []
    if TOPOLOGY_KEY in metafunc.config.stash:
        _, all_checks = metafunc.config.stash[TOPOLOGY_KEY]
        checks = [check for check in all_checks if check.name == marker.args[0]]

    metafunc.parametrize("check", checks, ids=[check.target for check in checks])


def pytest_collection_modifyitems(config: pytest.Config, items) -> None:
    if config.getoption("--e2e"):
        return
    skip_e2e = pytest.mark.skip(reason="needs --e2e and a running topology")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


@pytest.fixture(scope="session")
def topology(pytestconfig) -> Config:
    return pytestconfig.stash[TOPOLOGY_KEY][0]


def _response(status_code: int, body: Any) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


class FakeHttp:
    """Stands in for requests.request, serving canned responses per route."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str, Optional[str], Optional[tuple]], MagicMock] = {}
        self.calls = []

    def get(self, url: str, body: Any, status_code: int = 200) -> None:
        self.routes[("GET", url, None, None)] = _response(status_code, body)

    def rpc(self, url: str, method: str, body: Any, params: Optional[list] = None, status_code: int = 200) -> None:
        key_params = tuple(params) if params is not None else None
        self.routes[("POST", url, method, key_params)] = _response(status_code, body)

    def rpc_result(self, url: str, method: str, result: Any, params: Optional[list] = None) -> None:
        self.rpc(url, method, {"jsonrpc": "2.0", "id": 1, "result": result}, params=params)

    def __call__(self, method: str, url: str, json: Optional[dict] = None, headers: Optional[dict] = None) -> MagicMock:
        self.calls.append((method, url, json, headers))
        rpc_method = json.get("method") if json else None
        rpc_params = tuple(json.get("params", [])) if json else None
        for key in ((method, url, rpc_method, rpc_params), (method, url, rpc_method, None)):
            if key in self.routes:
                return self.routes[key]
        raise requests.ConnectionError(f"connection refused: {method} {url}")


@pytest.fixture()
def fake_http(monkeypatch) -> FakeHttp:
    fake = FakeHttp()
    monkeypatch.setattr(requests, "request", fake)
    return fake


@pytest.fixture()
def config() -> Config:
    return load_config(os.path.join(CONFIGS_DIR, "two-chain.yaml"))


@pytest.fixture()
def one_chain_config() -> Config:
    return load_config(os.path.join(CONFIGS_DIR, "one-chain.yaml"))


@pytest.fixture()
def ethereum_config() -> Config:
    return load_config(os.path.join(CONFIGS_DIR, "ethereum.yaml"))


@pytest.fixture()
def neutron_config() -> Config:
    return load_config(os.path.join(CONFIGS_DIR, "neutron.yaml"))
