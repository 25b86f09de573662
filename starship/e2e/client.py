"""
HTTP request utilities for talking to chain nodes, relayers and faucets.
"""

from typing import Any, Dict, Optional

import requests

from .exceptions import RequestError, ResponseDecodeError
from .logging_config import setup_logger

logger = setup_logger()

DEFAULT_HOST = "0.0.0.0"
HOST_ENV_KEY = "TEST_HOST"


def service_url(port: int, path: str = "", host: str = DEFAULT_HOST) -> str:
    """
    Build the URL of a locally exposed service.

    Args:
        port: Port taken from the topology config.
        path: Request path, including the leading slash.
        host: Host the services are forwarded to.

    Returns:
        The service URL.
    """
    return f"http://{host}:{port}{path}"


def make_request(method: str, url: str, exp_code: int = 200, payload: Optional[Dict[str, Any]] = None) -> Any:
    """
    Send a single request and decode its JSON body.

    There is no retry and no explicit timeout: a failed request fails the
    calling check.

    Args:
        method: HTTP method.
        url: The URL for the request.
        exp_code: Status code the response must carry.
        payload: Optional JSON body.

    Returns:
        Decoded JSON response.

    Raises:
        RequestError: If the request could not be sent.
        ResponseDecodeError: If the body is not JSON.
        AssertionError: If the status code does not match exp_code.
    """
    headers = {"Content-Type": "application/json"} if payload is not None else None
    logger.info("%s %s", method, url)

    try:
        response = requests.request(method, url, json=payload, headers=headers)
    except requests.RequestException as e:
        raise RequestError(f"trying to make request {method} {url}: {e}") from e

    if response.status_code != exp_code:
        raise AssertionError(
            f"response code did not match for {method} {url}: expected {exp_code}, got {response.status_code}"
        )

    try:
        return response.json()
    except ValueError as e:
        raise ResponseDecodeError(f"response from {method} {url} is not valid JSON: {e}") from e
