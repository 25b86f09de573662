"""
Ethereum JSON-RPC helpers built on top of the plain request utilities.
"""

import re
from typing import Any, Dict, List, Optional

from web3 import Web3

from .client import make_request

HEX_QUANTITY = re.compile(r"0[xX][0-9a-fA-F]+")


def build_payload(method: str, params: Optional[List[Any]] = None, request_id: int = 1) -> Dict[str, Any]:
    """Return the JSON-RPC 2.0 envelope for a call."""
    return {"jsonrpc": "2.0", "method": method, "params": params or [], "id": request_id}


def call(url: str, method: str, params: Optional[List[Any]] = None) -> str:
    """
    POST a JSON-RPC call and return its string result.

    Args:
        url: JSON-RPC endpoint.
        method: RPC method name, e.g. eth_blockNumber.
        params: Positional parameters.

    Returns:
        The `result` member of the response.
    """
    data = make_request("POST", url, payload=build_payload(method, params))
    if not isinstance(data, dict):
        raise AssertionError(f"{method} response should be an object, got {data!r}")
    if data.get("error") is not None:
        raise AssertionError(f"{method} returned an error: {data['error']!r}")

    result = data.get("result")
    if not isinstance(result, str):
        raise AssertionError(f"{method} result should be a string in hex format, got {result!r}")
    return result


def decode_quantity(value: str) -> int:
    """Decode a hex quantity such as 0x10 into an int."""
    if not HEX_QUANTITY.fullmatch(value):
        raise AssertionError(f"failed to parse hex quantity {value!r}")
    return Web3.to_int(hexstr=value)


def eth_block_number(url: str) -> int:
    """Return the latest block number of the node at url."""
    return decode_quantity(call(url, "eth_blockNumber"))


def eth_get_balance(url: str, address: str, block: str = "latest") -> str:
    """Return the raw hex wei balance of address."""
    return call(url, "eth_getBalance", [address, block])
