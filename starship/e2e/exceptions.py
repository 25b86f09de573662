"""
Custom exceptions for the e2e harness.
"""


class E2EError(Exception):
    """Base exception for all e2e harness errors."""


class ConfigError(E2EError):
    """Raised when the topology config file is missing, unreadable or malformed."""


class RequestError(E2EError):
    """Raised when a request to a chain, relayer or faucet cannot be sent."""


class ResponseDecodeError(E2EError):
    """Raised when a response body is not valid JSON."""
