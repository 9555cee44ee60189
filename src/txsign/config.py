"""
Global configuration for txsign.

Environment-specific defaults that apply across the package. Everything here
is a default only; every operation that needs a value accepts it explicitly.
"""

import os

DEFAULT_ADDRESS_PREFIX = os.environ.get("TXSIGN_ADDRESS_PREFIX", "cosmos")
"""Human-readable bech32 prefix used when none is given."""

DEFAULT_REST_URL = os.environ.get("TXSIGN_REST_URL", "http://localhost:1317")
"""Base URL of the ledger's REST gateway."""

DEFAULT_TIMEOUT = float(os.environ.get("TXSIGN_TIMEOUT", "30"))
"""HTTP request timeout in seconds."""

if not DEFAULT_ADDRESS_PREFIX or DEFAULT_ADDRESS_PREFIX != DEFAULT_ADDRESS_PREFIX.lower():
    raise ValueError(
        f"Invalid TXSIGN_ADDRESS_PREFIX environment variable: '{DEFAULT_ADDRESS_PREFIX}'. "
        "Prefixes must be non-empty and lower case."
    )

if DEFAULT_TIMEOUT <= 0:
    raise ValueError(f"Invalid TXSIGN_TIMEOUT environment variable: '{DEFAULT_TIMEOUT}'")
