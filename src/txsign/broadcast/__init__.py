"""Node boundary: account queries, submission, and result interpretation."""

from .account import AccountInfo, AccountQuery, Transport, fetch_signer_data
from .rest import ClientConfig, RestClient
from .results import (
    Attribute,
    BroadcastResult,
    Event,
    Log,
    find_attribute,
    interpret_broadcast,
    parse_logs,
)

__all__ = [
    "AccountInfo",
    "AccountQuery",
    "Transport",
    "fetch_signer_data",
    "ClientConfig",
    "RestClient",
    "Attribute",
    "BroadcastResult",
    "Event",
    "Log",
    "find_attribute",
    "interpret_broadcast",
    "parse_logs",
]
