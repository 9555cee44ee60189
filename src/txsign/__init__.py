"""
Transaction signing and multisignature aggregation for Cosmos-style ledgers.

The subpackages follow the data flow of a signing round:

- `txsign.keys`: single and threshold public keys, address derivation.
- `txsign.tx`: sign bytes, body bytes, and the signed envelope.
- `txsign.multisig`: placing member signatures into a threshold signature.
- `txsign.signing`: signer capabilities and signing sessions.
- `txsign.broadcast`: the node boundary.
"""

from txsign.errors import (
    AccountNotFoundError,
    BroadcastRejectedError,
    DecodeError,
    InvalidThresholdError,
    MalformedEnvelopeError,
    NoSignaturesError,
    SigningFailedError,
    TransportError,
    TxSignError,
    UnknownSignerError,
)

__all__ = [
    "AccountNotFoundError",
    "BroadcastRejectedError",
    "DecodeError",
    "InvalidThresholdError",
    "MalformedEnvelopeError",
    "NoSignaturesError",
    "SigningFailedError",
    "TransportError",
    "TxSignError",
    "UnknownSignerError",
]
