"""
Public keys: single-curve keys and threshold multisig keys.

`PublicKey` is a tagged union (`kind` = "single" | "threshold"). Every
consumer (address derivation, wire encoding, aggregation) dispatches on the
concrete variant and handles both explicitly.

A threshold key's identity is `(threshold, members in stored order)`. The
order is fixed once, by `create_threshold_public_key`, and carried with the
value from then on. Nothing downstream ever re-sorts members: a key decoded
from the wire keeps the order it was encoded with, because reordering changes
the key's address.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Annotated, Iterable, Literal, Union

from pydantic import Field, model_validator
from typing_extensions import Self

from txsign.errors import InvalidThresholdError
from txsign.types import StrictBaseModel, Uint32

logger = logging.getLogger(__name__)


class Curve(Enum):
    """Signature curves a single key may use."""

    SECP256K1 = "secp256k1"
    ED25519 = "ed25519"

    @property
    def key_length(self) -> int:
        """Length of the public key encoding (compressed for secp256k1)."""
        return 33 if self is Curve.SECP256K1 else 32


class SinglePublicKey(StrictBaseModel):
    """A public key controlled by exactly one private key."""

    kind: Literal["single"] = "single"
    """Union tag."""

    curve: Curve
    """Curve the key lives on."""

    key: bytes
    """Compressed SEC1 point (secp256k1) or raw 32-byte key (ed25519)."""

    @model_validator(mode="after")
    def _check_encoding(self) -> Self:
        """Reject keys whose length or point prefix does not match the curve."""
        if len(self.key) != self.curve.key_length:
            raise ValueError(
                f"{self.curve.value} public key must be {self.curve.key_length} bytes, "
                f"got {len(self.key)}"
            )
        if self.curve is Curve.SECP256K1 and self.key[0] not in (0x02, 0x03):
            raise ValueError("secp256k1 public key must be in compressed form (0x02/0x03 prefix)")
        return self

    @classmethod
    def secp256k1(cls, key: bytes) -> Self:
        """Wrap a 33-byte compressed secp256k1 key."""
        return cls(curve=Curve.SECP256K1, key=bytes(key))

    @classmethod
    def ed25519(cls, key: bytes) -> Self:
        """Wrap a 32-byte Ed25519 key."""
        return cls(curve=Curve.ED25519, key=bytes(key))

    def __repr__(self) -> str:
        return f"SinglePublicKey({self.curve.value}, {self.key.hex()})"


class ThresholdPublicKey(StrictBaseModel):
    """
    A k-of-n multisig key.

    Construct through `create_threshold_public_key` to get the canonical
    member order. Direct construction keeps whatever order it is given, which
    is what decoding needs.
    """

    kind: Literal["threshold"] = "threshold"
    """Union tag."""

    threshold: Uint32
    """Minimum number of member signatures the ledger requires."""

    members: tuple[SinglePublicKey, ...]
    """Member keys in their fixed order."""

    @model_validator(mode="after")
    def _check_threshold(self) -> Self:
        """Enforce `1 <= threshold <= len(members)`."""
        if not 1 <= self.threshold <= len(self.members):
            raise InvalidThresholdError(int(self.threshold), len(self.members))
        return self

    def index_of(self, member: SinglePublicKey) -> int:
        """Position of `member` in the stored order; `ValueError` if absent."""
        return self.members.index(member)

    def __repr__(self) -> str:
        return f"ThresholdPublicKey({self.threshold}-of-{len(self.members)})"


PublicKey = Annotated[Union[SinglePublicKey, ThresholdPublicKey], Field(discriminator="kind")]
"""Any public key: single or threshold."""


def create_threshold_public_key(
    members: Iterable[SinglePublicKey], threshold: int
) -> ThresholdPublicKey:
    """
    Build a threshold key with canonical member order.

    Members are ordered by ascending comparison of their raw key bytes. The
    result does not depend on the order of `members`.

    Args:
        members: Single keys, no duplicates.
        threshold: Required number of signatures.

    Returns:
        The threshold key.

    Raises:
        InvalidThresholdError: If `threshold` is out of range, a member is not
            a single key, or a key appears twice.
    """
    keys = list(members)

    for key in keys:
        if not isinstance(key, SinglePublicKey):
            raise InvalidThresholdError(
                threshold, len(keys), detail=f"members must be single keys, got {type(key).__name__}"
            )

    if len({key.key for key in keys}) != len(keys):
        raise InvalidThresholdError(threshold, len(keys), detail="duplicate member key")

    if isinstance(threshold, bool) or not 1 <= threshold <= len(keys):
        raise InvalidThresholdError(threshold, len(keys))

    ordered = tuple(sorted(keys, key=lambda key: key.key))
    logger.debug("Created %d-of-%d threshold key", threshold, len(ordered))
    return ThresholdPublicKey(threshold=Uint32(threshold), members=ordered)
