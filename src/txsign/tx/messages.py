"""
Messages and the transaction body.

A `Message` is an opaque typed payload. It carries two renderings of the
same content because the ledger consumes both:

- the protobuf `Any` (`type_url`, `value`) that goes into the body bytes;
- the legacy amino JSON (`amino_type`, `amino_value`) that goes into the
  sign document for `SIGN_MODE_LEGACY_AMINO_JSON`, the only sign mode a
  threshold key's members can use.

Building the two renderings of a concrete message is the job of a message
catalog, which this package does not ship.
"""

from __future__ import annotations

from typing import Any, Sequence

from pydantic import Field
from typing_extensions import Self

from txsign.encoding import protobuf as pb
from txsign.types import StrictBaseModel, Uint64


class Message(StrictBaseModel):
    """One message of a transaction."""

    type_url: str
    """Protobuf type URL, e.g. `/cosmos.bank.v1beta1.MsgSend`."""

    value: bytes
    """Protobuf encoding of the message."""

    amino_type: str = ""
    """Amino type name, e.g. `cosmos-sdk/MsgSend`. Empty for decoded messages."""

    amino_value: dict[str, Any] = Field(default_factory=dict)
    """Amino JSON value. Empty for decoded messages."""

    def to_amino(self) -> dict[str, Any]:
        """The `{type, value}` object placed in a sign document's `msgs`."""
        if not self.amino_type:
            raise ValueError(
                f"message {self.type_url} has no amino rendering and cannot be amino-signed"
            )
        return {"type": self.amino_type, "value": self.amino_value}

    def encode_any(self) -> bytes:
        return pb.encode_any(self.type_url, self.value)


class TxBody(StrictBaseModel):
    """Protobuf `TxBody{messages=1, memo=2, timeout_height=3}`."""

    messages: tuple[Message, ...] = ()
    memo: str = ""
    timeout_height: Uint64 = Uint64(0)

    def encode_bytes(self) -> bytes:
        return (
            pb.encode_repeated(1, [message.encode_any() for message in self.messages])
            + pb.encode_string(2, self.memo)
            + pb.encode_uint(3, int(self.timeout_height))
        )

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        """
        Decode body bytes.

        Messages come back with their protobuf rendering only.

        Raises:
            DecodeError: On malformed bytes or unsupported fields.
        """
        messages: list[Message] = []
        memo = ""
        timeout_height = 0
        for field in pb.iter_fields(data, "TxBody"):
            match field.number:
                case 1:
                    type_url, value = pb.decode_any(pb.expect_bytes(field, "TxBody"))
                    messages.append(Message(type_url=type_url, value=value))
                case 2:
                    memo = pb.expect_string(field, "TxBody")
                case 3:
                    timeout_height = pb.expect_varint(field, "TxBody")
                case _:
                    raise pb.unknown_field(field, "TxBody")
        return cls(messages=tuple(messages), memo=memo, timeout_height=Uint64(timeout_height))


def encode_tx_body(messages: Sequence[Message], memo: str = "", timeout_height: int = 0) -> bytes:
    """Encode the body bytes every signer and the final envelope share."""
    return TxBody(
        messages=tuple(messages), memo=memo, timeout_height=Uint64(timeout_height)
    ).encode_bytes()


def decode_tx_body(data: bytes) -> TxBody:
    """Inverse of `encode_tx_body` (protobuf renderings only)."""
    return TxBody.decode_bytes(data)
