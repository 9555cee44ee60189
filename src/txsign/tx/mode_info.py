"""
Sign modes and mode info.

`ModeInfo` tells the verifier how to rebuild the bytes each signature covers:

- `SingleModeInfo` for a single key: just the sign mode.
- `MultiModeInfo` for a threshold key: a `CompactBitArray` marking which
  members signed, plus one mode info per signature, in member order.

Protobuf layout:

    ModeInfo        { oneof sum { Single single = 1; Multi multi = 2; } }
    ModeInfo.Single { SignMode mode = 1; }
    ModeInfo.Multi  { CompactBitArray bitarray = 1; repeated ModeInfo mode_infos = 2; }
    CompactBitArray { uint32 extra_bits_stored = 1; bytes elems = 2; }
"""

from __future__ import annotations

from enum import IntEnum
from typing import Annotated, Literal, Union, assert_never

from pydantic import Field, ValidationError

from txsign.encoding import protobuf as pb
from txsign.errors import DecodeError
from txsign.types import CompactBitArray, StrictBaseModel, Uint32


class SignMode(IntEnum):
    """Signing modes understood by the ledger."""

    UNSPECIFIED = 0
    DIRECT = 1
    TEXTUAL = 2
    LEGACY_AMINO_JSON = 127


class SingleModeInfo(StrictBaseModel):
    """Mode info of a single-key signer."""

    kind: Literal["single"] = "single"
    mode: SignMode


class MultiModeInfo(StrictBaseModel):
    """Mode info of a threshold-key signer."""

    kind: Literal["multi"] = "multi"

    bitarray: CompactBitArray
    """Bit `i` is set iff member `i` (stored order) contributed a signature."""

    mode_infos: tuple[SingleModeInfo, ...]
    """One entry per contributed signature, ascending member index."""


ModeInfo = Annotated[Union[SingleModeInfo, MultiModeInfo], Field(discriminator="kind")]
"""Mode info of any signer."""


def encode_compact_bit_array(bits: CompactBitArray) -> bytes:
    return pb.encode_uint(1, int(bits.extra_bits_stored)) + pb.encode_bytes(2, bits.elems)


def decode_compact_bit_array(data: bytes) -> CompactBitArray:
    """Decode a `CompactBitArray` message, validating its layout."""
    extra_bits_stored = 0
    elems = b""
    for field in pb.iter_fields(data, "CompactBitArray"):
        if field.number == 1:
            extra_bits_stored = pb.expect_varint(field, "CompactBitArray", bits=32)
        elif field.number == 2:
            elems = pb.expect_bytes(field, "CompactBitArray")
        else:
            raise pb.unknown_field(field, "CompactBitArray")
    try:
        return CompactBitArray(extra_bits_stored=Uint32(extra_bits_stored), elems=elems)
    except ValidationError as exc:
        raise DecodeError("CompactBitArray", str(exc)) from exc


def encode_mode_info(mode_info: SingleModeInfo | MultiModeInfo) -> bytes:
    """Encode a `ModeInfo` oneof. The chosen branch is always written."""
    match mode_info:
        case SingleModeInfo():
            return pb.encode_message(1, pb.encode_uint(1, int(mode_info.mode)))
        case MultiModeInfo():
            inner = pb.encode_message(
                1, encode_compact_bit_array(mode_info.bitarray)
            ) + pb.encode_repeated(2, [encode_mode_info(info) for info in mode_info.mode_infos])
            return pb.encode_message(2, inner)
        case _:
            assert_never(mode_info)


def _decode_single(data: bytes) -> SingleModeInfo:
    mode = 0
    for field in pb.iter_fields(data, "ModeInfo.Single"):
        if field.number != 1:
            raise pb.unknown_field(field, "ModeInfo.Single")
        mode = pb.expect_varint(field, "ModeInfo.Single", bits=32)
    try:
        return SingleModeInfo(mode=SignMode(mode))
    except ValueError as exc:
        raise DecodeError("ModeInfo.Single", f"unknown sign mode {mode}") from exc


def _decode_member(data: bytes) -> SingleModeInfo:
    # Members are only ever single; multi is rejected before its payload is parsed.
    result: SingleModeInfo | None = None
    for field in pb.iter_fields(data, "ModeInfo"):
        if result is not None:
            raise DecodeError("ModeInfo", "more than one branch set", offset=field.offset)
        if field.number == 1:
            result = _decode_single(pb.expect_bytes(field, "ModeInfo"))
        elif field.number == 2:
            raise DecodeError(
                "ModeInfo.Multi",
                "nested multisig mode info is not supported",
                offset=field.offset,
            )
        else:
            raise pb.unknown_field(field, "ModeInfo")
    if result is None:
        raise DecodeError("ModeInfo", "no branch set")
    return result


def _decode_multi(data: bytes) -> MultiModeInfo:
    bitarray = CompactBitArray()
    mode_infos: list[SingleModeInfo] = []
    for field in pb.iter_fields(data, "ModeInfo.Multi"):
        if field.number == 1:
            bitarray = decode_compact_bit_array(pb.expect_bytes(field, "ModeInfo.Multi"))
        elif field.number == 2:
            mode_infos.append(_decode_member(pb.expect_bytes(field, "ModeInfo.Multi")))
        else:
            raise pb.unknown_field(field, "ModeInfo.Multi")
    return MultiModeInfo(bitarray=bitarray, mode_infos=tuple(mode_infos))


def decode_mode_info(data: bytes) -> SingleModeInfo | MultiModeInfo:
    """
    Decode a `ModeInfo` oneof.

    Raises:
        DecodeError: When no branch or more than one branch is present, or on
            malformed content.
    """
    result: SingleModeInfo | MultiModeInfo | None = None
    for field in pb.iter_fields(data, "ModeInfo"):
        if result is not None:
            raise DecodeError("ModeInfo", "more than one branch set", offset=field.offset)
        if field.number == 1:
            result = _decode_single(pb.expect_bytes(field, "ModeInfo"))
        elif field.number == 2:
            result = _decode_multi(pb.expect_bytes(field, "ModeInfo"))
        else:
            raise pb.unknown_field(field, "ModeInfo")
    if result is None:
        raise DecodeError("ModeInfo", "no branch set")
    return result
