"""Tests for placing member signatures into a threshold signature."""

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from tests.txsign.helpers import make_signers, make_threshold_key
from txsign.errors import DecodeError, NoSignaturesError, UnknownSignerError
from txsign.keys import Address, raw_address
from txsign.multisig import MultisigSignatureData, RawSignature, aggregate
from txsign.tx import MultiModeInfo, SignMode
from txsign.types import Bytes64, CompactBitArray

SIGNERS = make_signers(5)
KEY = make_threshold_key(SIGNERS, 2)


def raw_for(member_index: int) -> RawSignature:
    """A recognizable placeholder signature from the member at `member_index`."""
    return RawSignature(
        public_key=KEY.members[member_index], signature=Bytes64(bytes([member_index]) * 64)
    )


def address_of(member_index: int) -> Address:
    return raw_address(KEY.members[member_index])


class TestAggregate:
    """Bits follow stored member order; signatures follow the bits."""

    def test_places_by_member_index(self) -> None:
        data = aggregate(KEY, {address_of(3): raw_for(3), address_of(1): raw_for(1)})
        assert data.bit_array.bits == (False, True, False, True, False)
        assert data.signatures == (bytes([1]) * 64, bytes([3]) * 64)

    def test_all_members(self) -> None:
        data = aggregate(KEY, {address_of(i): raw_for(i) for i in range(5)})
        assert data.bit_array.bits == (True,) * 5
        assert data.signatures == tuple(bytes([i]) * 64 for i in range(5))

    def test_below_threshold_is_not_checked(self) -> None:
        data = aggregate(KEY, {address_of(4): raw_for(4)})
        assert data.bit_array.set_indices() == (4,)

    def test_bech32_keys_accepted(self) -> None:
        data = aggregate(KEY, {address_of(2).to_bech32(): raw_for(2)})
        assert data.bit_array.set_indices() == (2,)

    def test_empty_mapping(self) -> None:
        with pytest.raises(NoSignaturesError) as exc_info:
            aggregate(KEY, {})
        assert exc_info.value.num_members == 5

    def test_non_member(self) -> None:
        outsider = make_signers(6)[5].public_key
        stranger = RawSignature(public_key=outsider, signature=Bytes64(b"\x09" * 64))
        with pytest.raises(UnknownSignerError) as exc_info:
            aggregate(KEY, {address_of(0): raw_for(0), raw_address(outsider): stranger})
        assert exc_info.value.address == raw_address(outsider).to_bech32()

    def test_public_key_must_match_address(self) -> None:
        with pytest.raises(UnknownSignerError, match="does not derive"):
            aggregate(KEY, {address_of(0): raw_for(1)})

    @given(st.permutations(range(5)), st.integers(min_value=1, max_value=5))
    def test_collection_order_is_irrelevant(self, order: list[int], count: int) -> None:
        chosen = order[:count]
        data = aggregate(KEY, {address_of(i): raw_for(i) for i in chosen})
        assert data.bit_array.count_set_bits() == len(data.signatures) == count
        assert data.signatures == tuple(bytes([i]) * 64 for i in sorted(chosen))


class TestMultisigSignatureData:
    """Encoding of the threshold signature slot."""

    def test_count_invariant(self) -> None:
        with pytest.raises(ValidationError, match="set bits"):
            MultisigSignatureData(
                bit_array=CompactBitArray.from_bits([True, True]), signatures=(b"\x01",)
            )

    def test_encode_bytes(self) -> None:
        data = aggregate(KEY, {address_of(0): raw_for(0)})
        assert data.encode_bytes() == b"\x0a\x40" + b"\x00" * 64

    def test_mode_info(self) -> None:
        data = aggregate(KEY, {address_of(0): raw_for(0), address_of(2): raw_for(2)})
        info = data.mode_info()
        assert isinstance(info, MultiModeInfo)
        assert info.bitarray == data.bit_array
        assert [m.mode for m in info.mode_infos] == [SignMode.LEGACY_AMINO_JSON] * 2

    def test_decode_inverts_encode(self) -> None:
        data = aggregate(KEY, {address_of(1): raw_for(1), address_of(4): raw_for(4)})
        assert MultisigSignatureData.decode(data.mode_info(), data.encode_bytes()) == data

    def test_decode_count_mismatch(self) -> None:
        data = aggregate(KEY, {address_of(1): raw_for(1)})
        with pytest.raises(DecodeError, match="1 signatures for 2 mode infos"):
            MultisigSignatureData.decode(
                aggregate(KEY, {address_of(1): raw_for(1), address_of(2): raw_for(2)}).mode_info(),
                data.encode_bytes(),
            )
