"""Tests for coins, fees and the fee table."""

import pytest
from pydantic import ValidationError

from txsign.errors import DecodeError
from txsign.tx import DEFAULT_FEE_TABLE, Coin, Fee, FeeTable, single_amount_fee
from txsign.types import Uint64


class TestCoin:
    """Coin amounts are canonical decimal strings."""

    @pytest.mark.parametrize("amount", ["-1", "01", "1.5", "", "１"])
    def test_rejects_non_canonical_amounts(self, amount: str) -> None:
        with pytest.raises(ValidationError):
            Coin(denom="ucosm", amount=amount)

    def test_of(self) -> None:
        assert Coin.of(0, "ucosm") == Coin(denom="ucosm", amount="0")

    def test_decode_rejects_missing_amount(self) -> None:
        with pytest.raises(DecodeError, match="Coin"):
            Coin.decode_bytes(b"\x0a\x05ucosm")


class TestFee:
    """Amino and protobuf renderings of a fee."""

    def test_amino_omits_unset_payer_and_granter(self) -> None:
        fee = single_amount_fee(2000, "ucosm", 80_000)
        assert fee.to_amino() == {"amount": [{"amount": "2000", "denom": "ucosm"}], "gas": "80000"}

    def test_amino_includes_payer_and_granter(self) -> None:
        fee = Fee(gas_limit=Uint64(1), payer="p", granter="g")
        assert fee.to_amino() == {"amount": [], "gas": "1", "payer": "p", "granter": "g"}

    def test_protobuf_layout(self) -> None:
        fee = single_amount_fee(5, "u", 300)
        assert fee.encode_bytes() == b"\x0a\x06\x0a\x01u\x12\x015" + b"\x10\xac\x02"

    def test_decode_inverts_encode(self) -> None:
        fee = Fee(
            amount=(Coin.of(1, "a"), Coin.of(2, "b")),
            gas_limit=Uint64(99),
            payer="payer",
            granter="granter",
        )
        assert Fee.decode_bytes(fee.encode_bytes()) == fee

    def test_decode_rejects_unknown_field(self) -> None:
        with pytest.raises(DecodeError, match="unknown field 9"):
            Fee.decode_bytes(b"\x48\x01")


class TestFeeTable:
    """Fee table defaults and overrides."""

    def test_defaults(self) -> None:
        assert DEFAULT_FEE_TABLE.upload == single_amount_fee(25000, "ucosm", 1_000_000)
        assert DEFAULT_FEE_TABLE.init == single_amount_fee(12500, "ucosm", 500_000)
        assert DEFAULT_FEE_TABLE.exec == single_amount_fee(5000, "ucosm", 200_000)
        assert DEFAULT_FEE_TABLE.send == single_amount_fee(2000, "ucosm", 80_000)

    def test_merged_replaces_only_given_entries(self) -> None:
        cheap = single_amount_fee(1, "ucosm", 1)
        table = DEFAULT_FEE_TABLE.merged(send=cheap)
        assert table.send == cheap
        assert table.exec == DEFAULT_FEE_TABLE.exec
        assert DEFAULT_FEE_TABLE.send != cheap

    def test_merged_rejects_unknown_kind(self) -> None:
        with pytest.raises(KeyError, match="unknown fee kinds"):
            DEFAULT_FEE_TABLE.merged(transfer=single_amount_fee(1, "ucosm", 1))

    def test_merged_rejects_non_fee(self) -> None:
        with pytest.raises(TypeError, match="must be a Fee"):
            DEFAULT_FEE_TABLE.merged(send="free")  # type: ignore[arg-type]

    def test_for_kind(self) -> None:
        assert DEFAULT_FEE_TABLE.for_kind("init") == DEFAULT_FEE_TABLE.init
        with pytest.raises(KeyError):
            DEFAULT_FEE_TABLE.for_kind("nope")

    def test_table_is_explicit_model(self) -> None:
        with pytest.raises(ValidationError):
            FeeTable(upload=DEFAULT_FEE_TABLE.upload)  # type: ignore[call-arg]
