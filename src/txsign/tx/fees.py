"""
Coins, fees, and the fee table.

The fee table is plain configuration: a model with one named `Fee` per kind
of transaction. Callers pass a table explicitly; `DEFAULT_FEE_TABLE` is only
a starting point.
"""

from __future__ import annotations

from typing import Any

from pydantic import field_validator
from typing_extensions import Self

from txsign.encoding import protobuf as pb
from txsign.errors import DecodeError
from txsign.types import StrictBaseModel, Uint64


class Coin(StrictBaseModel):
    """An amount of one denomination. Amounts are decimal strings."""

    denom: str
    amount: str

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, v: str) -> str:
        """Amounts are non-negative integers without sign or leading zeros."""
        if not v.isascii() or not v.isdigit() or (len(v) > 1 and v[0] == "0"):
            raise ValueError(f"coin amount must be a non-negative integer string, got {v!r}")
        return v

    @classmethod
    def of(cls, amount: int, denom: str) -> Self:
        """Build a coin from an integer amount."""
        return cls(denom=denom, amount=str(amount))

    def to_amino(self) -> dict[str, Any]:
        return {"amount": self.amount, "denom": self.denom}

    def encode_bytes(self) -> bytes:
        return pb.encode_string(1, self.denom) + pb.encode_string(2, self.amount)

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        denom = amount = ""
        for field in pb.iter_fields(data, "Coin"):
            if field.number == 1:
                denom = pb.expect_string(field, "Coin")
            elif field.number == 2:
                amount = pb.expect_string(field, "Coin")
            else:
                raise pb.unknown_field(field, "Coin")
        try:
            return cls(denom=denom, amount=amount)
        except ValueError as exc:
            raise DecodeError("Coin", str(exc)) from exc


class Fee(StrictBaseModel):
    """Fee paid for a transaction: coins plus a gas limit."""

    amount: tuple[Coin, ...] = ()
    """Coins paid."""

    gas_limit: Uint64 = Uint64(0)
    """Maximum gas the transaction may consume."""

    payer: str = ""
    """Optional fee payer address (empty means the first signer)."""

    granter: str = ""
    """Optional fee granter address."""

    def to_amino(self) -> dict[str, Any]:
        """
        Legacy amino JSON form used inside sign documents.

        `payer` and `granter` appear only when set, matching the ledger's
        `StdFee` JSON.
        """
        fee: dict[str, Any] = {
            "amount": [coin.to_amino() for coin in self.amount],
            "gas": str(self.gas_limit),
        }
        if self.payer:
            fee["payer"] = self.payer
        if self.granter:
            fee["granter"] = self.granter
        return fee

    def encode_bytes(self) -> bytes:
        """Protobuf `Fee{amount=1, gas_limit=2, payer=3, granter=4}`."""
        return (
            pb.encode_repeated(1, [coin.encode_bytes() for coin in self.amount])
            + pb.encode_uint(2, int(self.gas_limit))
            + pb.encode_string(3, self.payer)
            + pb.encode_string(4, self.granter)
        )

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        coins: list[Coin] = []
        gas_limit = 0
        payer = granter = ""
        for field in pb.iter_fields(data, "Fee"):
            match field.number:
                case 1:
                    coins.append(Coin.decode_bytes(pb.expect_bytes(field, "Fee")))
                case 2:
                    gas_limit = pb.expect_varint(field, "Fee")
                case 3:
                    payer = pb.expect_string(field, "Fee")
                case 4:
                    granter = pb.expect_string(field, "Fee")
                case _:
                    raise pb.unknown_field(field, "Fee")
        return cls(amount=tuple(coins), gas_limit=Uint64(gas_limit), payer=payer, granter=granter)


def single_amount_fee(amount: int, denom: str, gas_limit: int) -> Fee:
    """A fee paying `amount` of one denomination."""
    return Fee(amount=(Coin.of(amount, denom),), gas_limit=Uint64(gas_limit))


class FeeTable(StrictBaseModel):
    """Default fee per kind of transaction."""

    upload: Fee
    """Storing contract code."""

    init: Fee
    """Instantiating a contract."""

    exec: Fee
    """Executing a contract message."""

    send: Fee
    """Plain token transfers."""

    def merged(self, **overrides: Fee) -> FeeTable:
        """Return a table with some entries replaced."""
        unknown = set(overrides) - set(type(self).model_fields)
        if unknown:
            raise KeyError(f"unknown fee kinds: {sorted(unknown)}")
        for kind, fee in overrides.items():
            if not isinstance(fee, Fee):
                raise TypeError(f"fee for {kind!r} must be a Fee, got {type(fee).__name__}")
        return self.model_copy(update=overrides)

    def for_kind(self, kind: str) -> Fee:
        """Look up a fee by name (`"upload"`, `"init"`, `"exec"`, `"send"`)."""
        if kind not in type(self).model_fields:
            raise KeyError(f"unknown fee kind {kind!r}")
        return getattr(self, kind)


DEFAULT_FEE_TABLE = FeeTable(
    upload=single_amount_fee(25000, "ucosm", 1_000_000),
    init=single_amount_fee(12500, "ucosm", 500_000),
    exec=single_amount_fee(5000, "ucosm", 200_000),
    send=single_amount_fee(2000, "ucosm", 80_000),
)
"""Fees for a development chain using the `ucosm` denomination."""
