"""Tests for the command line."""

import pytest

from tests.txsign.helpers import make_fee, make_signers, make_threshold_key
from txsign.__main__ import main
from txsign.keys import SinglePublicKey, derive_address
from txsign.tx import (
    SignerInfo,
    SignMode,
    SingleModeInfo,
    build_signed_envelope,
    encode_for_broadcast,
    tx_hash,
)
from txsign.types import Uint64

SIGNERS = make_signers(3)
HEX_KEYS = [signer.public_key.key.hex() for signer in SIGNERS]


class TestAddress:
    """`address` subcommand."""

    def test_secp256k1(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["address", HEX_KEYS[0]]) == 0
        assert capsys.readouterr().out.strip() == derive_address(SIGNERS[0].public_key)

    def test_prefix(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--prefix", "wasm", "address", HEX_KEYS[0]]) == 0
        assert capsys.readouterr().out.startswith("wasm1")

    def test_ed25519(self, capsys: pytest.CaptureFixture[str]) -> None:
        key = "07" * 32
        assert main(["address", "--curve", "ed25519", key]) == 0
        expected = derive_address(SinglePublicKey.ed25519(bytes.fromhex(key)))
        assert capsys.readouterr().out.strip() == expected

    def test_invalid_key(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["address", "02abcd"]) == 1
        assert "error:" in capsys.readouterr().err


class TestMultisigAddress:
    """`multisig-address` subcommand."""

    def test_matches_library(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["multisig-address", "--threshold", "2", *reversed(HEX_KEYS)]) == 0
        expected = derive_address(make_threshold_key(SIGNERS, 2))
        assert capsys.readouterr().out.strip() == expected

    def test_lists_members_in_canonical_order(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["multisig-address", "--threshold", "1", "--members", *HEX_KEYS]) == 0
        lines = capsys.readouterr().out.splitlines()
        ordered = [member.key.hex() for member in make_threshold_key(SIGNERS, 1).members]
        assert [line.split()[1] for line in lines[1:]] == ordered

    def test_invalid_threshold(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["multisig-address", "--threshold", "4", *HEX_KEYS]) == 1
        assert "Threshold must satisfy" in capsys.readouterr().err


class TestDecode:
    """`decode` subcommand."""

    def test_prints_hash_and_signers(self, capsys: pytest.CaptureFixture[str]) -> None:
        info = SignerInfo(
            public_key=SIGNERS[0].public_key,
            mode_info=SingleModeInfo(mode=SignMode.LEGACY_AMINO_JSON),
            sequence=Uint64(6),
        )
        tx_bytes = encode_for_broadcast(
            build_signed_envelope(b"", make_fee(), [info], [b"\x01" * 64])
        )
        assert main(["decode", tx_bytes.hex()]) == 0
        out = capsys.readouterr().out
        assert f"hash: {tx_hash(tx_bytes)}" in out
        assert f"signer 0: {derive_address(SIGNERS[0].public_key)} seq=6" in out

    def test_garbage(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["decode", "0a05"]) == 1
        assert "Failed to decode" in capsys.readouterr().err
