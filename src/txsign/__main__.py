"""
txsign command line.

Usage::

    python -m txsign address --curve secp256k1 02a1b2...
    python -m txsign multisig-address --threshold 2 02a1... 03b2... 02c3...
    python -m txsign decode 0a8f01...

Subcommands:
    address            Derive the address of a single public key
    multisig-address   Derive the address of a threshold key from its members
    decode             Decode hex TxRaw bytes and print its signers and hash
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from txsign.config import DEFAULT_ADDRESS_PREFIX
from txsign.errors import TxSignError
from txsign.keys import (
    Curve,
    SinglePublicKey,
    ThresholdPublicKey,
    create_threshold_public_key,
    derive_address,
)
from txsign.tx import MultiModeInfo, decode, tx_hash

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stderr."""
    level = logging.DEBUG if verbose else logging.WARNING

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def _parse_key(curve: Curve, text: str) -> SinglePublicKey:
    return SinglePublicKey(curve=curve, key=bytes.fromhex(text.removeprefix("0x")))


def cmd_address(args: argparse.Namespace) -> int:
    key = _parse_key(Curve(args.curve), args.pubkey)
    print(derive_address(key, args.prefix))
    return 0


def cmd_multisig_address(args: argparse.Namespace) -> int:
    curve = Curve(args.curve)
    members = [_parse_key(curve, text) for text in args.pubkeys]
    threshold_key = create_threshold_public_key(members, args.threshold)
    print(derive_address(threshold_key, args.prefix))
    if args.verbose_members:
        for index, member in enumerate(threshold_key.members):
            print(f"  {index}: {member.key.hex()} {derive_address(member, args.prefix)}")
    return 0


def cmd_decode(args: argparse.Namespace) -> int:
    tx_bytes = bytes.fromhex(args.tx.removeprefix("0x"))
    envelope = decode(tx_bytes)
    print(f"hash: {tx_hash(tx_bytes)}")
    print(f"fee: {envelope.fee.to_amino()}")
    for index, info in enumerate(envelope.signer_infos):
        line = f"signer {index}: {derive_address(info.public_key, args.prefix)} seq={info.sequence}"
        if isinstance(info.public_key, ThresholdPublicKey) and isinstance(
            info.mode_info, MultiModeInfo
        ):
            line += f" bits={info.mode_info.bitarray!r}"
        print(line)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="txsign",
        description="Transaction signing and multisig tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--prefix",
        default=DEFAULT_ADDRESS_PREFIX,
        help=f"Bech32 address prefix (default: {DEFAULT_ADDRESS_PREFIX})",
    )
    curves = [curve.value for curve in Curve]
    sub = parser.add_subparsers(dest="command", required=True)

    address = sub.add_parser("address", help="Derive a single key's address")
    address.add_argument("--curve", choices=curves, default=Curve.SECP256K1.value)
    address.add_argument("pubkey", help="Hex-encoded public key")
    address.set_defaults(func=cmd_address)

    multisig = sub.add_parser("multisig-address", help="Derive a threshold key's address")
    multisig.add_argument("--threshold", type=int, required=True)
    multisig.add_argument("--curve", choices=curves, default=Curve.SECP256K1.value)
    multisig.add_argument(
        "--members",
        dest="verbose_members",
        action="store_true",
        help="Also list members in their canonical order",
    )
    multisig.add_argument("pubkeys", nargs="+", help="Hex-encoded member public keys")
    multisig.set_defaults(func=cmd_multisig_address)

    decode_cmd = sub.add_parser("decode", help="Decode broadcast bytes")
    decode_cmd.add_argument("tx", help="Hex-encoded TxRaw bytes")
    decode_cmd.set_defaults(func=cmd_decode)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    try:
        return args.func(args)
    except (TxSignError, ValueError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
