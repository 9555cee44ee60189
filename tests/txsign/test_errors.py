"""Tests for the exception hierarchy."""

import pytest

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


@pytest.mark.parametrize(
    "error",
    [
        InvalidThresholdError(0, 3),
        UnknownSignerError("cosmos1x"),
        NoSignaturesError(3),
        MalformedEnvelopeError(1, 2),
        SigningFailedError("cosmos1x", "sign", "refused"),
        DecodeError("TxRaw", "truncated", offset=4),
        AccountNotFoundError("cosmos1x"),
        BroadcastRejectedError(5, "insufficient funds"),
        TransportError("http://node", "timeout"),
    ],
)
def test_all_errors_share_a_root(error: TxSignError) -> None:
    """Every error is catchable as `TxSignError` and carries its message."""
    assert isinstance(error, TxSignError)
    assert str(error) == error.message
    assert repr(error).startswith(type(error).__name__)


def test_decode_error_offset() -> None:
    assert str(DecodeError("TxRaw", "truncated", offset=4)) == (
        "Failed to decode TxRaw: truncated (at byte offset 4)"
    )


def test_signing_failed_error_fields() -> None:
    error = SigningFailedError("cosmos1x", "verify-output", "short")
    assert (error.signer, error.stage, error.detail) == ("cosmos1x", "verify-output", "short")


def test_invalid_threshold_detail() -> None:
    error = InvalidThresholdError(2, 2, detail="duplicate member key")
    assert "duplicate member key" in str(error)
    assert error.detail == "duplicate member key"
