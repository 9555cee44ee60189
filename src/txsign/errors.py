"""
Exception hierarchy for transaction signing and multisignature aggregation.

Every failure is raised synchronously to the caller that triggered it. Each
exception carries enough structured context (which signer, which stage, which
value) for the caller to act without parsing the message.

A rejection reported by the remote ledger is *not* an exception here: it is a
`BroadcastResult` with a non-zero code. `BroadcastRejectedError` exists only
for callers that opt into exceptions via `BroadcastResult.raise_for_code()`.
"""

from __future__ import annotations


class TxSignError(Exception):
    """
    Base exception for all errors raised by this package.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class InvalidThresholdError(TxSignError):
    """
    Raised when multisig parameters are malformed.

    Attributes:
        threshold: The requested threshold.
        num_members: Number of member keys supplied.
        detail: Extra context when the problem is not the range itself.
    """

    def __init__(self, threshold: int, num_members: int, *, detail: str | None = None) -> None:
        self.threshold = threshold
        self.num_members = num_members
        self.detail = detail

        if detail:
            msg = f"Invalid threshold key ({threshold}-of-{num_members}): {detail}"
        else:
            msg = (
                f"Threshold must satisfy 1 <= threshold <= {num_members}, got {threshold}"
            )
        super().__init__(msg)


class UnknownSignerError(TxSignError):
    """
    Raised when a collected signature cannot be placed in the multisig.

    Attributes:
        address: Bech32 or hex form of the offending address.
        detail: Why the signature could not be placed.
    """

    def __init__(self, address: str, *, detail: str | None = None) -> None:
        self.address = address
        self.detail = detail

        msg = f"Signature from {address} does not belong to any member of the threshold key"
        if detail:
            msg = f"Cannot place signature from {address}: {detail}"
        super().__init__(msg)


class NoSignaturesError(TxSignError):
    """Raised when aggregation is attempted without a single signature."""

    def __init__(self, num_members: int) -> None:
        self.num_members = num_members
        super().__init__(f"No signatures to aggregate for a {num_members}-member threshold key")


class MalformedEnvelopeError(TxSignError):
    """
    Raised when signer infos and signatures do not correspond one-to-one.

    Attributes:
        num_signer_infos: Number of signer infos supplied.
        num_signatures: Number of signature slots supplied.
    """

    def __init__(self, num_signer_infos: int, num_signatures: int) -> None:
        self.num_signer_infos = num_signer_infos
        self.num_signatures = num_signatures
        super().__init__(
            f"Envelope has {num_signer_infos} signer infos but {num_signatures} signatures"
        )


class SigningFailedError(TxSignError):
    """
    Raised when an external signing capability fails or refuses.

    Attributes:
        signer: Address of the signer whose capability failed.
        stage: Which step failed (e.g. "sign", "verify-output").
        detail: Description of the failure.
    """

    def __init__(self, signer: str, stage: str, detail: str) -> None:
        self.signer = signer
        self.stage = stage
        self.detail = detail
        super().__init__(f"Signing failed for {signer} during {stage}: {detail}")


class DecodeError(TxSignError):
    """
    Raised when decoding bytes to a value fails.

    Attributes:
        type_name: The type being decoded.
        detail: Description of what went wrong.
        offset: The byte offset where the error occurred (if known).
    """

    def __init__(self, type_name: str, detail: str, *, offset: int | None = None) -> None:
        self.type_name = type_name
        self.detail = detail
        self.offset = offset

        msg = f"Failed to decode {type_name}: {detail}"
        if offset is not None:
            msg = f"{msg} (at byte offset {offset})"
        super().__init__(msg)


class AccountNotFoundError(TxSignError):
    """
    Raised when an address has no on-chain account.

    An address without account state cannot sign: there is no account number
    or sequence to bind the signature to.
    """

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(
            f"Account {address} does not exist on chain. "
            "Send some tokens there before trying to sign for it."
        )


class BroadcastRejectedError(TxSignError):
    """
    Raised on request when the ledger rejected a transaction.

    Attributes:
        code: The non-zero result code.
        codespace: Module that produced the code (may be empty).
        raw_log: The ledger's reason, verbatim.
        tx_hash: Transaction identifier, when the ledger returned one.
    """

    def __init__(self, code: int, raw_log: str, *, codespace: str = "", tx_hash: str = "") -> None:
        self.code = code
        self.codespace = codespace
        self.raw_log = raw_log
        self.tx_hash = tx_hash
        super().__init__(f"Error when posting tx {tx_hash}. Code: {code}; Raw log: {raw_log}")


class TransportError(TxSignError):
    """
    Raised when a node cannot be reached or answers with an unusable response.

    Attributes:
        url: The request URL.
        status_code: HTTP status, when a response was received.
    """

    def __init__(self, url: str, detail: str, *, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        self.detail = detail

        msg = f"Request to {url} failed: {detail}"
        if status_code is not None:
            msg = f"Request to {url} failed with HTTP {status_code}: {detail}"
        super().__init__(msg)
