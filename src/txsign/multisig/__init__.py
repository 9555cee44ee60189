"""Signature aggregation for threshold keys."""

from .aggregation import MultisigSignatureData, RawSignature, aggregate

__all__ = ["MultisigSignatureData", "RawSignature", "aggregate"]
