"""
Interpreting what the ledger says about a submitted transaction.

A rejection is data, not an exception: `interpret_broadcast` always returns a
`BroadcastResult`, and callers branch on `is_success`. Those who prefer
exceptions call `raise_for_code()`.

Execution logs are structured as:

    [{"msg_index": 0, "log": "", "events": [
        {"type": "message", "attributes": [{"key": "action", "value": "send"}]}]}]
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping, Sequence

from pydantic import ValidationError

from txsign.errors import BroadcastRejectedError, DecodeError
from txsign.types import StrictBaseModel

logger = logging.getLogger(__name__)

_TX_HASH = re.compile(r"^(?:[0-9A-F]{2})+$")


class Attribute(StrictBaseModel):
    key: str
    value: str = ""


class Event(StrictBaseModel):
    type: str
    attributes: tuple[Attribute, ...] = ()


class Log(StrictBaseModel):
    """Execution log of one message."""

    msg_index: int = 0
    log: str = ""
    events: tuple[Event, ...] = ()


def _parse_log(raw: Any) -> Log:
    if not isinstance(raw, Mapping):
        raise DecodeError("Log", f"expected an object, got {type(raw).__name__}")
    events = []
    for raw_event in raw.get("events") or ():
        if not isinstance(raw_event, Mapping) or not isinstance(raw_event.get("type"), str):
            raise DecodeError("Log", f"malformed event {raw_event!r}")
        attributes = []
        for attr in raw_event.get("attributes") or ():
            if not isinstance(attr, Mapping) or not isinstance(attr.get("key"), str):
                raise DecodeError("Log", f"malformed attribute {attr!r}")
            attributes.append(Attribute(key=attr["key"], value=str(attr.get("value") or "")))
        events.append(Event(type=raw_event["type"], attributes=tuple(attributes)))
    try:
        return Log(
            msg_index=int(raw.get("msg_index") or 0),
            log=str(raw.get("log") or ""),
            events=tuple(events),
        )
    except (TypeError, ValueError) as exc:
        raise DecodeError("Log", str(exc)) from exc


def parse_logs(raw: Any) -> tuple[Log, ...]:
    """
    Parse execution logs.

    Args:
        raw: A list of log objects, a JSON string holding one, or None.

    Raises:
        DecodeError: If the input does not have the log structure.
    """
    if raw is None or raw == "":
        return ()
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise DecodeError("Log", f"not JSON: {exc}") from exc
    if not isinstance(raw, Sequence) or isinstance(raw, (str, bytes)):
        raise DecodeError("Log", f"expected a list of logs, got {type(raw).__name__}")
    return tuple(_parse_log(entry) for entry in raw)


def find_attribute(logs: Sequence[Log], event_type: str, key: str) -> Attribute:
    """
    Find the first attribute `key` of an event of type `event_type`.

    Raises:
        LookupError: If no log carries such an attribute.
    """
    for log in logs:
        for event in log.events:
            if event.type != event_type:
                continue
            for attribute in event.attributes:
                if attribute.key == key:
                    return attribute
    raise LookupError(f"Could not find attribute {key!r} in event {event_type!r}")


class BroadcastResult(StrictBaseModel):
    """Outcome of submitting a transaction."""

    code: int
    """0 on acceptance, otherwise the rejection code."""

    tx_hash: str = ""
    """Upper-case hex transaction identifier (may be empty on early rejection)."""

    raw_log: str = ""
    """The ledger's log text, verbatim."""

    logs: tuple[Log, ...] = ()
    """Structured execution logs (accepted transactions only)."""

    codespace: str = ""
    """Module namespace of `code`."""

    @property
    def is_success(self) -> bool:
        return self.code == 0

    def raise_for_code(self) -> BroadcastResult:
        """
        Return self when accepted.

        Raises:
            BroadcastRejectedError: If the ledger rejected the transaction.
        """
        if not self.is_success:
            raise BroadcastRejectedError(
                self.code, self.raw_log, codespace=self.codespace, tx_hash=self.tx_hash
            )
        return self


def interpret_broadcast(raw: Mapping[str, Any]) -> BroadcastResult:
    """
    Classify a raw submission response.

    Accepts both the legacy (`txhash`, `raw_log`) and the gateway
    (`tx_response`) shapes.

    Raises:
        DecodeError: If the code is not an integer, the hash is not upper-case
            hex, or the logs are malformed.
    """
    if "tx_response" in raw and isinstance(raw["tx_response"], Mapping):
        raw = raw["tx_response"]

    code = raw.get("code") or 0
    if isinstance(code, bool) or not isinstance(code, int) or code < 0:
        raise DecodeError("BroadcastResult", f"invalid result code {code!r}")

    tx_hash = str(raw.get("txhash") or raw.get("tx_hash") or "")
    if tx_hash and not _TX_HASH.match(tx_hash):
        raise DecodeError(
            "BroadcastResult", f"ill-formatted tx hash {tx_hash!r}: must be upper-case hex"
        )

    raw_log = raw.get("raw_log") or ""
    logs = parse_logs(raw.get("logs")) if code == 0 else ()

    try:
        result = BroadcastResult(
            code=code,
            tx_hash=tx_hash,
            raw_log=str(raw_log),
            logs=logs,
            codespace=str(raw.get("codespace") or ""),
        )
    except ValidationError as exc:
        raise DecodeError("BroadcastResult", str(exc)) from exc

    if result.is_success:
        logger.info("Transaction %s accepted", tx_hash)
    else:
        logger.warning("Transaction %s rejected with code %d: %s", tx_hash, code, raw_log)
    return result
