"""
Canonical JSON used for legacy amino sign documents.

The ledger re-creates the sign document from the decoded transaction and
serializes it with Go's `encoding/json` after sorting object keys. To match
byte-for-byte:

- object keys are sorted recursively, never taken in insertion order;
- no insignificant whitespace;
- non-ASCII characters are emitted as UTF-8, not `\\u` escapes;
- `&`, `<`, `>`, U+2028 and U+2029 are escaped as `\\uXXXX` the way Go does.
"""

from __future__ import annotations

import json
from typing import Any

_GO_ESCAPES = {
    "&": "\\u0026",
    "<": "\\u003c",
    ">": "\\u003e",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def sorted_json(value: Any) -> str:
    """
    Serialize `value` as compact JSON with recursively sorted keys.

    Raises:
        TypeError: If `value` contains something JSON cannot represent.
        ValueError: If `value` contains NaN or infinities.
    """
    text = json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    for char, escaped in _GO_ESCAPES.items():
        text = text.replace(char, escaped)
    return text


def canonical_bytes(value: Any) -> bytes:
    """UTF-8 bytes of `sorted_json(value)`."""
    return sorted_json(value).encode("utf-8")
