"""
Support queries against the local table and against peer-supplied lists.

Peer-supplied strings are untrusted. Every function here that parses one
catches the parser's failure and treats the input as granting no support: an
outdated or adversarial peer must not be able to abort the caller. Rejections
are logged at DEBUG with the offending entry in the record's extras.

Types may be given as a `ProtocolType`, its stable ordinal, or its canonical
name; anything else is a caller bug and raises ValueError.
"""

from __future__ import annotations

from typing import List, Tuple

from .encode import encode_protocol_list
from .errors import MalformedInput
from .logging import get_logger
from .parse import parse_protocol_list
from .ranges import ProtocolEntry, ProtocolSet, ranges_support, subtract_ranges
from .supported import get_support_table
from .types import ProtocolTypeLike, coerce_protocol_type

log = get_logger(__name__)


def is_supported_here(pt: ProtocolTypeLike, version: int) -> bool:
    """True iff this implementation natively supports `version` of `pt`."""
    return get_support_table().supports(pt, version)


def _parse_untrusted(text: str) -> ProtocolSet | None:
    try:
        return parse_protocol_list(text)
    except MalformedInput as e:
        log.debug("rejected protocol list", extra={"error": e.to_dict()})
        return None


def protocol_list_supports_protocol(text: str, pt: ProtocolTypeLike, version: int) -> bool:
    """True iff the protocol list `text` includes `version` of `pt`."""
    name = coerce_protocol_type(pt).canonical_name
    protocols = _parse_untrusted(text)
    if protocols is None:
        return False
    entry = protocols.get(name)
    return entry is not None and ranges_support(entry, version)


list_supports = protocol_list_supports_protocol


def protocol_list_supports_protocol_or_later(text: str, pt: ProtocolTypeLike, version: int) -> bool:
    """True iff `text` advertises `version` of `pt` or any later version."""
    name = coerce_protocol_type(pt).canonical_name
    protocols = _parse_untrusted(text)
    if protocols is None:
        return False
    entry = protocols.get(name)
    return entry is not None and entry.ranges[-1].high >= version


def all_supported(text: str) -> Tuple[bool, str]:
    """
    Check whether we support every protocol version listed in `text`.

    Returns (True, "") if so. Otherwise returns False plus the canonical
    encoding of everything we lack. Names we do not recognize are missing in
    full. If `text` cannot be parsed, the whole (whitespace-normalized) input
    is reported missing.
    """
    protocols = _parse_untrusted(text)
    if protocols is None:
        return False, " ".join(text.split()) if isinstance(text, str) else ""

    table = get_support_table()
    missing: List[ProtocolEntry] = []
    for entry in protocols.entries():
        local = table.entry_for(entry.name)
        lacking = subtract_ranges(entry.ranges, local.ranges if local else ())
        if lacking:
            missing.append(ProtocolEntry(entry.name, lacking))

    if not missing:
        return True, ""
    encoded = encode_protocol_list(ProtocolSet(missing))
    log.debug("peer requires protocols we lack", extra={"missing": encoded})
    return False, encoded


__all__ = [
    "is_supported_here",
    "protocol_list_supports_protocol",
    "list_supports",
    "protocol_list_supports_protocol_or_later",
    "all_supported",
]
