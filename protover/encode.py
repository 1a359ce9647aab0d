"""
Canonical encoder for protocol sets.

The output is the unique textual form of a ProtocolSet: entries ascending by
name, ranges ascending and merged, singletons rendered as one integer. Two
sets describing the same capabilities always encode to the same bytes, which
is what lets authorities compare and sign these strings.
"""

from __future__ import annotations

from typing import Iterable

from .constants import ENTRY_SEPARATOR, NAME_VALUE_SEPARATOR, TOKEN_SEPARATOR
from .parse import parse_protocol_list
from .ranges import ProtocolEntry, ProtocolSet, VersionRange


def encode_ranges(ranges: Iterable[VersionRange]) -> str:
    return TOKEN_SEPARATOR.join(str(r) for r in ranges)


def encode_entry(entry: ProtocolEntry) -> str:
    return f"{entry.name}{NAME_VALUE_SEPARATOR}{encode_ranges(entry.ranges)}"


def encode_protocol_list(protocols: ProtocolSet) -> str:
    """Encode a ProtocolSet canonically. The empty set encodes to ""."""
    return ENTRY_SEPARATOR.join(encode_entry(e) for e in protocols.entries())


def canonicalize(text: str) -> str:
    """Return encode(parse(text)). Raises MalformedInput on bad input."""
    return encode_protocol_list(parse_protocol_list(text))


__all__ = ["encode_ranges", "encode_entry", "encode_protocol_list", "canonicalize"]
