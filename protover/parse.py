"""
Parser for exchangeable protocol lists.

    entry ::= name "=" spec
    spec  ::= token ("," token)*
    token ::= INTEGER | INTEGER "-" INTEGER
    list  ::= entry (" " entry)*

Inputs come from untrusted peers. The parser is strict: any malformed token
anywhere aborts the whole parse with a `MalformedInput` (or one of its
subclasses) and no partial result. Callers that must stay lenient (peer-list
checks, voting) catch the error themselves and treat the input as granting no
support.

Repeated names are legal; their ranges are merged into one entry.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .constants import (
    NAME_VALUE_SEPARATOR,
    RANGE_SEPARATOR,
    TOKEN_SEPARATOR,
    VERSION_MAX,
)
from .errors import EmptyInput, IntegerOutOfRange, InvalidRange, MalformedInput
from .ranges import ProtocolEntry, ProtocolSet, VersionRange, is_valid_name

# int() would also accept "+1", " 1" and "1_000"; the wire format does not.
_DIGITS = re.compile(r"[0-9]+")
# Longer digit runs (after leading zeros) cannot fit; int() is never reached for them.
_MAX_DIGITS = len(str(VERSION_MAX))


def _clip(text: Optional[str], limit: int = 32) -> Optional[str]:
    if text is None or len(text) <= limit:
        return text
    return f"{text[:limit]}...({len(text)} chars)"


def parse_version(text: str, *, entry: Optional[str] = None) -> int:
    """Parse one non-negative 32-bit version number."""
    if not _DIGITS.fullmatch(text):
        raise MalformedInput(f"invalid version number {text!r}", entry=entry, token=text)
    digits = text.lstrip("0") or "0"
    if len(digits) > _MAX_DIGITS:
        raise IntegerOutOfRange(
            f"version with {len(digits)} significant digits does not fit in 32 bits",
            entry=_clip(entry),
            token=_clip(text),
        )
    value = int(digits)
    if value > VERSION_MAX:
        raise IntegerOutOfRange.for_value(value, token=text, entry=entry)
    return value


def parse_version_token(token: str, *, entry: Optional[str] = None) -> VersionRange:
    """Parse `N` or `LOW-HIGH` into a VersionRange."""
    if not token:
        raise MalformedInput("empty version token", entry=entry, token=token)
    if RANGE_SEPARATOR in token:
        low_s, _, high_s = token.partition(RANGE_SEPARATOR)
        low = parse_version(low_s, entry=entry)
        high = parse_version(high_s, entry=entry)
        if low > high:
            raise InvalidRange.for_bounds(low, high, token=token, entry=entry)
        return VersionRange(low, high)
    v = parse_version(token, entry=entry)
    return VersionRange(v, v)


def parse_version_spec(spec: str, *, entry: Optional[str] = None) -> Tuple[VersionRange, ...]:
    """Parse a comma-separated version spec; the result is not yet merged."""
    if not spec:
        raise MalformedInput("empty version spec", entry=entry)
    return tuple(parse_version_token(tok, entry=entry) for tok in spec.split(TOKEN_SEPARATOR))


def parse_entry(text: str) -> ProtocolEntry:
    """Parse a single `Name=spec` entry."""
    if text.count(NAME_VALUE_SEPARATOR) != 1:
        raise MalformedInput("entry must contain exactly one '='", entry=text)
    name, _, spec = text.partition(NAME_VALUE_SEPARATOR)
    if not is_valid_name(name):
        raise MalformedInput(f"invalid protocol name {name!r}", entry=text)
    return ProtocolEntry(name, parse_version_spec(spec, entry=text))


def parse_protocol_list(text: str, *, require_nonempty: bool = False) -> ProtocolSet:
    """
    Parse a whole protocol list into a ProtocolSet.

    Runs of whitespace between entries are tolerated. An empty list yields the
    empty set unless `require_nonempty` is set, in which case `EmptyInput` is
    raised.
    """
    if not isinstance(text, str):
        raise MalformedInput(f"protocol list must be a string, got {type(text).__name__}")
    entries: List[ProtocolEntry] = [parse_entry(chunk) for chunk in text.split()]
    if require_nonempty and not entries:
        raise EmptyInput("protocol list is empty")
    return ProtocolSet(entries)


__all__ = [
    "parse_version",
    "parse_version_token",
    "parse_version_spec",
    "parse_entry",
    "parse_protocol_list",
]
